"""
Base Domain Classes

- Entity: object with identity (the id is assigned by the record store)
- ValueObject: immutable object compared by value
- Aggregate: consistency boundary that records domain events
- DomainEvent: something that happened, published after commit
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List
from uuid import UUID, uuid4


@dataclass(eq=False)
class Entity(ABC):
    """
    Base class for all entities

    `id` stays None until the entity has been persisted. Two persisted
    entities are equal if their ids are equal; unsaved ones only equal
    themselves.
    """
    id: Any = None

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self):
        if self.id is None:
            return id(self)
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable, identity-less, compared attribute by attribute."""
    pass


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Collects domain events which the unit of work publishes once the
    surrounding transaction has committed.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Copy of the pending events"""
        return self._events.copy()


def _serialize(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, ValueObject):
        return str(value)
    return value


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Subclasses declare their payload as keyword-only fields.
    """
    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(default_factory=datetime.now, kw_only=True)
    aggregate_id: Any = field(default=None, kw_only=True)

    def to_dict(self) -> dict:
        """Flatten the event for logging or a broker payload"""
        payload = {
            f.name: _serialize(getattr(self, f.name))
            for f in fields(self)
            if f.name not in ('event_id', 'occurred_at', 'aggregate_id')
        }
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': _serialize(self.aggregate_id),
            'payload': payload,
        }

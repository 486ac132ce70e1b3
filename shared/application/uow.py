"""
Unit of Work Pattern

One unit of work wraps every multi-record write of a use case. Either all
writes persist or none do, and domain events are published only after the
outermost commit.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Transaction boundary that also buffers domain events"""

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self):
        self._begin()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._end(exc_type, exc_val, exc_tb)
        return False

    def _begin(self):
        pass

    def _end(self, exc_type, exc_val, exc_tb):
        pass

    @abstractmethod
    def commit(self):
        pass

    def rollback(self):
        logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()

    def collect_events(self, aggregate):
        """Move pending events from the aggregate into this unit of work"""
        new_events = getattr(aggregate, 'events', None)
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
            )

    def _drain_events(self) -> List[DomainEvent]:
        events = self._events.copy()
        self._events.clear()
        return events

    @staticmethod
    def _publish_events(events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        message_bus.publish_events(events)


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Wraps transaction.atomic(); nested units become savepoints. Events are
    handed to transaction.on_commit() so they fire only once the outermost
    transaction commits.
    """

    def __init__(self, using: str | None = None):
        super().__init__()
        self._using = using
        self._transaction = None

    def _begin(self):
        self._transaction = transaction.atomic(using=self._using)
        self._transaction.__enter__()

    def _end(self, exc_type, exc_val, exc_tb):
        if self._transaction:
            self._transaction.__exit__(exc_type, exc_val, exc_tb)
            self._transaction = None

    def commit(self):
        events = self._drain_events()
        logger.debug(f"Committing transaction with {len(events)} events")
        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self._using)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """
    Unit of Work over an InMemoryRecordStore

    Holds the store's re-entrant lock for its whole lifetime, which
    serializes concurrent writers, and restores a snapshot of the tables
    on rollback. Nested units hand their events to the enclosing one.
    """

    def __init__(self, store):
        super().__init__()
        self._store = store
        self._snapshot = None
        self._parent = None

    def _begin(self):
        self._store._lock.acquire()
        stack = self._store._uow_stack
        self._parent = stack[-1] if stack else None
        stack.append(self)
        self._snapshot = self._store._snapshot()

    def _end(self, exc_type, exc_val, exc_tb):
        try:
            self._store._uow_stack.remove(self)
        finally:
            self._store._lock.release()

    def commit(self):
        events = self._drain_events()
        if self._parent is not None:
            self._parent._events.extend(events)
            return
        logger.debug(f"Committing in-memory transaction with {len(events)} events")
        if events:
            self._publish_events(events)

    def rollback(self):
        if self._snapshot is not None:
            self._store._restore(self._snapshot)
        super().rollback()

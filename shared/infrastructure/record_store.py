"""
Record Store

The persistence collaborator of the booking engine. Records are plain dicts
keyed by column name (foreign keys by their `<name>_id` attribute), tables
are addressed by name: `cars`, `bookings`, `booking_history`.

Two implementations share one contract:
- DjangoRecordStore: the ORM, with row locks via SELECT ... FOR UPDATE
- InMemoryRecordStore: dict tables guarded by a re-entrant lock
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from shared.domain.value_objects import as_date

logger = logging.getLogger(__name__)

TABLE_MODELS = {
    'cars': 'fleet.Vehicle',
    'bookings': 'bookings.Booking',
    'booking_history': 'bookings.BookingHistory',
}

APPEND_ONLY_TABLES = frozenset({'booking_history'})


class RecordNotFoundError(LookupError):
    """No record with the given id exists in the table."""


class ImmutableRecordError(RuntimeError):
    """Attempt to change a record of an append-only table."""


class AbstractRecordStore(ABC):
    """Read/write/query operations the booking engine relies on"""

    @abstractmethod
    def atomic(self):
        """Return a unit of work; use it as a context manager"""

    @abstractmethod
    def get(self, table: str, record_id, *, for_update: bool = False) -> dict | None:
        """Fetch one record; `for_update` locks it until the unit of work ends"""

    @abstractmethod
    def query_by_field(self, table: str, field: str, value) -> List[dict]:
        pass

    @abstractmethod
    def query_by_range_overlap(
        self,
        table: str,
        vehicle_field: str,
        vehicle_id,
        start_field: str,
        end_field: str,
        candidate_start,
        candidate_end,
    ) -> List[dict]:
        """Records of one vehicle whose inclusive range touches the candidate"""

    @abstractmethod
    def insert(self, table: str, record: dict) -> dict:
        pass

    @abstractmethod
    def update(self, table: str, record_id, patch: dict) -> dict:
        pass

    def _guard_append_only(self, table: str):
        if table in APPEND_ONLY_TABLES:
            raise ImmutableRecordError(f"Table {table} is append-only")


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""
    from django.db import transaction
    from django.db.utils import NotSupportedError

    if not transaction.get_connection(queryset.db).in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class DjangoRecordStore(AbstractRecordStore):
    """Record store backed by the Django ORM"""

    def __init__(self, using: str | None = None):
        self._using = using

    def _model(self, table: str):
        from django.apps import apps

        try:
            label = TABLE_MODELS[table]
        except KeyError:
            raise LookupError(f"Unknown table {table}") from None
        return apps.get_model(label)

    def _queryset(self, table: str):
        manager = self._model(table).objects
        return manager.using(self._using) if self._using else manager.all()

    def atomic(self):
        from shared.application.uow import DjangoUnitOfWork

        return DjangoUnitOfWork(using=self._using)

    def get(self, table, record_id, *, for_update=False):
        queryset = self._queryset(table).filter(pk=record_id)
        if for_update:
            queryset = _lock_queryset_if_possible(queryset)
        return queryset.values().first()

    def query_by_field(self, table, field, value):
        return list(self._queryset(table).filter(**{field: value}).order_by('pk').values())

    def query_by_range_overlap(
        self, table, vehicle_field, vehicle_id, start_field, end_field, candidate_start, candidate_end
    ):
        queryset = self._queryset(table).filter(**{
            vehicle_field: vehicle_id,
            f'{start_field}__lte': as_date(candidate_end),
            f'{end_field}__gte': as_date(candidate_start),
        })
        return list(queryset.order_by(start_field, 'pk').values())

    def insert(self, table, record):
        instance = self._model(table)(**record)
        instance.save(using=self._using)
        return self._queryset(table).filter(pk=instance.pk).values().get()

    def update(self, table, record_id, patch):
        self._guard_append_only(table)
        model = self._model(table)
        try:
            instance = self._queryset(table).get(pk=record_id)
        except model.DoesNotExist:
            raise RecordNotFoundError(f"{table} record {record_id} not found") from None

        for field_name, value in patch.items():
            setattr(instance, field_name, value)
        update_fields = list(patch)
        if any(f.name == 'updated_at' for f in model._meta.concrete_fields):
            update_fields.append('updated_at')
        instance.save(update_fields=update_fields, using=self._using)
        return self._queryset(table).filter(pk=record_id).values().get()


class InMemoryRecordStore(AbstractRecordStore):
    """
    Thread-safe record store kept in process memory

    Used by tests and scripts. Integer ids are assigned per table.
    Holding a unit of work holds the store lock, so concurrent writers run
    one after another.
    """

    def __init__(self):
        self._tables: Dict[str, Dict[Any, dict]] = {name: {} for name in TABLE_MODELS}
        self._sequences = {name: itertools.count(1) for name in TABLE_MODELS}
        self._lock = threading.RLock()
        self._uow_stack: list = []

    def _table(self, table: str) -> Dict[Any, dict]:
        try:
            return self._tables[table]
        except KeyError:
            raise LookupError(f"Unknown table {table}") from None

    def _snapshot(self):
        return copy.deepcopy(self._tables)

    def _restore(self, snapshot):
        self._tables = snapshot

    def atomic(self):
        from shared.application.uow import InMemoryUnitOfWork

        return InMemoryUnitOfWork(self)

    def get(self, table, record_id, *, for_update=False):
        with self._lock:
            record = self._table(table).get(record_id)
            return dict(record) if record is not None else None

    def query_by_field(self, table, field, value):
        with self._lock:
            return [
                dict(record)
                for _, record in sorted(self._table(table).items())
                if record.get(field) == value
            ]

    def query_by_range_overlap(
        self, table, vehicle_field, vehicle_id, start_field, end_field, candidate_start, candidate_end
    ):
        start, end = as_date(candidate_start), as_date(candidate_end)
        with self._lock:
            matches = [
                dict(record)
                for record in self._table(table).values()
                if record.get(vehicle_field) == vehicle_id
                and as_date(record[start_field]) <= end
                and as_date(record[end_field]) >= start
            ]
        return sorted(matches, key=lambda r: (as_date(r[start_field]), r['id']))

    def insert(self, table, record):
        with self._lock:
            rows = self._table(table)
            stored = dict(record)
            if stored.get('id') is None:
                stored['id'] = next(self._sequences[table])
                while stored['id'] in rows:
                    stored['id'] = next(self._sequences[table])
            elif stored['id'] in rows:
                raise ValueError(f"Duplicate id {stored['id']} in {table}")
            rows[stored['id']] = stored
            logger.debug(f"Inserted {table} record {stored['id']}")
            return dict(stored)

    def update(self, table, record_id, patch):
        self._guard_append_only(table)
        with self._lock:
            rows = self._table(table)
            if record_id not in rows:
                raise RecordNotFoundError(f"{table} record {record_id} not found")
            rows[record_id] = {**rows[record_id], **patch}
            return dict(rows[record_id])

"""
Habit Tracker Backend — In-Memory Record Store
===============================================

What:  Authoritative keyed collection of HabitRecord instances.
Why:   Centralizes all persisted state in one place, behind a small API that
       answers the questions HabitService needs to enforce its rules.
How:   A dict keyed by habit id, guarded by a re-entrant lock. Every read
       returns a copy, so callers can never mutate stored records in place.
Who:   Created once by the application factory and handed to HabitService,
       which is the only component that writes to it.
When:  Lives as long as the application object; tests build a fresh one.

Concurrency:
    Individual methods are atomic on their own. Sequences such as
    "count active, then insert" must run inside `transaction()` so that no
    other thread can interleave between the check and the write:

        with store.transaction():
            if store.count_active() < limit:
                store.add(record)

    The lock is per process. Several uvicorn workers each hold their own
    independent store, which is inherent to keeping data in memory.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import fields, replace
from typing import Any, Dict, Iterator, List, Optional, Set

from habit_api.models.habit import MUTABLE_FIELDS, HabitRecord, HabitStatus

logger = logging.getLogger(__name__)

_RECORD_FIELDS = frozenset(f.name for f in fields(HabitRecord))


class HabitStore:
    """
    In-process habit storage.

    The store does not re-validate business rules: `add` trusts its caller
    to have checked limits and name uniqueness. It only refuses to reuse an
    id, because ids must never be reissued, even after deletion.
    """

    def __init__(self) -> None:
        self._records: Dict[str, HabitRecord] = {}
        # Every id ever inserted, including deleted ones. Never shrinks, not even
        # on clear(); one UUID string per habit created is an accepted cost for
        # the lifetime of the process.
        self._issued_ids: Set[str] = set()
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator["HabitStore"]:
        """Hold the store lock for a check-then-act sequence."""
        with self._lock:
            yield self

    # ── Queries ───────────────────────────────────────────────────────────

    def get_all(self) -> List[HabitRecord]:
        """All records in insertion order."""
        with self._lock:
            return [replace(record) for record in self._records.values()]

    def get_by_id(self, habit_id: str) -> Optional[HabitRecord]:
        with self._lock:
            record = self._records.get(habit_id)
            return replace(record) if record is not None else None

    def exists(self, habit_id: str) -> bool:
        with self._lock:
            return habit_id in self._records

    def exists_by_name(self, nome: str) -> bool:
        """Case-sensitive exact match against every record, any status."""
        with self._lock:
            return any(record.nome == nome for record in self._records.values())

    def count_active(self) -> int:
        with self._lock:
            return sum(
                1 for record in self._records.values()
                if record.status == HabitStatus.ACTIVE.value
            )

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    # ── Mutations ─────────────────────────────────────────────────────────

    def add(self, record: HabitRecord) -> HabitRecord:
        """
        Insert a fully-formed record and return a copy of it.

        Raises:
            ValueError: The id is already stored or was issued before.
        """
        with self._lock:
            if record.id in self._issued_ids:
                raise ValueError(f"Habit id '{record.id}' has already been used")
            stored = replace(record)
            self._records[stored.id] = stored
            self._issued_ids.add(stored.id)
            logger.debug("Stored habit %s (%d total)", stored.id, len(self._records))
            return replace(stored)

    def update(self, habit_id: str, **changes: Any) -> Optional[HabitRecord]:
        """
        Merge `changes` into an existing record.

        Returns the merged copy, or None when the id is unknown. Only the
        mutable fields may change; anything else is a programming error.
        """
        unknown = set(changes) - _RECORD_FIELDS
        if unknown:
            raise ValueError(f"Unknown habit fields: {sorted(unknown)}")
        frozen = set(changes) - MUTABLE_FIELDS
        if frozen:
            raise ValueError(f"Habit fields cannot be changed: {sorted(frozen)}")

        with self._lock:
            existing = self._records.get(habit_id)
            if existing is None:
                return None
            updated = replace(existing, **changes)
            self._records[habit_id] = updated
            return replace(updated)

    def delete(self, habit_id: str) -> bool:
        """Remove a record permanently. Returns whether it existed."""
        with self._lock:
            return self._records.pop(habit_id, None) is not None

    def clear(self) -> None:
        """Drop every record. Issued ids stay reserved."""
        with self._lock:
            self._records.clear()

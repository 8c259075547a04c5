"""
In-memory Backing Model and Model Provider.

``Record`` is a plain attribute bag with ``save()``; ``MemoryStore`` keeps
saved snapshots keyed by id and hands out *fresh* ``Record`` instances from
``find_or_new``, so two invocations never share a model instance even when
they load the same identifier.

Usage:
    store = MemoryStore()
    post = store.find_or_new()        # new, unsaved
    post.body = "hello"
    post.save()                       # assigns post.id
    again = store.find_or_new(post.id)
    assert again == post and again is not post
"""

from __future__ import annotations

import copy
import itertools
import threading
from typing import Any

from operant.core.errors import RecordNotFoundError
from operant.core.logging import get_logger

logger = get_logger(__name__)


class Record:
    """
    Attribute-based Backing Model bound to an optional store.

    Any attribute name is available to a schema except the methods below;
    the store handle is positional-only so a ``store`` attribute round-trips.
    """

    RESERVED = frozenset({"save", "to_dict"})

    def __init__(self, store: MemoryStore | None = None, /, **attributes: Any) -> None:
        object.__setattr__(self, "_store", store)
        self.id = attributes.pop("id", None)
        for key, value in attributes.items():
            setattr(self, key, value)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.RESERVED or name.startswith("_"):
            raise AttributeError(f"Record attribute {name!r} is reserved")
        object.__setattr__(self, name, value)

    def save(self) -> bool:
        """Write a snapshot to the bound store (no-op without one)."""
        if self._store is not None:
            self._store.put(self)
        return True

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        attrs = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"Record({attrs})"


class MemoryStore:
    """
    Thread-safe in-memory provider satisfying ``ModelProvider``.

    Snapshots are deep-copied on write and on read.
    """

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self._rows: dict[Any, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_or_new(self, identifier: Any = None) -> Record:
        """Return a fresh copy of the stored record, or a new unsaved one."""
        if identifier is None:
            return Record(self)
        with self._lock:
            row = self._rows.get(identifier)
            if row is None:
                raise RecordNotFoundError(identifier).with_context(store=self.name)
            snapshot = copy.deepcopy(row)
        return Record(self, **snapshot)

    def put(self, record: Record) -> None:
        with self._lock:
            if record.id is None:
                record.id = next(self._ids)
            self._rows[record.id] = copy.deepcopy(record.to_dict())
        logger.debug("store.saved", store=self.name, record_id=record.id)

    def all(self) -> list[Record]:
        with self._lock:
            rows = copy.deepcopy(list(self._rows.values()))
        return [Record(self, **row) for row in rows]

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

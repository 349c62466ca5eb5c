"""Document store: the persistence collaborator handlers receive.

Handlers depend on the ``DocumentStore`` protocol only. ``MemoryStore``
is the bundled implementation: collections of plain dict records, kept
in memory and optionally seeded from a JSON file shaped like
``{"posts": [{...}, ...], "quizzes": [...]}``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from masthead.errors import StoreError

logger = logging.getLogger("masthead.store")

Record = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Every record of one collection, in storage order."""

    items: tuple[Record, ...]

    @property
    def count(self) -> int:
        return len(self.items)


class DocumentStore(Protocol):
    """What handlers may ask of persistence."""

    async def scan(self, collection: str) -> ScanResult:
        """Return every record in *collection*. Raises ``StoreError``."""
        ...

    async def get(self, collection: str, key: str, value: Any) -> Record | None:
        """Return the first record whose *key* equals *value*, or None."""
        ...


class MemoryStore:
    """In-memory ``DocumentStore``.

    Scanning an unknown collection raises ``StoreError``, the same as a
    missing table would in a hosted document store.
    """

    __slots__ = ("_collections",)

    def __init__(self, collections: Mapping[str, Iterable[Record]] | None = None) -> None:
        self._collections: dict[str, list[dict[str, Any]]] = {
            name: [dict(record) for record in records]
            for name, records in (collections or {}).items()
        }

    @classmethod
    def from_json(cls, path: str | Path) -> MemoryStore:
        """Seed a store from a JSON file of ``{collection: [record, ...]}``."""
        source = Path(path)
        try:
            data = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(str(source), f"cannot load seed data: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(str(source), "seed data must be a JSON object")
        logger.info("Loaded %d collections from %s", len(data), source)
        return cls(data)

    def create_collection(self, collection: str) -> None:
        """Create *collection* if it does not exist yet."""
        self._collections.setdefault(collection, [])

    async def scan(self, collection: str) -> ScanResult:
        records = self._collections.get(collection)
        if records is None:
            raise StoreError(collection, "no such collection")
        return ScanResult(items=tuple(dict(r) for r in records))

    async def get(self, collection: str, key: str, value: Any) -> Record | None:
        for record in self._collections.get(collection, ()):
            if record.get(key) == value:
                return dict(record)
        return None

    async def put(self, collection: str, record: Record) -> None:
        """Append *record* to *collection*, creating it if needed."""
        self._collections.setdefault(collection, []).append(dict(record))

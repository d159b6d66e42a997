"""
In-memory collection with a fixture snapshot.

Every store keeps two lists:
- current: what reads and mutations see
- source: the last installed fixture snapshot

set(records) replaces both; reset() copies source back over current.
Replacement lists are built first and bound in one assignment, so readers
never see a half-replaced collection. Reads hand out deep copies.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Generic, Iterable, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from castle_catalog.core.ids import new_id
from castle_catalog.core.observability import emit

RecordT = TypeVar("RecordT", bound=BaseModel)
RecordLike = Union[BaseModel, Mapping[str, Any]]


def load_seed(path: Path) -> List[dict]:
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"seed file must hold a JSON array: {path}")
    return data


class FixtureStore(Generic[RecordT]):
    record_type: Type[RecordT]
    id_prefix = "record"

    def __init__(self, records: Iterable[RecordLike] = ()) -> None:
        self._source: List[RecordT] = [self._coerce(r) for r in records]
        self._current: List[RecordT] = self._copy_all(self._source)

    # --- helpers ---
    def _coerce(self, record: RecordLike) -> RecordT:
        if isinstance(record, self.record_type):
            return record.model_copy(deep=True)
        if isinstance(record, BaseModel):
            return self.record_type.model_validate(record.model_dump())
        return self.record_type.model_validate(record)

    @staticmethod
    def _copy_all(records: Iterable[RecordT]) -> List[RecordT]:
        return [r.model_copy(deep=True) for r in records]

    def _index_of(self, record_id: str) -> int:
        for i, r in enumerate(self._current):
            if r.id == record_id:
                return i
        return -1

    def _new_id(self) -> str:
        return new_id(self.id_prefix)

    def _append(self, record: RecordT) -> RecordT:
        self._current.append(record)
        return record.model_copy(deep=True)

    # --- reads ---
    def list(self) -> List[RecordT]:
        return self._copy_all(self._current)

    def get_by_id(self, record_id: str) -> Optional[RecordT]:
        i = self._index_of(record_id)
        if i == -1:
            return None
        return self._current[i].model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._current)

    # --- mutations ---
    def delete(self, record_id: str) -> bool:
        i = self._index_of(record_id)
        if i == -1:
            return False
        del self._current[i]
        return True

    # --- fixture lifecycle ---
    def set(self, records: Iterable[RecordLike]) -> None:
        source = [self._coerce(r) for r in records]
        current = self._copy_all(source)
        self._source, self._current = source, current
        emit("info", "store.set", f"{self.id_prefix} snapshot installed", None, __name__, count=len(source))

    def reset(self) -> None:
        self._current = self._copy_all(self._source)
        emit("info", "store.reset", f"{self.id_prefix} reset to snapshot", None, __name__, count=len(self._current))

    def snapshot(self) -> List[RecordT]:
        return self._copy_all(self._source)

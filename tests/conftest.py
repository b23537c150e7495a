from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from app.models.record import ScoreRecord
from app.services.record_store import RecordStoreError


class InMemoryRecordStore:
    """Remplace RecordStore (mêmes méthodes) sans MongoDB."""

    def __init__(self) -> None:
        self.records: List[ScoreRecord] = []
        self.insert_calls = 0
        self.fail_insert = False
        self.fail_counts = False
        self.fail_reads = False
        self.fail_indexes = False
        self.closed = False

    async def insert(self, record: ScoreRecord) -> ScoreRecord:
        self.insert_calls += 1
        if self.fail_insert:
            raise RecordStoreError("insert failed: ServerSelectionTimeoutError")
        stored = record.model_copy(update={"id": f"rec-{len(self.records) + 1}"})
        self.records.append(stored)
        return stored

    def _check_counts(self) -> None:
        if self.fail_counts:
            raise RecordStoreError("count failed: AutoReconnect")

    async def count_all(self) -> int:
        self._check_counts()
        return len(self.records)

    async def count_scores_above(self, score: int) -> int:
        self._check_counts()
        return sum(1 for r in self.records if r.player_score > score)

    async def count_ties_before(self, score: int, created_at: datetime) -> int:
        self._check_counts()
        return sum(1 for r in self.records if r.player_score == score and r.created_at < created_at)

    async def find_top(self, limit: int) -> List[ScoreRecord]:
        if self.fail_reads:
            raise RecordStoreError("find_top failed: AutoReconnect")
        ordered = sorted(self.records, key=lambda r: (-r.player_score, r.created_at))
        return ordered[:limit]

    async def ping(self) -> None:
        if self.fail_reads:
            raise RecordStoreError("ping failed: AutoReconnect")

    async def ensure_indexes(self) -> None:
        if self.fail_indexes:
            raise RecordStoreError("create_index failed: OperationFailure")

    async def close(self) -> None:
        self.closed = True


class TickingClock:
    """Horloge déterministe : chaque appel avance d'une seconde."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()

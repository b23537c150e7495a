import asyncio
import logging

import pytest

from app.services.ranking_service import RANK_UNAVAILABLE, RankingService
from app.services.record_store import RecordStoreError
from app.services.submission_service import SubmissionHandler, SubmissionValidationError


@pytest.fixture
def handler(store, clock):
    return SubmissionHandler(store, RankingService(store), clock=clock)


@pytest.mark.parametrize("name", [None, "", "   ", "\t\n"])
def test_blank_name_is_rejected_without_write(handler, store, name):
    with pytest.raises(SubmissionValidationError):
        asyncio.run(handler.submit(name, 10))

    assert store.insert_calls == 0
    assert store.records == []


def test_submit_persists_and_ranks_new_record(handler, store):
    result = asyncio.run(handler.submit("Alice", 100))

    assert result.record.id == "rec-1"
    assert result.rank == 1
    assert result.total_players == 1
    assert result.ranking_available is True
    assert store.records[0].player_name == "Alice"


def test_negative_and_zero_scores_are_accepted(handler):
    assert asyncio.run(handler.submit("Zed", 0)).rank == 1
    result = asyncio.run(handler.submit("Neg", -50))

    assert result.rank == 2
    assert result.total_players == 2


def test_equal_scores_earlier_submission_ranks_better(handler):
    first = asyncio.run(handler.submit("Early", 50))
    second = asyncio.run(handler.submit("Late", 50))

    assert first.rank == 1
    assert second.rank == 2
    assert second.record.created_at > first.record.created_at


def test_higher_late_score_takes_first_place(handler):
    asyncio.run(handler.submit("Alice", 100))
    bob = asyncio.run(handler.submit("Bob", 200))

    assert bob.rank == 1
    assert bob.total_players == 2


def test_ranking_failure_keeps_submission(handler, store, monkeypatch):
    async def broken_rank(score, created_at):
        return RANK_UNAVAILABLE

    monkeypatch.setattr(handler.ranking, "compute_rank", broken_rank)

    result = asyncio.run(handler.submit("Alice", 100))

    assert result.ranking_available is False
    assert len(store.records) == 1


def test_count_failure_degrades_ranking(handler, store):
    asyncio.run(handler.submit("Alice", 100))
    store.fail_counts = True

    result = asyncio.run(handler.submit("Bob", 10))

    assert result.rank == RANK_UNAVAILABLE
    assert result.total_players == RANK_UNAVAILABLE
    assert result.ranking_available is False
    assert len(store.records) == 2


def test_insert_failure_propagates_without_ranking(handler, store, monkeypatch):
    store.fail_insert = True
    calls = []

    async def spy_rank(score, created_at):
        calls.append(score)
        return 1

    monkeypatch.setattr(handler.ranking, "compute_rank", spy_rank)

    with pytest.raises(RecordStoreError):
        asyncio.run(handler.submit("Alice", 100))

    assert store.insert_calls == 1  # pas de retry
    assert calls == []


def test_injected_logger_receives_events(store, clock, caplog):
    scoped = logging.getLogger("tests.scoped")
    handler = SubmissionHandler(store, RankingService(store), clock=clock, log=scoped)

    with caplog.at_level(logging.INFO, logger="tests.scoped"):
        asyncio.run(handler.submit("Alice", 1))

    assert any(r.name == "tests.scoped" for r in caplog.records)

"""Unit tests for HistoryCache."""

from unittest.mock import patch

import pytest

from sentiment_core.core.history import HistoryCache, HISTORY_CAPACITY
from sentiment_core.models import HistoryEntry


def make_entry(n):
    return HistoryEntry(
        id=n, text_preview=f"text {n}", label='Positive', confidence=0.5,
        model='lstm', time_ms=n, submitted_at='12:00:00',
    )


def test_starts_empty():
    history = HistoryCache()
    assert len(history) == 0
    assert history.entries == []


def test_newest_first():
    history = HistoryCache()
    for n in range(3):
        history.append(make_entry(n))
    assert [e.id for e in history] == [2, 1, 0]
    assert history[0].id == 2


@pytest.mark.parametrize('count', [0, 1, 4, 5, 6, 12])
def test_length_is_bounded(count):
    history = HistoryCache()
    for n in range(count):
        history.append(make_entry(n))
    assert len(history) == min(count, HISTORY_CAPACITY)
    expected = list(range(count - 1, -1, -1))[:HISTORY_CAPACITY]
    assert [e.id for e in history.entries] == expected


def test_sixth_append_evicts_oldest():
    history = HistoryCache()
    for n in range(6):
        history.append(make_entry(n))
    ids = [e.id for e in history]
    assert 0 not in ids
    assert ids == [5, 4, 3, 2, 1]


def test_entries_is_a_snapshot():
    history = HistoryCache()
    history.append(make_entry(1))
    snapshot = history.entries
    history.append(make_entry(2))
    assert [e.id for e in snapshot] == [1]


def test_no_clear_operation():
    assert not hasattr(HistoryCache(), 'clear')


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        HistoryCache(capacity=0)


def test_ids_strictly_increase():
    history = HistoryCache()
    ids = [history.next_id() for _ in range(100)]
    assert ids == sorted(set(ids))


def test_ids_are_per_cache():
    with patch('sentiment_core.core.history.time.time_ns', return_value=5_000_000_000):
        first, second = HistoryCache(), HistoryCache()
        assert [first.next_id() for _ in range(3)] == [5000, 5001, 5002]
        assert second.next_id() == 5000

"""Bounded most-recent-first record of past analyses."""

import time
from collections import deque
from typing import Iterator, List

from ..models import HistoryEntry


HISTORY_CAPACITY = 5


class HistoryCache:
    """
    Keeps the last few completed analyses for display.

    New entries go to the front; once the cache is full each append drops
    the oldest entry. Entries are never edited or removed any other way,
    and there is no clear(): the view's clear action leaves history alone.

    The cache also hands out entry ids (next_id), so ids only need to be
    unique and increasing within one cache.

    Example:
        history = HistoryCache()
        history.append(HistoryEntry.from_result(history.next_id(), text, result))
        history[0]  # newest entry
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries = deque(maxlen=capacity)
        self._last_id = 0

    def next_id(self) -> int:
        """Millisecond timestamp, bumped if the clock has not moved since the last id"""
        self._last_id = max(self._last_id + 1, time.time_ns() // 1_000_000)
        return self._last_id

    def append(self, entry: HistoryEntry):
        """Add entry as the newest, evicting the oldest on overflow"""
        self._entries.appendleft(entry)

    @property
    def entries(self) -> List[HistoryEntry]:
        """Snapshot, newest first"""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

"""
Bounded per-key history shared by the trend updaters, holding an ordered FIFO window of observations for each metric name or seasonal bucket behind a single lock so concurrent analysis calls never corrupt or lose updates.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, Generic, Hashable, List, TypeVar

T = TypeVar("T")


class BoundedHistory(Generic[T]):
    __slots__ = ("_capacity", "_entries", "lock")

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"history capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: Dict[Hashable, Deque[T]] = {}
        # re-entrant so callers can hold it across several reads and an append
        self.lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, key: Hashable, item: T) -> List[T]:
        with self.lock:
            window = self._entries.get(key)
            if window is None:
                window = deque(maxlen=self._capacity)
                self._entries[key] = window
            window.append(item)
            return list(window)

    def snapshot(self, key: Hashable) -> List[T]:
        with self.lock:
            return list(self._entries.get(key, ()))

    def last(self, key: Hashable) -> T | None:
        with self.lock:
            window = self._entries.get(key)
            return window[-1] if window else None

    def size(self, key: Hashable) -> int:
        with self.lock:
            return len(self._entries.get(key, ()))

    def keys(self) -> List[Hashable]:
        with self.lock:
            return list(self._entries)

    def clear(self) -> None:
        with self.lock:
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        with self.lock:
            return key in self._entries

    def __len__(self) -> int:
        with self.lock:
            return len(self._entries)

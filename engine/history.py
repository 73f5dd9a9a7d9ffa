# engine/history.py
from __future__ import annotations

from collections import deque
from typing import Deque, FrozenSet, Iterator, List


class SignatureHistory:
    """
    Most recently issued signatures for one session, oldest first.
    Pushing past `capacity` evicts the oldest entry.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._items: Deque[str] = deque(maxlen=capacity)

    def push(self, sig: str) -> None:
        self._items.append(sig)

    def recent(self) -> FrozenSet[str]:
        return frozenset(self._items)

    def as_list(self) -> List[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, sig: object) -> bool:
        return sig in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

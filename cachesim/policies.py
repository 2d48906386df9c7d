"""Cache policies under simulation and the hit-ratio bookkeeping around them."""

from __future__ import annotations

import math
from collections import Counter, OrderedDict
from collections.abc import Hashable
from typing import Any, Protocol

from cachesim.events import AccessEvent


class _Product(Protocol):
    name: str

    def get(self, key: Hashable) -> Any: ...

    def set(self, key: Hashable, value: Any) -> None: ...

    def close(self) -> None: ...


def _percent(hits: int, misses: int) -> float:
    total = hits + misses
    return 100 * hits / total if total else math.nan


class _HitsHeap:
    """Binary min-heap of keys ordered by hit count; equal counts are not swapped."""

    def __init__(self) -> None:
        self._items: list[tuple[int, int]] = []

    def __len__(self) -> int:
        return len(self._items)

    def push(self, hits: int, key: int) -> None:
        items = self._items
        items.append((hits, key))
        child = len(items) - 1
        while child > 0:
            parent = (child - 1) // 2
            if not items[child][0] < items[parent][0]:
                break
            items[child], items[parent] = items[parent], items[child]
            child = parent

    def pop(self) -> int:
        items = self._items
        last = len(items) - 1
        items[0], items[last] = items[last], items[0]
        self._down(last)
        return items.pop()[1]

    def _down(self, size: int) -> None:
        items = self._items
        node = 0
        while True:
            child = 2 * node + 1
            if child >= size:
                return
            right = child + 1
            if right < size and items[right][0] < items[child][0]:
                child = right
            if not items[child][0] < items[node][0]:
                return
            items[child], items[node] = items[node], items[child]
            node = child


class Optimal:
    """Offline policy that evicts the resident key with the fewest total accesses."""

    name = "optimal"

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._hits: Counter[int] = Counter()
        self._accesses: list[int] = []

    def record(self, event: AccessEvent) -> None:
        self._hits[event.key] += 1
        self._accesses.append(event.key)

    def ratio(self) -> float:
        """Replay the recorded accesses and return the hit ratio in percent."""
        hits = misses = 0
        resident: set[int] = set()
        heap = _HitsHeap()
        for key in self._accesses:
            if key in resident:
                hits += 1
                continue
            if len(heap) >= self.capacity:
                resident.discard(heap.pop())
            misses += 1
            resident.add(key)
            heap.push(self._hits[key], key)
        return _percent(hits, misses)

    def close(self) -> None:
        """Release recorded accesses."""
        self._hits.clear()
        self._accesses.clear()


class LRU:
    """Fixed-size least-recently-used cache."""

    name = "lru"

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("must provide a positive size")
        self.capacity = capacity
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable) -> Any:
        """Return the value for ``key`` and mark it recently used, or ``None``."""
        try:
            self._entries.move_to_end(key)
        except KeyError:
            return None
        return self._entries[key]

    def set(self, key: Hashable, value: Any) -> None:
        """Store ``value`` under ``key``, evicting the oldest entry if full."""
        self._entries[key] = value
        self._entries.move_to_end(key)
        if len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def close(self) -> None:
        self._entries.clear()


class Policy:
    """Replays access events against a cache and counts hits and misses."""

    def __init__(self, cache: _Product) -> None:
        self._cache = cache
        self.hits = 0
        self.misses = 0

    @property
    def name(self) -> str:
        return self._cache.name

    def record(self, event: AccessEvent) -> None:
        key = event.key
        value = self._cache.get(key)
        if value is None:
            self._cache.set(key, key)
            self.misses += 1
            return
        if value != key:
            raise RuntimeError("not valid value")
        self.hits += 1

    def ratio(self) -> float:
        """Return the hit ratio in percent."""
        return _percent(self.hits, self.misses)

    def close(self) -> None:
        self._cache.close()


_PRODUCTS: dict[str, type[LRU]] = {
    LRU.name: LRU,
}


def available_products() -> list[str]:
    """Return the names of the cache implementations that can be simulated."""
    return sorted(_PRODUCTS)


def new_product(name: str, capacity: int) -> _Product:
    """Create the cache implementation called ``name`` with ``capacity``."""
    try:
        factory = _PRODUCTS[name]
    except KeyError:
        raise ValueError(f"not valid cache name: {name}") from None
    return factory(capacity)
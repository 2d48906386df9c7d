import pytest

from cachesim.events import AccessEvent
from cachesim.policies import (
    LRU,
    Optimal,
    Policy,
    available_products,
    new_product,
)


def _events(keys):
    return [AccessEvent(k) for k in keys]


def test_lru_evicts_least_recently_used():
    cache = LRU(2)
    cache.set(1, 1)
    cache.set(2, 2)
    assert cache.get(1) == 1
    cache.set(3, 3)
    assert cache.get(2) is None
    assert cache.get(1) == 1
    assert cache.get(3) == 3
    assert len(cache) == 2


def test_lru_update_does_not_evict():
    cache = LRU(2)
    cache.set(1, 1)
    cache.set(2, 2)
    cache.set(1, 10)
    assert len(cache) == 2
    assert cache.get(1) == 10
    assert cache.get(2) == 2


def test_lru_close_empties_cache():
    cache = LRU(3)
    cache.set(1, 1)
    cache.close()
    assert len(cache) == 0
    assert cache.get(1) is None


def test_lru_requires_positive_capacity():
    with pytest.raises(ValueError, match="positive size"):
        LRU(0)


def test_policy_counts_hits_and_misses():
    policy = Policy(LRU(10))
    for event in _events([1, 1, 2, 1]):
        policy.record(event)
    assert policy.hits == 2
    assert policy.misses == 2
    assert policy.ratio() == 50.0
    assert policy.name == "lru"


def test_policy_rejects_wrong_value():
    class WrongCache:
        name = "wrong"

        def get(self, key):
            return key + 1

        def set(self, key, value):
            pass

        def close(self):
            pass

    policy = Policy(WrongCache())
    with pytest.raises(RuntimeError, match="not valid value"):
        policy.record(AccessEvent(1))


def test_policy_without_events_has_nan_ratio():
    ratio = Policy(LRU(1)).ratio()
    assert str(ratio) == "nan"


def test_optimal_matches_lru_when_everything_fits():
    keys = [3, 1, 4, 1, 5, 9, 2, 6, 5, 3, 5]
    optimal = Optimal(100)
    policy = Policy(LRU(100))
    for event in _events(keys):
        optimal.record(event)
        policy.record(event)
    assert optimal.ratio() == policy.ratio()


def test_optimal_capacity_one_alternating_never_hits():
    optimal = Optimal(1)
    for event in _events([1, 2, 1, 2]):
        optimal.record(event)
    assert optimal.ratio() == 0.0


def test_optimal_keeps_frequent_key():
    keys = [1, 2, 1, 3, 1, 4, 1]
    optimal = Optimal(1)
    policy = Policy(LRU(1))
    for event in _events(keys):
        optimal.record(event)
        policy.record(event)
    assert optimal.ratio() > policy.ratio()


def test_optimal_without_events_has_nan_ratio():
    ratio = Optimal(5).ratio()
    assert str(ratio) == "nan"


def test_products_registry():
    assert "lru" in available_products()
    product = new_product("lru", 5)
    assert isinstance(product, LRU)
    assert product.capacity == 5


def test_unknown_product():
    with pytest.raises(ValueError, match="not valid cache name: nope"):
        new_product("nope", 5)
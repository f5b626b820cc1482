"""
Unit tests for reframe.cache module.
"""

import threading

import pytest

from photomotion.reframe.cache import FramePlanCache, generate_cache_key
from photomotion.schemas.frame_plan import Anchor, CropRect, FramePlan


def make_plan(width: int = 1920, height: int = 1080) -> FramePlan:
    return FramePlan(
        crop=CropRect(x=0, y=0, w=width, h=height),
        confidence=0.8,
        reason="test",
        anchor=Anchor(x=0.5, y=0.5),
        source_width=width,
        source_height=height,
    )


class TestGenerateCacheKey:
    """Tests for cache key generation."""

    def test_format(self):
        """Test key joins image key and 4-decimal aspect."""
        assert generate_cache_key("photos/a.jpg", 16 / 9) == "photos/a.jpg:1.7778"

    def test_equivalent_aspects_share_key(self):
        """Test aspects equal to 4 decimals map to one key."""
        assert generate_cache_key("a", 16 / 9) == generate_cache_key("a", 1.77778)

    def test_different_aspect_different_key(self):
        """Test a different aspect produces a different key."""
        assert generate_cache_key("a", 16 / 9) != generate_cache_key("a", 4 / 3)


class TestFramePlanCache:
    """Tests for FramePlanCache."""

    def test_miss_returns_none(self):
        cache = FramePlanCache()
        assert cache.get("missing", 16 / 9) is None

    def test_store_and_get(self):
        """Test a stored plan is returned for the same key and aspect."""
        cache = FramePlanCache()
        plan = make_plan()
        cache.store("a", 16 / 9, plan)
        assert cache.get("a", 16 / 9) == plan
        assert cache.get("a", 4 / 3) is None

    def test_fifo_eviction(self):
        """Test the oldest entry is evicted past max_size."""
        cache = FramePlanCache(max_size=2)
        cache.store("a", 1.0, make_plan(100, 100))
        cache.store("b", 1.0, make_plan(200, 200))
        cache.store("c", 1.0, make_plan(300, 300))

        assert len(cache) == 2
        assert cache.get("a", 1.0) is None
        assert cache.get("b", 1.0).source_width == 200
        assert cache.get("c", 1.0).source_width == 300

    def test_overwrite_does_not_grow(self):
        """Test storing the same key twice keeps one entry."""
        cache = FramePlanCache(max_size=5)
        cache.store("a", 1.0, make_plan(100, 100))
        cache.store("a", 1.0, make_plan(200, 200))
        assert len(cache) == 1
        assert cache.get("a", 1.0).source_width == 200

    def test_delete(self):
        """Test delete reports whether an entry existed."""
        cache = FramePlanCache()
        cache.store("a", 1.0, make_plan())
        assert cache.delete("a", 1.0) is True
        assert cache.delete("a", 1.0) is False

    def test_clear_and_stats(self):
        """Test clear empties the cache and stats reflect it."""
        cache = FramePlanCache(max_size=3)
        cache.store("a", 1.0, make_plan())
        assert cache.get_stats() == {"size": 1, "max_size": 3}
        cache.clear()
        assert cache.get_stats() == {"size": 0, "max_size": 3}

    def test_invalid_max_size(self):
        with pytest.raises(ValueError):
            FramePlanCache(max_size=0)

    def test_concurrent_stores_respect_bound(self):
        """Test stores from many threads never exceed max_size."""
        cache = FramePlanCache(max_size=50)
        plan = make_plan()

        def worker(prefix):
            for i in range(100):
                cache.store(f"{prefix}-{i}", 1.0, plan)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 50

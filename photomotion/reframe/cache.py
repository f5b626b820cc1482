"""
Frame Plan Cache

Caller-owned, bounded in-memory cache for frame plans keyed by
(image key, target aspect). Nothing in photomotion holds one globally;
a render job creates its own and passes it to the batch planner.
"""

import logging
import threading
from collections import OrderedDict
from typing import Optional

from ..schemas.frame_plan import FramePlan

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 2000


def generate_cache_key(image_key: str, target_aspect: float) -> str:
    """
    Generate cache key for a frame plan.

    The aspect ratio is fixed to four decimals so that 16/9 computed in
    different ways lands on the same key.

    Args:
        image_key: Stable identifier of the source image (e.g. storage key)
        target_aspect: Target aspect ratio (width/height)

    Returns:
        Key string "{image_key}:{aspect:.4f}"
    """
    return f"{image_key}:{target_aspect:.4f}"


class FramePlanCache:
    """
    Cache manager for computed frame plans.

    Eviction is FIFO by insertion order once max_size is exceeded.
    Access is guarded by a lock so one cache can serve a thread pool.

    Usage:
        cache = FramePlanCache()

        plan = cache.get(image_key, 16 / 9)
        if plan is None:
            plan = plan_frame(image, 16 / 9)
            cache.store(image_key, 16 / 9, plan)
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        """
        Initialize cache manager.

        Args:
            max_size: Maximum number of plans kept
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._plans: "OrderedDict[str, FramePlan]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._plans)

    def get(self, image_key: str, target_aspect: float) -> Optional[FramePlan]:
        """
        Get cached plan if present.

        Returns:
            FramePlan if cached, None otherwise
        """
        cache_key = generate_cache_key(image_key, target_aspect)
        with self._lock:
            plan = self._plans.get(cache_key)
        if plan is not None:
            logger.debug(f"Cache hit: {cache_key}")
        return plan

    def store(self, image_key: str, target_aspect: float, plan: FramePlan) -> None:
        """Store a plan, evicting the oldest entries beyond max_size."""
        cache_key = generate_cache_key(image_key, target_aspect)
        with self._lock:
            self._plans[cache_key] = plan
            while len(self._plans) > self.max_size:
                evicted, _ = self._plans.popitem(last=False)
                logger.debug(f"Evicted: {evicted}")

    def delete(self, image_key: str, target_aspect: float) -> bool:
        """
        Delete cached plan.

        Returns:
            True if deleted, False if not found
        """
        cache_key = generate_cache_key(image_key, target_aspect)
        with self._lock:
            return self._plans.pop(cache_key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._plans.clear()

    def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dict with size and max_size
        """
        with self._lock:
            return {"size": len(self._plans), "max_size": self.max_size}

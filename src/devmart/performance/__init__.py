"""Query timing, caching and de-duplication."""

from .query_cache import QueryPerformanceManager, run_cache_cleanup

__all__ = ["QueryPerformanceManager", "run_cache_cleanup"]

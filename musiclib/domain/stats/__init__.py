from .stats_service import StatsService, empty_stats

__all__ = ["StatsService", "empty_stats"]

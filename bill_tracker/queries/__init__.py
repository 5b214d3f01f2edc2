"""Dashboard query package."""

from bill_tracker.queries.stats import DashboardQuery, compute_stats

__all__ = ["DashboardQuery", "compute_stats"]

"""Dashboard module.

Assembles the analytics engine outputs and the insight collaborator's
text into the data consumed by a presentation layer.
"""

from fincoach.dashboard.data_provider import DashboardDataProvider

__all__ = ["DashboardDataProvider"]

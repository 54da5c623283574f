"""Adapters for the external text-generation collaborator.

Public API:
    - :class:`InsightGenerator`
    - :func:`categorize_transactions`

Nothing here is required for the analytics to succeed: every failure of
the collaborator is turned into fallback values.
"""

from fincoach.insights.categorize import categorize_transactions
from fincoach.insights.generator import InsightGenerator, default_insights

__all__ = ["InsightGenerator", "categorize_transactions", "default_insights"]

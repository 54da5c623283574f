"""FinCoach: financial analytics engine.

Turns a snapshot of transactions and savings goals into spending
aggregates, detected subscriptions and gray charges, and goal forecasts.
"""

__version__ = "0.1.0"

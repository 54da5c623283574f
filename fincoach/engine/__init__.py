"""Pure analytics engine.

Every function here takes an immutable snapshot and returns new values.
Nothing in this package performs I/O or reads the system clock.
"""

from fincoach.engine.calculator import compute_spending_summary
from fincoach.engine.detectors import detect_gray_charges, detect_recurring_charges
from fincoach.engine.forecaster import forecast_goals

__all__ = [
    "compute_spending_summary",
    "detect_gray_charges",
    "detect_recurring_charges",
    "forecast_goals",
]

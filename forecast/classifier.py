"""
forecast/classifier.py

Classifies a change in percentage points into a human-readable trend label.
No forecasting logic, no I/O, no side effects.
"""

from __future__ import annotations

STRONG_INCREASE = "strong increase"
MILD_INCREASE = "mild increase"
STABLE = "stable"
MILD_DECREASE = "mild decrease"
STRONG_DECREASE = "strong decrease"
UNKNOWN = "unknown"


class TrendClassifier:
    """
    Maps the change between the first and last rate of a series to a
    discrete direction.

    Thresholds are absolute percentage points (class-level constants,
    easily overridden by subclasses):

        delta            |  label
        -----------------|------------------
        > +5             |  strong increase
        > +1 ... <= +5   |  mild increase
        -1 ... +1        |  stable
        >= -5 ... < -1   |  mild decrease
        < -5             |  strong decrease
    """

    STRONG_THRESHOLD: float = 5.0
    MILD_THRESHOLD: float = 1.0

    def classify(self, delta: float) -> str:
        """
        Classify *delta* (last rate minus first rate).

        Returns
        -------
        str
            One of the five direction constants above; never
            :data:`UNKNOWN`.

        Notes
        -----
        Thresholds are evaluated from most extreme to least extreme, and
        boundary values resolve to the weaker label.
        """
        if delta > self.STRONG_THRESHOLD:
            return STRONG_INCREASE
        if delta > self.MILD_THRESHOLD:
            return MILD_INCREASE
        if delta < -self.STRONG_THRESHOLD:
            return STRONG_DECREASE
        if delta < -self.MILD_THRESHOLD:
            return MILD_DECREASE
        return STABLE

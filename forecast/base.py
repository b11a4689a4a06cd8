"""
forecast/base.py

Abstract base class for population forecast model implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from app.domain.census_rows import PopulationTrendRow


class BaseForecastModel(ABC):
    """
    Contract for forecast model implementations.

    Subclasses receive a population trend and a horizon in years and
    return a projection object, or ``None`` when the trend cannot support
    one.

    No I/O, no logging, and no side effects are permitted inside
    :meth:`forecast`.
    """

    @abstractmethod
    def forecast(self, trend: Sequence[PopulationTrendRow], horizon: int) -> Any:
        """
        Project *trend* forward by *horizon* years.

        Parameters
        ----------
        trend:
            Population observations, in any order.  Implementations sort
            by census year before use.
        horizon:
            Number of years to project past the last observed year.

        Returns
        -------
        A projection object, or ``None`` when there is not enough data.
        """

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from src.service.dining.domain.dashboard_summary import DashboardSummary


class IDashboardCache(ABC):
    """
    Best-effort store for daily dashboard summaries.

    Every method swallows (and logs) store failures: a miss or a failed
    invalidation only costs a recompute, never correctness.
    """

    @abstractmethod
    async def get(self, *, restaurant_id: int, on: date) -> Optional[DashboardSummary]:
        pass

    @abstractmethod
    async def set(self, *, restaurant_id: int, on: date, summary: DashboardSummary) -> None:
        pass

    @abstractmethod
    async def invalidate(self, *, restaurant_id: int, on: date) -> None:
        pass

    @abstractmethod
    async def invalidate_restaurant(self, *, restaurant_id: int) -> None:
        """Drop every cached day of the restaurant (table registry changes)"""
        pass

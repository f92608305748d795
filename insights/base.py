"""
insights/base.py

Abstract base class for all insight rule implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from app.domain.sales import SalesRecord


class BaseInsightRule(ABC):
    """
    Contract for insight rule implementations.

    Each rule inspects the full dataset and contributes at most one
    plain-text statement.  Rules are independent and additive.
    """

    name: str = "insight_rule"

    @abstractmethod
    def evaluate(self, records: Sequence[SalesRecord]) -> str | None:
        """
        Return one insight statement, or ``None`` when the rule is silent.
        """

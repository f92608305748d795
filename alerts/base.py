"""
alerts/base.py

Abstract base class for all alert rule implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from app.domain.sales import Alert, SalesRecord


class BaseAlertRule(ABC):
    """
    Contract for alert rule implementations.

    Rules receive the full (possibly filtered) dataset and the evaluation
    time, and return zero or more alerts.  Rules are stateless; the same
    condition recurring in two passes yields alerts in both passes.

    No I/O and no side effects other than debug logging are permitted
    inside :meth:`evaluate`.
    """

    name: str = "alert_rule"

    @abstractmethod
    def evaluate(self, records: Sequence[SalesRecord], *, now: datetime) -> list[Alert]:
        """
        Evaluate the rule over *records*.

        Parameters
        ----------
        records:
            Sales records for the current pass.
        now:
            Evaluation time.  Rules that depend on wall-clock age must use
            this value instead of reading the clock themselves.

        Returns
        -------
        list[Alert]
            Alerts in the order the rule produced them.
        """

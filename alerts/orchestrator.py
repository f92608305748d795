"""
alerts/orchestrator.py

Runs the configured alert rules over one dataset snapshot.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Sequence

from alerts.base import BaseAlertRule
from alerts.rules import LowMarginRule, StaleUnpaidInvoiceRule
from app.config import get_alert_settings
from app.domain.sales import Alert, SalesRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def default_alert_rules() -> list[BaseAlertRule]:
    """
    Build the standard rule set from environment-driven settings.
    """
    settings = get_alert_settings()
    return [
        LowMarginRule(threshold=settings.low_margin_threshold),
        StaleUnpaidInvoiceRule(
            max_age_months=settings.unpaid_max_age_months,
            unpaid_status=settings.unpaid_status,
        ),
    ]


class AlertEngine:
    """
    Evaluates an ordered list of independent alert rules.

    Rules run in order and their alerts are concatenated.  There is no
    deduplication, severity escalation or persistence across passes.

    Parameters
    ----------
    rules:
        Rules to evaluate.  Defaults to :func:`default_alert_rules`.
    clock:
        Zero-argument callable returning the evaluation time.  Inject a
        fixed clock to make time-dependent rules deterministic.
    """

    def __init__(
        self,
        rules: Sequence[BaseAlertRule] | None = None,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._rules = list(rules) if rules is not None else default_alert_rules()
        self._clock = clock or utc_now

    def generate_alerts(
        self,
        records: Sequence[SalesRecord],
        *,
        now: datetime | None = None,
    ) -> list[Alert]:
        """
        Evaluate every rule against *records* and return all alerts.
        """
        evaluated_at = now or self._clock()
        alerts: list[Alert] = []
        for rule in self._rules:
            produced = rule.evaluate(records, now=evaluated_at)
            logger.debug("Alert rule %s produced %d alerts", rule.name, len(produced))
            alerts.extend(produced)
        return alerts


def generate_alerts(
    records: Sequence[SalesRecord],
    *,
    now: datetime | None = None,
) -> list[Alert]:
    """
    Evaluate the default rule set against *records*.
    """
    return AlertEngine().generate_alerts(records, now=now)

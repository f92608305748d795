"""
alerts/rules.py

Deterministic, threshold-based alert rules for sales records.
"""

from __future__ import annotations

import calendar
import logging
from datetime import datetime, time
from typing import Sequence

from alerts.base import BaseAlertRule
from app.domain.sales import Alert, AlertType, SalesRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def subtract_months(moment: datetime, months: int) -> datetime:
    """Shift *moment* back by calendar months, clamping to the month's last day.

    Parameters
    ----------
    moment:
        Reference point; its time of day and tzinfo are preserved.
    months:
        Non-negative number of calendar months to go back.

    Returns
    -------
    datetime
        E.g. 31 August minus six months is 28 or 29 February.
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

class LowMarginRule(BaseAlertRule):
    """
    One warning per record whose profit percentage is below the threshold.

    The rule is per-record, not per-group: many low-margin lines for one
    product yield many alerts.  Records without a profit percentage are
    skipped.
    """

    name = "low_margin"

    def __init__(self, threshold: float = 10.0) -> None:
        self.threshold = threshold

    def evaluate(self, records: Sequence[SalesRecord], *, now: datetime) -> list[Alert]:
        alerts: list[Alert] = []
        for record in records:
            try:
                pct = record.total_profit_pct
                if pct is None or not pct < self.threshold:
                    continue
                alerts.append(
                    Alert(
                        type=AlertType.WARNING,
                        message=f"Low profit margin for {record.product}",
                        details=f"Current margin: {pct:.1f}%",
                    )
                )
            except (TypeError, ValueError, ArithmeticError) as exc:
                logger.debug("Skipping record for %s: %s", self.name, exc)
        return alerts


class StaleUnpaidInvoiceRule(BaseAlertRule):
    """
    One danger alert counting unpaid invoices older than the age limit.

    An invoice is stale when its payment status equals ``unpaid_status``
    and its requested date, taken at midnight, is earlier than *now*
    minus ``max_age_months`` calendar months.  Records without a
    requested date or payment status are skipped.
    """

    name = "stale_unpaid_invoice"

    def __init__(self, max_age_months: int = 6, unpaid_status: str = "Unpaid") -> None:
        self.max_age_months = max_age_months
        self.unpaid_status = unpaid_status

    def evaluate(self, records: Sequence[SalesRecord], *, now: datetime) -> list[Alert]:
        cutoff = subtract_months(now, self.max_age_months)
        stale = 0
        for record in records:
            try:
                if record.payment_status != self.unpaid_status or record.requested_date is None:
                    continue
                requested_at = datetime.combine(record.requested_date, time.min, tzinfo=cutoff.tzinfo)
                if requested_at < cutoff:
                    stale += 1
            except (TypeError, ValueError) as exc:
                logger.debug("Skipping record for %s: %s", self.name, exc)

        if stale == 0:
            return []
        return [
            Alert(
                type=AlertType.DANGER,
                message="Outstanding unpaid invoices",
                details=f"{stale} invoices pending payment",
            )
        ]

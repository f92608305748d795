"""
insights/orchestrator.py

Runs the configured insight rules over one dataset snapshot.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.config import get_insight_settings
from app.domain.sales import SalesRecord
from insights.base import BaseInsightRule
from insights.rules import AverageMarginRule, LowMarginCountRule, MonthOverMonthRule

logger = logging.getLogger(__name__)


def default_insight_rules() -> list[BaseInsightRule]:
    settings = get_insight_settings()
    return [
        MonthOverMonthRule(),
        AverageMarginRule(threshold=settings.average_margin_threshold),
        LowMarginCountRule(
            ratio=settings.low_margin_ratio,
            min_count=settings.low_margin_min_count,
        ),
    ]


class InsightEngine:
    """
    Evaluates independent insight rules and collects their statements.

    A rule that raises on malformed input is skipped for the pass and
    logged; it never aborts the remaining rules.
    """

    def __init__(self, rules: Sequence[BaseInsightRule] | None = None) -> None:
        self._rules = list(rules) if rules is not None else default_insight_rules()

    def generate_insights(self, records: Sequence[SalesRecord]) -> list[str]:
        insights: list[str] = []
        for rule in self._rules:
            try:
                statement = rule.evaluate(records)
            except (TypeError, ValueError, ArithmeticError) as exc:
                logger.warning("Insight rule %s could not be evaluated: %s", rule.name, exc)
                continue
            if statement:
                insights.append(statement)
        return insights


def generate_insights(records: Sequence[SalesRecord]) -> list[str]:
    """
    Evaluate the default insight rules against *records*.
    """
    return InsightEngine().generate_insights(records)

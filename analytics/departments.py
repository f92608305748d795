"""
analytics/departments.py

Deterministic product-name to department classification.

Rules are an ordered list of ``(keywords, department)`` pairs.  A product
is assigned to the department of the first rule with a keyword contained
in its lower-cased name; products matching no rule fall into
:data:`OTHER_DEPARTMENT`.

The default rules may be replaced by a JSON file referenced through the
``SALES_DEPARTMENT_RULES_PATH`` environment variable::

    [
        {"department": "Herbs", "keywords": ["basil", "mint"]},
        {"department": "Roots", "keywords": ["carrot"]}
    ]
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Sequence

from app.config import get_department_rules_path

logger = logging.getLogger(__name__)

OTHER_DEPARTMENT = "Other"

DepartmentRule = tuple[tuple[str, ...], str]

DEFAULT_DEPARTMENT_RULES: tuple[DepartmentRule, ...] = (
    (("basil",), "Herbs"),
    (("carrot",), "Roots"),
    (("pepper",), "Vegetables"),
    (("kale", "chard"), "Leafy Greens"),
)


class DepartmentClassifier:
    """
    Pure mapping from product name to department name.

    The same product name always yields the same department, independent
    of record order or dataset size.
    """

    def __init__(
        self,
        rules: Sequence[DepartmentRule] = DEFAULT_DEPARTMENT_RULES,
        *,
        default: str = OTHER_DEPARTMENT,
    ) -> None:
        self._rules: tuple[DepartmentRule, ...] = tuple(
            (tuple(keyword.lower() for keyword in keywords), department)
            for keywords, department in rules
        )
        self._default = default

    def classify(self, product: str | None) -> str:
        name = (product or "").lower()
        for keywords, department in self._rules:
            if any(keyword in name for keyword in keywords):
                return department
        return self._default


def load_department_rules(path: Path) -> tuple[DepartmentRule, ...]:
    """
    Load ordered department rules from a JSON file.

    Raises
    ------
    ValueError
        When the file is not a list of ``{"department", "keywords"}`` objects.
    OSError
        When the file cannot be read.
    """

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Department rules in {path} must be a JSON list.")

    rules: list[DepartmentRule] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Department rule #{index} in {path} must be an object.")
        department = entry.get("department")
        keywords = entry.get("keywords")
        if not isinstance(department, str) or not department.strip():
            raise ValueError(f"Department rule #{index} in {path} has no department name.")
        if not isinstance(keywords, list) or not all(isinstance(k, str) and k.strip() for k in keywords):
            raise ValueError(f"Department rule #{index} in {path} needs a list of keywords.")
        rules.append((tuple(k.strip() for k in keywords), department.strip()))
    return tuple(rules)


@lru_cache(maxsize=1)
def get_department_classifier() -> DepartmentClassifier:
    """
    Return the configured classifier, falling back to the default rules.
    """

    path = get_department_rules_path()
    if path is None:
        return DepartmentClassifier()
    rules = load_department_rules(path)
    logger.info("Loaded %d department rules from %s", len(rules), path)
    return DepartmentClassifier(rules)


_DEFAULT_CLASSIFIER = DepartmentClassifier()


def classify_department(product: str | None) -> str:
    """
    Classify *product* with the built-in keyword rules.
    """
    return _DEFAULT_CLASSIFIER.classify(product)

from __future__ import annotations

import json

import pytest

from analytics.departments import (
    OTHER_DEPARTMENT,
    DepartmentClassifier,
    classify_department,
    load_department_rules,
)


class TestClassifyDepartment:
    @pytest.mark.parametrize(
        ("product", "department"),
        [
            ("Sweet Basil", "Herbs"),
            ("BABY CARROTS", "Roots"),
            ("Red Pepper", "Vegetables"),
            ("Curly Kale", "Leafy Greens"),
            ("Rainbow Chard", "Leafy Greens"),
            ("Mushroom", OTHER_DEPARTMENT),
            ("", OTHER_DEPARTMENT),
            (None, OTHER_DEPARTMENT),
        ],
    )
    def test_keyword_rules(self, product, department) -> None:
        assert classify_department(product) == department

    def test_first_matching_rule_wins(self) -> None:
        assert classify_department("Basil and Carrot Mix") == "Herbs"

    def test_is_deterministic(self) -> None:
        assert {classify_department("Thai Basil") for _ in range(5)} == {"Herbs"}


class TestDepartmentClassifier:
    def test_custom_rules_and_default(self) -> None:
        classifier = DepartmentClassifier([(("mint",), "Herbs")], default="Misc")
        assert classifier.classify("Spearmint") == "Herbs"
        assert classifier.classify("Basil") == "Misc"

    def test_keywords_match_case_insensitively(self) -> None:
        classifier = DepartmentClassifier([(("MINT",), "Herbs")])
        assert classifier.classify("spearmint tea") == "Herbs"
        assert classifier.classify("Chamomile") == OTHER_DEPARTMENT


class TestLoadDepartmentRules:
    def test_loads_ordered_rules(self, tmp_path) -> None:
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps(
                [
                    {"department": "Fruit", "keywords": ["apple", "pear"]},
                    {"department": "Herbs", "keywords": ["basil"]},
                ]
            ),
            encoding="utf-8",
        )

        rules = load_department_rules(path)

        assert rules == ((("apple", "pear"), "Fruit"), (("basil",), "Herbs"))
        assert DepartmentClassifier(rules).classify("Green Apple") == "Fruit"

    @pytest.mark.parametrize(
        "payload",
        [
            {"department": "Fruit"},
            [{"keywords": ["apple"]}],
            [{"department": "Fruit", "keywords": "apple"}],
            ["Fruit"],
        ],
    )
    def test_rejects_malformed_rules(self, tmp_path, payload) -> None:
        path = tmp_path / "rules.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        with pytest.raises(ValueError):
            load_department_rules(path)

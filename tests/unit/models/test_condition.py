"""Tests for the condition tree models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from elasticquery.exceptions import MalformedConditionError, UnsupportedOperatorError
from elasticquery.models.condition import Condition, ConditionGroup, Conjunction, Operator

# ── Operator parsing ─────────────────────────────────────────────────────────


class TestOperatorParse:
    def test_none_defaults_to_eq(self) -> None:
        assert Operator.parse(None) is Operator.EQ

    def test_angle_brackets_alias_ne(self) -> None:
        assert Operator.parse("<>") is Operator.NE

    def test_case_and_spacing_insensitive(self) -> None:
        assert Operator.parse("not  in") is Operator.NOT_IN
        assert Operator.parse("starts_with") is Operator.STARTS_WITH

    def test_enum_passthrough(self) -> None:
        assert Operator.parse(Operator.BETWEEN) is Operator.BETWEEN

    def test_unknown_operator_raises_with_suggestion(self) -> None:
        with pytest.raises(UnsupportedOperatorError) as exc_info:
            Operator.parse("CONTAIN")
        assert "CONTAINS" in exc_info.value.suggestions
        assert exc_info.value.to_dict()["error"] == "UNSUPPORTED_OPERATOR"

    def test_unknown_conjunction_raises(self) -> None:
        with pytest.raises(MalformedConditionError, match="XOR"):
            Conjunction.parse("XOR")


# ── Condition shapes ─────────────────────────────────────────────────────────


class TestConditionShape:
    def test_default_operator_is_eq(self) -> None:
        cond = Condition(field="status", value=1)
        assert cond.operator is Operator.EQ

    def test_set_operator_normalized_to_tuple(self) -> None:
        cond = Condition(field="type", operator="IN", value=["article", "page"])
        assert cond.value == ("article", "page")

    def test_set_operator_from_python_set_is_deterministic(self) -> None:
        cond = Condition(field="type", operator="NOT IN", value={"page", "article"})
        assert cond.value == ("article", "page")

    def test_set_operator_rejects_scalar(self) -> None:
        with pytest.raises(MalformedConditionError, match="set of values"):
            Condition(field="type", operator="IN", value="article")

    def test_set_operator_rejects_empty(self) -> None:
        with pytest.raises(MalformedConditionError, match="at least one"):
            Condition(field="type", operator="IN", value=[])

    @pytest.mark.parametrize("value", [[1], [1, 2, 3], 5, None])
    def test_between_requires_two_values(self, value: object) -> None:
        with pytest.raises(MalformedConditionError, match="exactly two"):
            Condition(field="created", operator="BETWEEN", value=value)

    def test_between_keeps_given_order(self) -> None:
        cond = Condition(field="created", operator="BETWEEN", value=[10, 5])
        assert cond.value == (10, 5)

    def test_null_check_rejects_value(self) -> None:
        with pytest.raises(MalformedConditionError, match="takes no value"):
            Condition(field="summary", operator="IS NULL", value="x")

    def test_comparison_rejects_list(self) -> None:
        with pytest.raises(MalformedConditionError, match="scalar"):
            Condition(field="created", operator=">", value=[1, 2])

    def test_comparison_accepts_date(self) -> None:
        cond = Condition(field="created", operator=">=", value=date(2024, 1, 1))
        assert cond.value == date(2024, 1, 1)

    def test_pattern_operator_requires_string(self) -> None:
        with pytest.raises(MalformedConditionError, match="string"):
            Condition(field="title", operator="CONTAINS", value=5)

    def test_empty_field_rejected(self) -> None:
        with pytest.raises(MalformedConditionError, match="field"):
            Condition(field="", value=1)

    def test_condition_is_frozen(self) -> None:
        cond = Condition(field="status", value=1)
        with pytest.raises(ValidationError):
            cond.value = 2  # type: ignore[misc]

    def test_to_dict(self) -> None:
        cond = Condition(field="type", operator="IN", value=["a", "b"])
        assert cond.to_dict() == {"field": "type", "operator": "IN", "value": ["a", "b"]}


# ── Groups ───────────────────────────────────────────────────────────────────


class TestConditionGroup:
    def test_defaults_to_and(self) -> None:
        assert ConditionGroup().conjunction is Conjunction.AND

    def test_conjunction_parsed_from_text(self) -> None:
        assert ConditionGroup(conjunction="or").conjunction is Conjunction.OR

    def test_conjunction_cannot_change(self) -> None:
        group = ConditionGroup().condition("status", 1)
        with pytest.raises(ValidationError):
            group.conjunction = Conjunction.OR  # type: ignore[misc]
        assert group.conjunction is Conjunction.AND

    def test_chained_construction_keeps_order(self) -> None:
        sub = ConditionGroup(conjunction="OR").exists("sticky")
        group = ConditionGroup().condition("status", 1).not_exists("summary").condition(sub)
        assert [type(m).__name__ for m in group.members] == ["Condition", "Condition", "ConditionGroup"]
        assert group.members[1].operator is Operator.IS_NULL
        assert group.members[2] is sub

    def test_malformed_condition_fails_on_add(self) -> None:
        group = ConditionGroup()
        with pytest.raises(MalformedConditionError):
            group.condition("created", [1], "BETWEEN")
        assert group.members == []

    def test_group_cannot_contain_itself(self) -> None:
        group = ConditionGroup()
        with pytest.raises(MalformedConditionError):
            group.add(group)

    def test_add_rejects_foreign_objects(self) -> None:
        with pytest.raises(MalformedConditionError):
            ConditionGroup().add({"field": "x"})  # type: ignore[arg-type]


class TestConditionGroupFromDict:
    def test_nested_tree(self) -> None:
        group = ConditionGroup.from_dict(
            {
                "conjunction": "AND",
                "conditions": [
                    {"field": "status", "value": 1},
                    {
                        "conjunction": "OR",
                        "conditions": [
                            {"field": "type", "operator": "IN", "value": ["article"]},
                            {"field": "summary", "operator": "IS NOT NULL"},
                        ],
                    },
                ],
            }
        )
        assert group.conjunction is Conjunction.AND
        nested = group.members[1]
        assert isinstance(nested, ConditionGroup)
        assert nested.conjunction is Conjunction.OR
        assert nested.members[0].value == ("article",)

    def test_round_trip_dict(self) -> None:
        data = {
            "conjunction": "OR",
            "conditions": [
                {"field": "title", "operator": "STARTS_WITH", "value": "Sol"},
                {"conjunction": "AND", "conditions": [{"field": "n", "operator": ">", "value": 3}]},
            ],
        }
        assert ConditionGroup.from_dict(data).to_dict() == data

    def test_missing_field_reports_path(self) -> None:
        with pytest.raises(MalformedConditionError, match=r"\$\.conditions\[0\]"):
            ConditionGroup.from_dict({"conditions": [{"value": 1}]})

    def test_conditions_must_be_list(self) -> None:
        with pytest.raises(MalformedConditionError, match="must be a list"):
            ConditionGroup.from_dict({"conditions": {"field": "x"}})

    def test_unknown_operator_propagates(self) -> None:
        with pytest.raises(UnsupportedOperatorError):
            ConditionGroup.from_dict({"conditions": [{"field": "x", "operator": "LIKE", "value": "a"}]})

"""Condition tree models — Leaf conditions and nested condition groups.

A ``ConditionGroup`` is the filter predicate of an entity query: an ordered
list of ``Condition`` leaves and nested groups joined by one conjunction.
Value shapes are validated when a condition is created, so a malformed
condition never reaches the compiler.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from elasticquery.exceptions import MalformedConditionError, UnsupportedOperatorError

_SCALAR_TYPES = (str, int, float, Decimal, date)


class Operator(str, Enum):
    """Condition operators supported by the compiler."""

    EQ = "="
    NE = "!="
    IN = "IN"
    NOT_IN = "NOT IN"
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    BETWEEN = "BETWEEN"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"
    CONTAINS = "CONTAINS"

    @classmethod
    def parse(cls, value: Operator | str | None) -> Operator:
        """Resolve an operator from its textual form.

        Matching is case-insensitive, ``<>`` is an alias for ``!=`` and
        ``None`` means ``=``.

        Raises:
            UnsupportedOperatorError: If the text names no operator.
        """
        if value is None:
            return cls.EQ
        if isinstance(value, cls):
            return value
        text = " ".join(str(value).split()).upper()
        if text == "<>":
            return cls.NE
        try:
            return cls(text)
        except ValueError:
            raise UnsupportedOperatorError(value, valid_operators=[m.value for m in cls]) from None


class Conjunction(str, Enum):
    """Combinator joining the members of a group."""

    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: Conjunction | str | None) -> Conjunction:
        if value is None:
            return cls.AND
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise MalformedConditionError(f"Unknown conjunction '{value}'. Expected AND or OR.") from None


_SET_OPERATORS = frozenset({Operator.IN, Operator.NOT_IN})
_NULL_OPERATORS = frozenset({Operator.IS_NULL, Operator.IS_NOT_NULL})


class Condition(BaseModel):
    """A single ``field operator value`` predicate.

    ``value`` is a scalar for comparison and pattern operators, a non-empty
    tuple for ``IN``/``NOT IN``, a pair for ``BETWEEN`` and ``None`` for the
    null checks.
    """

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Indexed field name")
    operator: Operator = Field(default=Operator.EQ, description="Comparison operator")
    value: Any = Field(default=None, description="Operand, shaped by the operator")

    @model_validator(mode="before")
    @classmethod
    def _check_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        field = data.get("field")
        if not isinstance(field, str) or not field.strip():
            raise MalformedConditionError(f"Condition field must be a non-empty string, got {field!r}.")

        operator = Operator.parse(data.get("operator"))
        data["operator"] = operator
        data["value"] = _normalize_value(field, operator, data.get("value"))
        return data

    def to_dict(self) -> dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"field": self.field, "operator": self.operator.value, "value": value}


def _normalize_value(field: str, operator: Operator, value: Any) -> Any:
    if operator in _NULL_OPERATORS:
        if value is not None:
            raise MalformedConditionError(f"{operator.value} on '{field}' takes no value, got {value!r}.", field)
        return None

    if operator in _SET_OPERATORS:
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise MalformedConditionError(f"{operator.value} on '{field}' requires a set of values.", field)
        if not value:
            raise MalformedConditionError(f"{operator.value} on '{field}' requires at least one value.", field)
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else list(value)
        for item in items:
            _require_scalar(field, operator, item)
        return tuple(items)

    if operator is Operator.BETWEEN:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise MalformedConditionError(f"BETWEEN on '{field}' requires exactly two values, got {value!r}.", field)
        for item in value:
            _require_scalar(field, operator, item)
        return tuple(value)

    _require_scalar(field, operator, value)
    if operator in (Operator.STARTS_WITH, Operator.ENDS_WITH, Operator.CONTAINS) and not isinstance(value, str):
        raise MalformedConditionError(f"{operator.value} on '{field}' requires a string value.", field)
    return value


def _require_scalar(field: str, operator: Operator, value: Any) -> None:
    if not isinstance(value, _SCALAR_TYPES):
        raise MalformedConditionError(
            f"{operator.value} on '{field}' requires a scalar value, got {type(value).__name__}.",
            field,
        )


class ConditionGroup(BaseModel):
    """An ordered group of conditions and sub-groups sharing a conjunction.

    The conjunction is fixed when the group is created.

    Example:
        >>> group = ConditionGroup()
        >>> group.condition("status", "published").condition("created", [1, 10], "BETWEEN")
        >>> group.add(ConditionGroup(conjunction="OR").exists("summary").condition("type", "page"))
    """

    model_config = ConfigDict(validate_assignment=True)

    conjunction: Conjunction = Field(default=Conjunction.AND, frozen=True)
    members: list[Condition | ConditionGroup] = Field(default_factory=list)

    @field_validator("conjunction", mode="before")
    @classmethod
    def _parse_conjunction(cls, v: Any) -> Conjunction:
        return Conjunction.parse(v)

    # ── Construction ─────────────────────────────────────────────────────

    def condition(
        self,
        field: str | ConditionGroup,
        value: Any = None,
        operator: Operator | str | None = None,
    ) -> ConditionGroup:
        """Add a leaf condition, or a nested group when ``field`` is a group."""
        if isinstance(field, ConditionGroup):
            return self.add(field)
        return self.add(Condition(field=field, operator=Operator.parse(operator), value=value))

    def exists(self, field: str) -> ConditionGroup:
        """Require ``field`` to have a value."""
        return self.condition(field, operator=Operator.IS_NOT_NULL)

    def not_exists(self, field: str) -> ConditionGroup:
        """Require ``field`` to have no value."""
        return self.condition(field, operator=Operator.IS_NULL)

    def add(self, member: Condition | ConditionGroup) -> ConditionGroup:
        if member is self:
            raise MalformedConditionError("A condition group cannot contain itself.")
        if not isinstance(member, (Condition, ConditionGroup)):
            raise MalformedConditionError(f"Cannot add {type(member).__name__} to a condition group.")
        self.members.append(member)
        return self

    # ── Declarative form ─────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConditionGroup:
        """Build a group from ``{"conjunction": ..., "conditions": [...]}``.

        Each entry of ``conditions`` is either a leaf
        (``{"field", "operator", "value"}``) or another group.
        """
        return cls._build(data, path="$")

    @classmethod
    def _build(cls, data: Any, path: str) -> ConditionGroup:
        if not isinstance(data, dict):
            raise MalformedConditionError(f"Condition group at {path} must be a mapping.")
        conditions = data.get("conditions", [])
        if not isinstance(conditions, list):
            raise MalformedConditionError(f"'conditions' at {path} must be a list.")

        group = cls(conjunction=data.get("conjunction"))
        for i, item in enumerate(conditions):
            item_path = f"{path}.conditions[{i}]"
            if isinstance(item, dict) and ("conditions" in item or "conjunction" in item):
                group.add(cls._build(item, item_path))
            elif isinstance(item, dict):
                if "field" not in item:
                    raise MalformedConditionError(f"Condition at {item_path} is missing 'field'.")
                group.condition(item["field"], item.get("value"), item.get("operator"))
            else:
                raise MalformedConditionError(f"Condition at {item_path} must be a mapping.")
        return group

    def to_dict(self) -> dict[str, Any]:
        return {
            "conjunction": self.conjunction.value,
            "conditions": [member.to_dict() for member in self.members],
        }


ConditionGroup.model_rebuild()

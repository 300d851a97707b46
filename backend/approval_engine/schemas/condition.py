# ruff: noqa: TC003
from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from approval_engine.models.enums import ConditionKind

# ---------------------------------------------------------------------------
# Predicate kinds (discriminated union)
#
# A rule condition is a single predicate. Stored conditions are key/value
# bags; only the first recognized key, in ConditionKind order, is honored.
# ---------------------------------------------------------------------------


class _ConditionBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class MaxAmountCondition(_ConditionBase):
    """Matches expenses whose amount is at most ``value``."""

    kind: Literal["max_amount"] = "max_amount"
    value: Decimal = Field(ge=0)


class MinAmountCondition(_ConditionBase):
    """Matches expenses whose amount is at least ``value``."""

    kind: Literal["min_amount"] = "min_amount"
    value: Decimal = Field(ge=0)


class MaxDaysCondition(_ConditionBase):
    """Matches leaves spanning at most ``value`` days."""

    kind: Literal["max_days"] = "max_days"
    value: int = Field(ge=0)


class MinDaysCondition(_ConditionBase):
    """Matches leaves spanning at least ``value`` days."""

    kind: Literal["min_days"] = "min_days"
    value: int = Field(ge=0)


class LeaveTypeCondition(_ConditionBase):
    """Matches leaves of exactly this leave type."""

    kind: Literal["leave_type"] = "leave_type"
    value: str = Field(min_length=1)


class DiscountPercentageCondition(_ConditionBase):
    """Matches discounts of at most ``value`` percent."""

    kind: Literal["discount_percentage"] = "discount_percentage"
    value: Decimal = Field(ge=0, le=100)


Condition = Annotated[
    MaxAmountCondition
    | MinAmountCondition
    | MaxDaysCondition
    | MinDaysCondition
    | LeaveTypeCondition
    | DiscountPercentageCondition,
    Field(discriminator="kind"),
]

_condition_adapter: TypeAdapter[Condition] = TypeAdapter(Condition)
_KINDS = frozenset(kind.value for kind in ConditionKind)


def condition_from_mapping(mapping: Mapping[str, Any] | None) -> Condition | None:
    """Convert a stored condition mapping into its single predicate.

    The first recognized key present in the mapping decides the predicate,
    even when its value is null. Returns None when the mapping is empty,
    holds no recognized key or the deciding key is null; such a condition
    never matches. A recognized key with a malformed value raises
    ``pydantic.ValidationError``.
    """
    if not mapping:
        return None
    tag = mapping.get("kind")
    if isinstance(tag, str) and tag in _KINDS:
        return _condition_adapter.validate_python(dict(mapping))
    for kind in ConditionKind:
        if kind.value not in mapping:
            continue
        value = mapping[kind.value]
        if value is None:
            return None
        return _condition_adapter.validate_python({"kind": kind.value, "value": value})
    return None

"""Condition evaluator: applies one rule predicate to one request."""

from __future__ import annotations

import logging
import operator
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from approval_engine.models.enums import ConditionKind
from approval_engine.schemas.condition import Condition, condition_from_mapping

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

# Request attribute and comparison (request value first) for each predicate.
_PREDICATES: dict[ConditionKind, tuple[str, Callable[[Any, Any], bool]]] = {
    ConditionKind.MAX_AMOUNT: ("amount", operator.le),
    ConditionKind.MIN_AMOUNT: ("amount", operator.ge),
    ConditionKind.MAX_DAYS: ("days", operator.le),
    ConditionKind.MIN_DAYS: ("days", operator.ge),
    ConditionKind.LEAVE_TYPE: ("leave_type", operator.eq),
    ConditionKind.DISCOUNT_PERCENTAGE: ("discount_percentage", operator.le),
}


def _request_value(request: Any, field_name: str) -> Any:
    if isinstance(request, Mapping):
        return request.get(field_name)
    return getattr(request, field_name, None)


def _as_condition(condition: Condition | Mapping[str, Any] | None) -> Condition | None:
    if condition is None or isinstance(condition, BaseModel):
        return condition
    try:
        return condition_from_mapping(condition)
    except ValidationError:
        logger.debug("Malformed condition %r treated as non-matching", condition)
        return None


def evaluate_condition(condition: Condition | Mapping[str, Any] | None, request: Any) -> bool:
    """Return True when ``request`` satisfies the rule condition.

    Fails closed: a missing or unrecognized condition, a request lacking the
    compared field, or incomparable values all evaluate to False.
    """
    predicate = _as_condition(condition)
    if predicate is None:
        return False

    field_name, compare = _PREDICATES[ConditionKind(predicate.kind)]
    actual = _request_value(request, field_name)
    if actual is None:
        return False

    try:
        return bool(compare(actual, predicate.value))
    except TypeError:
        return False

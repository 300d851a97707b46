"""Rule selector: picks the first applicable, matching rule by priority."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from approval_engine.services.condition import evaluate_condition

if TYPE_CHECKING:
    from collections.abc import Iterable

    from approval_engine.schemas.request import Request
    from approval_engine.schemas.rule import Rule

logger = logging.getLogger(__name__)


def _rule_order(rule: Rule) -> tuple[int, int]:
    """Sort key: ascending priority, ties broken by ascending rule id."""
    return (rule.priority, rule.id)


def is_rule_applicable(request: Request, rule: Rule) -> bool:
    """Whether the rule is active, of the request's type and in its grade scope."""
    if not rule.is_active:
        return False
    if rule.request_type != request.request_type:
        return False
    return rule.grade_id is None or rule.grade_id == request.requester_grade_id


def applicable_rules(request: Request, rules: Iterable[Rule]) -> list[Rule]:
    """Return the rules that may decide ``request``, in evaluation order."""
    return sorted((r for r in rules if is_rule_applicable(request, r)), key=_rule_order)


def select_rule(request: Request, rules: Iterable[Rule]) -> Rule | None:
    """Return the first applicable rule whose condition matches, or None.

    None is a normal outcome: the request needs a human decision.
    """
    for rule in applicable_rules(request, rules):
        if evaluate_condition(rule.condition, request):
            logger.debug("Request %s matched rule %s (priority %d)", request.id, rule.id, rule.priority)
            return rule
    return None

"""Auto-decision runner: creation-time decisions and batch sweeps over pending requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from approval_engine.models.enums import RequestStatus, RequestType
from approval_engine.schemas.decision import DecisionOutcome
from approval_engine.services.duration import count_working_days
from approval_engine.services.resolver import resolve_decision
from approval_engine.services.selector import select_rule

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable
    from datetime import date

    from approval_engine.schemas.request import Request
    from approval_engine.schemas.rule import Rule

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass
class SweepResult:
    """Summary of one sweep over pending requests."""

    processed: int = 0
    auto_approved: int = 0
    auto_rejected: int = 0
    routed: int = 0
    unchanged: int = 0


def summarize(outcomes: Iterable[DecisionOutcome]) -> SweepResult:
    """Tally decision outcomes by effect."""
    result = SweepResult()
    for outcome in outcomes:
        result.processed += 1
        if outcome.new_status == RequestStatus.AUTO_APPROVED:
            result.auto_approved += 1
        elif outcome.new_status == RequestStatus.AUTO_REJECTED:
            result.auto_rejected += 1
        elif outcome.assign_approver:
            result.routed += 1
        else:
            result.unchanged += 1
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def decide(request: Request, rules: Iterable[Rule]) -> DecisionOutcome:
    """Run the rule engine against a single request."""
    rule = select_rule(request, rules)
    outcome = resolve_decision(request, rule)
    if outcome.applied:
        logger.info(
            "Request %s %s -> %s by rule %s",
            request.id,
            outcome.previous_status,
            outcome.new_status,
            outcome.decided_by_rule_id,
        )
    return outcome


def sweep(pending_requests: Iterable[Request], rules: Iterable[Rule]) -> list[DecisionOutcome]:
    """Re-evaluate pending requests against a snapshot of the rule set.

    Requests that are not pending are skipped, so re-running a sweep over
    already-decided requests changes nothing.
    """
    snapshot = tuple(rules)
    outcomes: list[DecisionOutcome] = []
    skipped = 0

    for request in pending_requests:
        if request.status != RequestStatus.PENDING:
            skipped += 1
            continue
        outcomes.append(decide(request, snapshot))

    result = summarize(outcomes)
    logger.info(
        "Sweep complete: processed=%d approved=%d rejected=%d routed=%d unchanged=%d skipped=%d",
        result.processed,
        result.auto_approved,
        result.auto_rejected,
        result.routed,
        result.unchanged,
        skipped,
    )
    return outcomes


def expire_stale_requests(
    pending_requests: Iterable[Request],
    today: date,
    holidays: Collection[date] = (),
    max_working_days: int = 7,
) -> list[DecisionOutcome]:
    """Auto-reject pending requests left undecided for ``max_working_days``.

    Age is counted in working days from the creation date to ``today``,
    both inclusive. Only requests that expire are reported.
    """
    outcomes: list[DecisionOutcome] = []
    for request in pending_requests:
        if request.status != RequestStatus.PENDING:
            continue
        age = count_working_days(request.created_at.date(), today, holidays)
        if age < max_working_days:
            continue
        outcomes.append(
            DecisionOutcome(
                request_id=request.id,
                request_type=RequestType(request.request_type),
                previous_status=RequestStatus.PENDING,
                new_status=RequestStatus.AUTO_REJECTED,
                message=f"Auto rejected after {max_working_days} working days",
            )
        )
    if outcomes:
        logger.info("Expired %d stale pending requests", len(outcomes))
    return outcomes

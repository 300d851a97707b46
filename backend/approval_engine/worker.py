"""Worker process for scheduled decision sweeps.

Runs an asyncio loop that, for every request type, re-evaluates pending
requests against the active rules and then auto-rejects requests that
stayed pending for too long. Leave auto-approvals draw on the leave balance
and stay pending when it is too low.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date

from approval_engine.config import get_settings
from approval_engine.exceptions import AppError
from approval_engine.models.enums import RequestStatus, RequestType
from approval_engine.services.balance import ensure_leave_balance, settle_leave_balance
from approval_engine.services.holiday import get_holiday_service
from approval_engine.services.runner import SweepResult, expire_stale_requests, summarize, sweep
from approval_engine.services.store import get_request_store, get_rule_store

logger = logging.getLogger(__name__)


@dataclass
class TypeSweepResult:
    """Per-type outcome of one worker pass."""

    request_type: RequestType
    rules: SweepResult = field(default_factory=SweepResult)
    saved: int = 0
    conflicts: int = 0
    expired: int = 0
    balance_blocked: int = 0


async def sweep_request_type(request_type: RequestType, today: date) -> TypeSweepResult:
    """Sweep one request type and persist the resulting decisions."""
    settings = get_settings()
    request_store = get_request_store()
    rule_store = get_rule_store()
    result = TypeSweepResult(request_type=request_type)

    rules = await rule_store.list_active_rules(request_type)
    pending = await request_store.list_pending(request_type)
    outcomes = sweep(pending, rules)
    result.rules = summarize(outcomes)

    by_id = {r.id: r for r in pending}
    for outcome in outcomes:
        if not outcome.applied:
            continue
        before = by_id[outcome.request_id]
        if outcome.new_status == RequestStatus.AUTO_APPROVED:
            try:
                await ensure_leave_balance(before)
            except AppError as exc:
                logger.warning("Leaving request %s pending: %s", before.id, exc.message)
                result.balance_blocked += 1
                continue
        stored = await request_store.save_outcome(outcome)
        if stored is None:
            result.conflicts += 1
            continue
        await settle_leave_balance(before, stored)
        result.saved += 1

    still_pending = await request_store.list_pending(request_type)
    if still_pending:
        earliest = min(r.created_at.date() for r in still_pending)
        holidays = await get_holiday_service().list_holiday_dates(earliest, today)
        for outcome in expire_stale_requests(
            still_pending, today, holidays, settings.stale_pending_working_days
        ):
            if await request_store.save_outcome(outcome) is None:
                result.conflicts += 1
            else:
                result.expired += 1

    return result


async def run_sweep_once(today: date | None = None) -> list[TypeSweepResult]:
    """Run one pass over every request type. A failing type does not stop the others."""
    today = today or date.today()
    results: list[TypeSweepResult] = []

    for request_type in RequestType:
        try:
            result = await sweep_request_type(request_type, today)
        except Exception:
            logger.exception("Sweep failed for %s requests on %s", request_type, today)
            continue
        logger.info(
            "Sweep for %s on %s: processed=%d saved=%d conflicts=%d expired=%d balance_blocked=%d",
            request_type,
            today,
            result.rules.processed,
            result.saved,
            result.conflicts,
            result.expired,
            result.balance_blocked,
        )
        results.append(result)

    return results


async def run_sweep_loop() -> None:
    """Main worker loop."""
    settings = get_settings()
    logger.info("Sweep worker started (%s v%s)", settings.app_name, settings.app_version)

    while True:
        await run_sweep_once()
        await asyncio.sleep(settings.sweep_interval_seconds)


def main() -> None:
    """Entry point for the worker process."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_sweep_loop())


if __name__ == "__main__":
    main()

from approval_engine.services.condition import evaluate_condition
from approval_engine.services.lifecycle import authorize_transition, can_transition
from approval_engine.services.resolver import resolve_decision
from approval_engine.services.runner import decide, sweep
from approval_engine.services.selector import select_rule

__all__ = [
    "authorize_transition",
    "can_transition",
    "decide",
    "evaluate_condition",
    "resolve_decision",
    "select_rule",
    "sweep",
]

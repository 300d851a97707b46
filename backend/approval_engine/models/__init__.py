from approval_engine.models.enums import (
    ConditionKind,
    RequestStatus,
    RequestType,
    Role,
    RuleAction,
)

__all__ = [
    "ConditionKind",
    "RequestStatus",
    "RequestType",
    "Role",
    "RuleAction",
]

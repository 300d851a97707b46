from __future__ import annotations

from pydantic import BaseModel

from approval_engine.models.enums import Role


class ActorContext(BaseModel):
    """The user performing a manual status change."""

    user_id: int
    role: Role = Role.EMPLOYEE

from __future__ import annotations
from flask import abort
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from partsdesk.constants.roles import ROLE_OWNER
from partsdesk.models.account import User


def count_active_owners(session: Session) -> int:
    return session.execute(
        select(func.count(User.id)).where(User.role == ROLE_OWNER, User.is_active.is_(True))
    ).scalar_one()


def assert_not_removing_last_owner(session: Session, user: User, new_role: str, new_active: bool):
    """Abort 400 if the change would leave no active owner able to manage accounts."""
    if user.role != ROLE_OWNER or not user.is_active:
        return
    if new_role == ROLE_OWNER and new_active:
        return
    if count_active_owners(session) <= 1:
        abort(400, description='Cannot remove last active owner')

from functools import wraps
from flask import abort
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity
from sqlalchemy import select
from partsdesk import get_db
from partsdesk.models.account import User
from partsdesk.services.access import ANONYMOUS, AccessDecision, decide_route, session_from_claims


def current_session():
    """Session state of the current request; anonymous when no valid token is sent.

    The account is reloaded on every call: role and active flag come from the store,
    so a token issued before a demotion or a disable carries no stale privileges.
    """
    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()
    if identity is None:
        return ANONYMOUS
    user = get_db().execute(select(User).where(User.id == str(identity))).scalar_one_or_none()
    if user is None or not user.is_active:
        return ANONYMOUS
    return session_from_claims(identity, {**get_jwt(), 'role': user.role, 'username': user.username})


def require_roles(*roles: str):
    """Gate a view by role. No roles means any authenticated account.

    REDIRECT_LOGIN maps to 401 and REDIRECT_HOME to 403; API clients own the redirect.
    """
    allowed = frozenset(roles) if roles else None

    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            decision = decide_route(current_session(), allowed)
            if decision == AccessDecision.REDIRECT_LOGIN:
                abort(401, description='Authentication required')
            if decision != AccessDecision.RENDER:
                abort(403, description='Role not permitted')
            return fn(*args, **kwargs)
        return wrapper
    return outer

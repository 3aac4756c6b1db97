"""Route authorization gate.

Pure decisions over session state and a route's allowed roles. Evaluation order is
loading, then authentication, then role, so a session that is still resolving never
produces a login redirect. Missing or unknown roles are never authorized.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from partsdesk.constants.roles import ROLES, ROUTES, NAVIGATION, HOME_PATH, LOGIN_PATH, RouteRule


class AccessDecision(str, Enum):
    PENDING = 'pending'
    REDIRECT_LOGIN = 'redirect_login'
    REDIRECT_HOME = 'redirect_home'
    RENDER = 'render'


@dataclass(frozen=True)
class SessionUser:
    id: str
    username: Optional[str] = None
    role: Optional[str] = None


@dataclass(frozen=True)
class SessionState:
    is_authenticated: bool = False
    is_loading: bool = False
    user: Optional[SessionUser] = None

    @property
    def role(self) -> Optional[str]:
        return self.user.role if self.user else None


ANONYMOUS = SessionState()


def is_known_role(role: Any) -> bool:
    return isinstance(role, str) and role in ROLES


def role_allowed(role: Optional[str], allowed_roles: Optional[Iterable[str]]) -> bool:
    if allowed_roles is None:
        return True
    if not is_known_role(role):
        return False
    return role in set(allowed_roles)


def decide_route(state: SessionState, allowed_roles: Optional[Iterable[str]] = None) -> AccessDecision:
    if state.is_loading:
        return AccessDecision.PENDING
    if not state.is_authenticated:
        return AccessDecision.REDIRECT_LOGIN
    if not role_allowed(state.role, allowed_roles):
        return AccessDecision.REDIRECT_HOME
    return AccessDecision.RENDER


def decide_public_route(state: SessionState) -> AccessDecision:
    """For pages meant only for visitors (the login page)."""
    if state.is_loading:
        return AccessDecision.PENDING
    if state.is_authenticated:
        return AccessDecision.REDIRECT_HOME
    return AccessDecision.RENDER


def resolve_route(path: Optional[str]) -> Optional[RouteRule]:
    if not path:
        return None
    normalized = '/' + path.strip().strip('/')
    return ROUTES.get(normalized)


def evaluate_path(state: SessionState, path: Optional[str]) -> AccessDecision:
    """Decision for a front-end path. Unlisted paths still require a session."""
    if (path or '').strip() in ('', '/'):
        # root always lands on home, via login when needed
        decision = decide_route(state)
        return AccessDecision.REDIRECT_HOME if decision == AccessDecision.RENDER else decision
    rule = resolve_route(path)
    if rule is None:
        return decide_route(state)
    if rule.public:
        return decide_public_route(state)
    return decide_route(state, rule.allowed_roles)


def redirect_target(decision: AccessDecision) -> Optional[str]:
    if decision == AccessDecision.REDIRECT_LOGIN:
        return LOGIN_PATH
    if decision == AccessDecision.REDIRECT_HOME:
        return HOME_PATH
    return None


def navigation_for(role: Optional[str]) -> List[Dict[str, str]]:
    if not is_known_role(role):
        return []
    return [{'key': key, 'href': href} for key, href, roles in NAVIGATION if role in roles]


def session_from_claims(identity: Optional[Any], claims: Optional[Mapping[str, Any]]) -> SessionState:
    """Build server-side session state from a decoded JWT (never loading on the server)."""
    if identity is None:
        return ANONYMOUS
    claims = claims or {}
    role = claims.get('role')
    user = SessionUser(
        id=str(identity),
        username=claims.get('username'),
        role=role if isinstance(role, str) else None,
    )
    return SessionState(is_authenticated=True, is_loading=False, user=user)


__all__ = [
    'AccessDecision', 'SessionUser', 'SessionState', 'ANONYMOUS', 'is_known_role', 'role_allowed',
    'decide_route', 'decide_public_route', 'resolve_route', 'evaluate_path', 'redirect_target',
    'navigation_for', 'session_from_claims',
]

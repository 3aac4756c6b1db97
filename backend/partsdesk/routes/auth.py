import logging
from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt, get_jwt_identity
from sqlalchemy import select
from partsdesk import get_db
from partsdesk.models.account import User, RevokedToken
from partsdesk.services.access import evaluate_path, redirect_target, navigation_for
from partsdesk.services.audit import add_audit
from partsdesk.services.credentials import (
    LegacyCredentialError, hash_credential, matches_legacy_credential,
)
from partsdesk.decorators.auth import current_session, require_roles

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

INVALID_CREDENTIALS = 'Invalid username or password'


def _check_password(user: User, password: str) -> bool:
    try:
        return user.verify_password(password)
    except LegacyCredentialError:
        if not current_app.config.get('LEGACY_LOGIN_UPGRADE'):
            logger.warning("Login refused for '%s': credential still in legacy format", user.username)
            return False
    if not matches_legacy_credential(password, user.password_hash):
        return False
    user.password_hash = hash_credential(password)
    logger.info("Upgraded legacy credential of '%s' at login", user.username)
    return True


@auth_bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username'); password = data.get('password')
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        abort(400, description='username & password required')
    session = get_db()
    user = session.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user or not _check_password(user, password):
        session.rollback()
        abort(401, description=INVALID_CREDENTIALS)
    if not user.is_active:
        session.rollback()
        abort(401, description='Account is disabled')
    session.commit()  # persists a login-time credential upgrade
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=str(user.id), additional_claims={'role': user.role, 'username': user.username})
    return {'access_token': token, 'user': user.to_dict()}


@auth_bp.post('/logout')
@jwt_required()
def logout():
    session = get_db()
    session.add(RevokedToken(jti=get_jwt()['jti']))
    add_audit('AUTH.LOGOUT', 'User', get_jwt_identity())
    session.commit()
    return {'message': 'Logged out successfully'}


@auth_bp.get('/me')
@jwt_required()
def me():
    session = get_db()
    user = session.execute(select(User).where(User.id == get_jwt_identity())).scalar_one_or_none()
    if not user or not user.is_active:
        abort(401, description='Not authenticated')
    return {'user': user.to_dict()}


@auth_bp.get('/access')
def access():
    """Gate decision for a front-end path; the client performs the redirect."""
    path = request.args.get('path')
    if not path:
        abort(400, description='path required')
    decision = evaluate_path(current_session(), path)
    return {'path': path, 'decision': decision.value, 'redirect_to': redirect_target(decision)}


@auth_bp.get('/navigation')
@require_roles()
def navigation():
    state = current_session()
    return {'role': state.role, 'items': navigation_for(state.role)}

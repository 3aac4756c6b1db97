from flask import Blueprint, request, abort
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from partsdesk import get_db
from partsdesk.models.account import User
from partsdesk.constants.roles import ROLES, ROLE_OWNER, DEFAULT_ROLE
from partsdesk.config.settings import normalize_pagination
from partsdesk.services.policy import assert_not_removing_last_owner
from partsdesk.decorators.audit import audit_log
from partsdesk.decorators.auth import require_roles

users_bp = Blueprint('users', __name__)

REQUIRED_FIELDS = ('username', 'password', 'first_name', 'last_name')
UPDATABLE_FIELDS = ('username', 'first_name', 'last_name', 'email', 'role', 'is_active')


def _get_user_or_404(session, user_id: str) -> User:
    user = session.execute(select(User).where(User.id == user_id)).scalar_one_or_none()
    if not user:
        abort(404, description='User not found')
    return user


def _validate_account_fields(data):
    for field in ('username', 'first_name', 'last_name'):
        if field in data and (not isinstance(data[field], str) or not data[field].strip()):
            abort(400, description=f'{field} must be a non-empty string')
    if 'is_active' in data and not isinstance(data['is_active'], bool):
        abort(400, description='is_active must be a boolean')


def _validate_role(role):
    if role not in ROLES:
        abort(400, description=f'Unknown role: {role}')


def _snapshot(args, kwargs):
    user = get_db().execute(select(User).where(User.id == kwargs.get('user_id'))).scalar_one_or_none()
    return user.to_dict() if user else None


@users_bp.get('')
@require_roles(ROLE_OWNER)
def list_users():
    session = get_db()
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        abort(400, description=str(e))
    q = session.query(User)
    total = q.count()
    rows = q.order_by(User.created_at.asc(), User.username.asc()).offset(offset).limit(limit).all()
    return {
        'data': [u.to_dict() for u in rows],
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }


@users_bp.get('/<user_id>')
@require_roles(ROLE_OWNER)
def get_user(user_id: str):
    return _get_user_or_404(get_db(), user_id).to_dict()


@users_bp.post('')
@require_roles(ROLE_OWNER)
@audit_log('USER.CREATE', entity='User', entity_id_key='id', meta_keys=['username', 'role'])
def create_user():
    data = request.get_json(silent=True) or {}
    missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
    if missing:
        abort(400, description=f'missing fields: {", ".join(missing)}')
    _validate_account_fields(data)
    role = data.get('role') or DEFAULT_ROLE
    _validate_role(role)
    session = get_db()
    if session.execute(select(User.id).where(User.username == data['username'])).scalar_one_or_none():
        abort(400, description='username exists')
    user = User(
        username=data['username'],
        role=role,
        first_name=data['first_name'],
        last_name=data['last_name'],
        email=data.get('email'),
        is_active=data.get('is_active', True),
    )
    user.set_password(data['password'])
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        abort(400, description='username exists')
    return user.to_dict(), 201


@users_bp.put('/<user_id>')
@require_roles(ROLE_OWNER)
@audit_log('USER.UPDATE', entity='User', entity_id_arg='user_id',
           diff_keys=['username', 'role', 'is_active', 'email'], pre_fetch=_snapshot)
def update_user(user_id: str):
    data = request.get_json(silent=True) or {}
    session = get_db()
    user = _get_user_or_404(session, user_id)
    _validate_account_fields(data)
    if 'role' in data:
        _validate_role(data['role'])
    new_role = data.get('role', user.role)
    new_active = data.get('is_active', user.is_active)
    assert_not_removing_last_owner(session, user, new_role, new_active)
    for field in UPDATABLE_FIELDS:
        if field in data:
            setattr(user, field, data[field] if field != 'is_active' else new_active)
    if data.get('password'):
        user.set_password(data['password'])
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        abort(400, description='username exists')
    return user.to_dict()


@users_bp.delete('/<user_id>')
@require_roles(ROLE_OWNER)
@audit_log('USER.DELETE', entity='User', entity_id_arg='user_id', meta_keys=['username'])
def delete_user(user_id: str):
    session = get_db()
    user = _get_user_or_404(session, user_id)
    assert_not_removing_last_owner(session, user, new_role='', new_active=False)
    username = user.username
    session.delete(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        abort(409, description='User is referenced by other records; deactivate instead')
    return {'message': 'User deleted successfully', 'username': username}

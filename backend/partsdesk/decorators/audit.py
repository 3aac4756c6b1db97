from __future__ import annotations
"""Audit logging decorator for account-management views.

Usage:

@audit_log('USER.CREATE', entity='User', entity_id_key='id', meta_keys=['username', 'role'])
def create_user():
    ... return {'id': user.id, 'username': user.username, 'role': user.role}, 201

@audit_log('USER.UPDATE', entity='User', entity_id_arg='user_id',
           diff_keys=['role', 'is_active'], pre_fetch=lambda args, kwargs: snapshot(kwargs['user_id']))
def update_user(user_id): ...

Only successful responses (status < 400) are audited. The view's return value
(dict, (dict, status) or (dict, status, headers)) is passed through unchanged.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional

from partsdesk.services.audit import add_audit
from partsdesk import get_db

logger = logging.getLogger(__name__)


def _split_response(rv: Any):
    """Return (payload, status) for the common Flask return shapes."""
    if isinstance(rv, tuple) and rv:
        status = rv[1] if len(rv) > 1 and isinstance(rv[1], int) else 200
        return rv[0], status
    return rv, 200


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Optional[Dict[str, Any]]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before = pre_fetch(args, kwargs) if (diff_keys and pre_fetch) else None
            rv = fn(*args, **kwargs)
            data, status = _split_response(rv)
            if status >= 400 or not isinstance(data, dict):
                return rv
            entity_id = data.get(entity_id_key) if entity_id_key else None
            if entity_id is None and entity_id_arg:
                entity_id = kwargs.get(entity_id_arg)
            meta = {k: data.get(k) for k in (meta_keys or []) if k in data}
            if diff_keys and before:
                changes = {
                    k: {'before': before.get(k), 'after': data.get(k)}
                    for k in diff_keys
                    if k in before and k in data and before.get(k) != data.get(k)
                }
                if changes:
                    meta['changes'] = changes
            add_audit(action, entity, entity_id, meta)
            session = get_db()
            try:
                session.commit()
            except Exception:
                # the view already committed its change; a lost audit row must not fail the response
                session.rollback()
                logger.exception("Failed to persist audit entry %s", action)
            return rv
        return wrapper
    return outer

from __future__ import annotations
from typing import Any, Dict, Optional
from flask_jwt_extended import get_jwt_identity, get_jwt
from partsdesk import get_db
from partsdesk.models.audit import AuditLog


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
    """Persist an audit log entry within the current DB session.

    Parameters:
      action: short action code e.g. USER.CREATE, USER.UPDATE, AUTH.LOGOUT
      entity: optional entity name (User)
      entity_id: optional primary key string
      meta: additional JSON-safe dictionary (shallow copied)

    Outside a verified JWT context (CLI, bootstrap) the actor is recorded as None.
    """
    session = get_db()
    try:
        actor = get_jwt_identity()
        claims = get_jwt() or {}
    except RuntimeError:
        actor, claims = None, {}
    log = AuditLog(
        actor_user_id=str(actor) if actor is not None else None,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        role_snapshot=claims.get('role'),
        meta=dict(meta or {}),
    )
    session.add(log)
    # No commit here; caller's transaction boundary controls durability.
    return log

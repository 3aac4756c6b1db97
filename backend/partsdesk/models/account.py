from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy import String, Text, Boolean, DateTime, Integer, func, true

from .enums import user_role
from partsdesk.constants.roles import DEFAULT_ROLE

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Staff account. Column names match stores created by the earlier Node back end."""
    __tablename__ = 'users'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # stored credential record (salt:derivedKeyHex); column kept as "password" for existing stores
    password_hash: Mapped[str] = mapped_column('password', Text, nullable=False)
    role: Mapped[str] = mapped_column(user_role, nullable=False, default=DEFAULT_ROLE, server_default=DEFAULT_ROLE)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    def set_password(self, raw: str):
        from partsdesk.services.credentials import hash_credential
        self.password_hash = hash_credential(raw)

    def verify_password(self, raw: str) -> bool:
        """Raises LegacyCredentialError when the stored value predates salted records."""
        from partsdesk.services.credentials import verify_credential
        return verify_credential(raw, self.password_hash)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class SchemaVersion(Base):
    """Single-row record of the applied schema version (id is always 1)."""
    __tablename__ = 'schema_version'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class RevokedToken(Base):
    __tablename__ = 'revoked_tokens'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    jti: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    revoked_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

from __future__ import annotations
import logging
from enum import Enum
from typing import Callable, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from partsdesk.constants.roles import ROLE_OWNER
from partsdesk.models.account import User
from partsdesk.services.credentials import hash_credential, is_legacy_credential

logger = logging.getLogger(__name__)

ADMIN_USERNAME = 'admin'
DEFAULT_ADMIN_PASSWORD = 'admin'
DEFAULT_ADMIN_EMAIL = 'admin@lynxly.com'


class SeedOutcome(str, Enum):
    CREATED = 'created'
    MIGRATED = 'migrated'
    UNCHANGED = 'unchanged'
    RACE_LOST = 'race_lost'


class AdminSeeder:
    """Guarantees the privileged ``admin`` account.

    No lock is taken: two instances racing on an empty store are resolved by the
    unique constraint on ``users.username``; the loser sees an IntegrityError and
    reports RACE_LOST.
    """

    def __init__(self, session_factory: Callable[[], Session], password: str = DEFAULT_ADMIN_PASSWORD,
                 email: Optional[str] = DEFAULT_ADMIN_EMAIL):
        self.session_factory = session_factory
        self.password = password
        self.email = email

    def ensure(self) -> SeedOutcome:
        session = self.session_factory()
        try:
            admin = session.execute(select(User).where(User.username == ADMIN_USERNAME)).scalar_one_or_none()
            if admin is None:
                return self._create(session)
            if is_legacy_credential(admin.password_hash):
                admin.password_hash = hash_credential(self.password)
                session.commit()
                logger.info("Migrated legacy credential of '%s' to salted format", ADMIN_USERNAME)
                return SeedOutcome.MIGRATED
            return SeedOutcome.UNCHANGED
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _create(self, session: Session) -> SeedOutcome:
        admin = User(
            username=ADMIN_USERNAME,
            password_hash=hash_credential(self.password),
            role=ROLE_OWNER,
            first_name='Admin',
            last_name='User',
            email=self.email,
            is_active=True,
        )
        session.add(admin)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            winner = session.execute(select(User.id).where(User.username == ADMIN_USERNAME)).scalar_one_or_none()
            if winner is None:
                # not the username race; a genuine insert failure
                raise
            logger.debug("Admin account created concurrently by another instance")
            return SeedOutcome.RACE_LOST
        logger.info("Created default '%s' account with role %s", ADMIN_USERNAME, ROLE_OWNER)
        return SeedOutcome.CREATED


__all__ = ['AdminSeeder', 'SeedOutcome', 'ADMIN_USERNAME', 'DEFAULT_ADMIN_PASSWORD', 'DEFAULT_ADMIN_EMAIL']

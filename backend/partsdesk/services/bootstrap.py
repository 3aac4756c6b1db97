"""Startup schema bootstrap.

``bootstrap()`` brings a store from empty (or from an older version) to the latest
schema version and then guarantees the admin account. The schema version lives in
the single-row ``schema_version`` table, written in the same transaction as the DDL
it records, so on PostgreSQL a failed run leaves nothing half-created.

Several instances may bootstrap the same store at once. There is no lock: guarded
DDL and the username unique constraint make the overlap safe but wasteful. A DDL
failure is logged and swallowed so the service can still start; the next restart
retries the pending steps.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence
from sqlalchemy import inspect, select, update, insert, func
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import sessionmaker

from partsdesk.models.account import SchemaVersion
from partsdesk.services.admin_seed import AdminSeeder, SeedOutcome
from partsdesk.services.schema_steps import (
    SCHEMA_STEPS, LEGACY_VERSION, LEGACY_MARKER_TABLE, SchemaStep,
)

logger = logging.getLogger(__name__)


@dataclass
class BootstrapReport:
    initial_version: int = 0
    final_version: int = 0
    applied_steps: List[int] = field(default_factory=list)
    seed: Optional[SeedOutcome] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self):
        return {
            'initial_version': self.initial_version,
            'final_version': self.final_version,
            'applied_steps': list(self.applied_steps),
            'seed': self.seed.value if self.seed else None,
            'error': self.error,
        }


class SchemaBootstrapper:
    def __init__(self, engine: Engine, seeder: AdminSeeder, steps: Sequence[SchemaStep] = SCHEMA_STEPS):
        self.engine = engine
        self.seeder = seeder
        self.steps = list(steps)

    @classmethod
    def from_config(cls, engine: Engine, config: Mapping[str, Any]) -> 'SchemaBootstrapper':
        seeder = AdminSeeder(
            sessionmaker(bind=engine, expire_on_commit=False),
            password=config['ADMIN_BOOTSTRAP_PASSWORD'],
            email=config.get('ADMIN_EMAIL'),
        )
        return cls(engine, seeder)

    @property
    def latest_version(self) -> int:
        return self.steps[-1].version if self.steps else 0

    def current_version(self) -> int:
        with self.engine.connect() as conn:
            return self._read_version(conn)

    def probe(self) -> bool:
        """True when the store is already at the latest schema version."""
        return self.current_version() >= self.latest_version

    def create_schema(self) -> List[int]:
        """Apply every pending step in one transaction; returns the applied versions."""
        applied: List[int] = []
        with self.engine.begin() as conn:
            current = self._read_version(conn)
            for step in self.steps:
                if step.version <= current:
                    continue
                logger.info("Applying schema step %s: %s", step.version, step.description)
                step.apply(conn)
                applied.append(step.version)
            if applied:
                self._write_version(conn, applied[-1])
        return applied

    def bootstrap(self) -> BootstrapReport:
        report = BootstrapReport()
        try:
            report.initial_version = self.current_version()
            if report.initial_version >= self.latest_version:
                logger.info("Database already initialized (schema version %s), skipping DDL",
                            report.initial_version)
            else:
                logger.info("Initializing database schema (version %s -> %s)",
                            report.initial_version, self.latest_version)
                report.applied_steps = self.create_schema()
                logger.info("Database schema ready at version %s", self.latest_version)
        except Exception as exc:
            logger.exception("Schema bootstrap failed; continuing with a possibly incomplete store")
            report.error = str(exc)
            if not self._probe_after_failure():
                report.final_version = report.initial_version
                return report
            # another instance finished the schema while this one was failing
            logger.info("Schema completed by a concurrent bootstrap")
        report.seed = self.seeder.ensure()
        report.final_version = self.current_version()
        return report

    def _probe_after_failure(self) -> bool:
        try:
            return self.probe()
        except Exception:
            logger.warning("Store unreachable after failed bootstrap", exc_info=True)
            return False

    def _read_version(self, conn: Connection) -> int:
        inspector = inspect(conn)
        if inspector.has_table(SchemaVersion.__tablename__):
            version = conn.execute(select(SchemaVersion.version).where(SchemaVersion.id == 1)).scalar_one_or_none()
            if version is not None:
                return version
        if inspector.has_table(LEGACY_MARKER_TABLE):
            return LEGACY_VERSION
        return 0

    def _write_version(self, conn: Connection, version: int):
        SchemaVersion.__table__.create(conn, checkfirst=True)
        result = conn.execute(
            update(SchemaVersion).where(SchemaVersion.id == 1).values(version=version, updated_at=func.now())
        )
        if not result.rowcount:
            conn.execute(insert(SchemaVersion).values(id=1, version=version))


__all__ = ['SchemaBootstrapper', 'BootstrapReport']

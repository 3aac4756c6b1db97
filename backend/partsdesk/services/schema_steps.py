"""Ordered schema steps applied by the bootstrapper.

Each step runs inside the bootstrapper's single transaction and must be safe to
re-run: every CREATE is guarded with ``checkfirst`` and column changes are only
made after inspecting the live table.

Version 1 is the base schema. Stores created by the earlier marker-table bootstrap
are adopted at version 1 and only receive version 2, which repairs the column drift
those stores are known to have (``products.selling_price``, missing ``safe_id`` on
invoices, NOT NULL catalog columns) and adds the catalog indexes.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Column, ForeignKey, Table, inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, ProgrammingError

from partsdesk.models.registry import metadata
from partsdesk.models.enums import ENUM_TYPES

logger = logging.getLogger(__name__)

TRIGRAM_INDEXES = [
    ('idx_products_name_trgm', 'name'),
    ('idx_products_sku_trgm', 'sku'),
    ('idx_products_category_trgm', 'category'),
]


@dataclass(frozen=True)
class SchemaStep:
    version: int
    description: str
    apply: Callable[[Connection], None]


def create_enum_types(conn: Connection):
    if conn.dialect.name != 'postgresql':
        return  # stored as VARCHAR elsewhere
    for enum_type in ENUM_TYPES:
        savepoint = conn.begin_nested()
        try:
            enum_type.create(conn, checkfirst=True)
        except ProgrammingError:
            # created by a concurrent bootstrap between the check and the CREATE
            savepoint.rollback()
            logger.debug("Enum type %s already exists", enum_type.name)
        else:
            savepoint.commit()


def create_tables(conn: Connection):
    # sorted_tables puts referenced tables first; self references are nullable columns
    for table in metadata.sorted_tables:
        table.create(conn, checkfirst=True)


def create_indexes(conn: Connection):
    for table in metadata.sorted_tables:
        for index in table.indexes:
            index.create(conn, checkfirst=True)


def _addable_copy(col: Column) -> Column:
    return Column(
        col.name,
        col.type,
        *[ForeignKey(fk.target_fullname) for fk in col.foreign_keys],
        nullable=col.nullable,
        server_default=col.server_default.arg if col.server_default is not None else None,
    )


def reconcile_columns(conn: Connection, ops: Operations, table: Table):
    """Add missing columns and relax NOT NULL where the model allows NULL."""
    existing = {c['name']: c for c in inspect(conn).get_columns(table.name)}
    additions = []
    relaxed = []
    for col in table.columns:
        live = existing.get(col.name)
        if live is None:
            if col.nullable or col.server_default is not None:
                additions.append(col)
            else:
                logger.warning("Cannot add NOT NULL column %s.%s without a server default; skipped",
                               table.name, col.name)
        elif col.nullable and not col.primary_key and not live['nullable']:
            relaxed.append(col)
    if not additions and not relaxed:
        return
    with ops.batch_alter_table(table.name) as batch:
        for col in additions:
            logger.info("Migrating: adding column %s.%s", table.name, col.name)
            batch.add_column(_addable_copy(col))
        for col in relaxed:
            logger.info("Migrating: making %s.%s nullable", table.name, col.name)
            batch.alter_column(col.name, existing_type=col.type, nullable=True)


def enable_trigram_search(conn: Connection):
    savepoint = conn.begin_nested()
    try:
        conn.execute(text('CREATE EXTENSION IF NOT EXISTS pg_trgm'))
        for name, column in TRIGRAM_INDEXES:
            conn.execute(text(f'CREATE INDEX IF NOT EXISTS {name} ON products USING gin ({column} gin_trgm_ops)'))
    except DBAPIError:
        savepoint.rollback()
        logger.warning("pg_trgm unavailable; product search keeps btree indexes only", exc_info=True)
    else:
        savepoint.commit()


def create_base_schema(conn: Connection):
    create_enum_types(conn)
    create_tables(conn)


def upgrade_catalog(conn: Connection):
    create_enum_types(conn)
    create_tables(conn)
    ops = Operations(MigrationContext.configure(conn))
    product_columns = {c['name'] for c in inspect(conn).get_columns('products')}
    if 'selling_price' in product_columns and 'price' not in product_columns:
        logger.info("Migrating: renaming products.selling_price to price")
        with ops.batch_alter_table('products') as batch:
            batch.alter_column('selling_price', new_column_name='price')
    for table in metadata.sorted_tables:
        reconcile_columns(conn, ops, table)
    create_indexes(conn)
    if conn.dialect.name == 'postgresql':
        enable_trigram_search(conn)


SCHEMA_STEPS: List[SchemaStep] = [
    SchemaStep(1, 'base schema: enum types and tables', create_base_schema),
    SchemaStep(2, 'catalog column repair and indexes', upgrade_catalog),
]

LATEST_VERSION = SCHEMA_STEPS[-1].version
# stores with a users table but no version record were built by the marker-table bootstrap
LEGACY_VERSION = 1
LEGACY_MARKER_TABLE = 'users'

"""Environment-backed defaults for ``app.config``.

Values come from the process environment (``.env`` is loaded by the app factory);
``create_app(config=...)`` overrides any of them.
"""
from __future__ import annotations
import os
from datetime import timedelta
from typing import Any, Dict

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


def env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def load_settings() -> Dict[str, Any]:
    return {
        'DATABASE_URL': os.getenv('DATABASE_URL', 'sqlite:///dev.db'),
        'JWT_SECRET_KEY': os.getenv('JWT_SECRET_KEY', 'dev-secret'),
        'JWT_ACCESS_TOKEN_EXPIRES': timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_HOURS', '24'))),
        'BOOTSTRAP_ON_START': env_flag('BOOTSTRAP_ON_START', True),
        'ADMIN_BOOTSTRAP_PASSWORD': os.getenv('ADMIN_BOOTSTRAP_PASSWORD', 'admin'),
        'ADMIN_EMAIL': os.getenv('ADMIN_EMAIL', 'admin@lynxly.com'),
        'LEGACY_LOGIN_UPGRADE': env_flag('LEGACY_LOGIN_UPGRADE', False),
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO'),
        'DB_POOL_SIZE': int(os.getenv('DB_POOL_SIZE', '5')),
        'DB_MAX_OVERFLOW': int(os.getenv('DB_MAX_OVERFLOW', '15')),
        'DB_POOL_TIMEOUT': int(os.getenv('DB_POOL_TIMEOUT', '5')),
        'DB_STATEMENT_TIMEOUT_MS': int(os.getenv('DB_STATEMENT_TIMEOUT_MS', '10000')),
    }


def normalize_pagination(limit_raw, offset_raw):
    try:
        limit = int(limit_raw) if limit_raw is not None else DEFAULT_LIMIT
        offset = int(offset_raw) if offset_raw is not None else 0
    except ValueError:
        raise ValueError('limit/offset must be int')
    limit = max(1, min(limit, MAX_LIMIT))
    offset = max(0, offset)
    return limit, offset

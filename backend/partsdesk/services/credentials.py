"""Salted scrypt credential records.

Stored form is ``<salt>:<derived key hex>``. The salt is the hex text of 16 random
bytes and is fed to scrypt as-is, which keeps records written by the earlier Node
back end (``crypto.scrypt`` with default cost) verifiable here.

A value without the separator is the legacy plaintext format. ``verify_credential``
refuses to judge those and raises ``LegacyCredentialError`` so callers decide the
policy (the admin seeder rewrites them, login rejects or upgrades them).
"""
from __future__ import annotations
import hashlib
import hmac
import secrets
from dataclasses import dataclass

SEPARATOR = ':'
SALT_BYTES = 16
KEY_LENGTH = 64
# node's crypto.scrypt defaults
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_MAXMEM = 64 * 1024 * 1024


class LegacyCredentialError(ValueError):
    """Stored credential is in the unsalted legacy format and cannot be verified."""


class MalformedCredentialError(ValueError):
    pass


@dataclass(frozen=True)
class CredentialRecord:
    salt: str
    derived_key: bytes

    def serialize(self) -> str:
        return f"{self.salt}{SEPARATOR}{self.derived_key.hex()}"

    @classmethod
    def parse(cls, stored: str) -> 'CredentialRecord':
        if is_legacy_credential(stored):
            raise LegacyCredentialError('credential has no salt separator')
        salt, sep, key_hex = stored.partition(SEPARATOR)
        if not salt or SEPARATOR in key_hex:
            raise MalformedCredentialError('credential must contain exactly one separator')
        try:
            key = bytes.fromhex(key_hex)
        except ValueError:
            raise MalformedCredentialError('derived key is not hex')
        if len(key) != KEY_LENGTH:
            raise MalformedCredentialError(f'derived key must be {KEY_LENGTH} bytes')
        return cls(salt=salt, derived_key=key)


def derive_key(plaintext: str, salt: str) -> bytes:
    return hashlib.scrypt(
        plaintext.encode('utf-8'),
        salt=salt.encode('utf-8'),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        maxmem=SCRYPT_MAXMEM,
        dklen=KEY_LENGTH,
    )


def is_legacy_credential(stored: str) -> bool:
    return SEPARATOR not in (stored or '')


def hash_credential(plaintext: str) -> str:
    salt = secrets.token_hex(SALT_BYTES)
    return CredentialRecord(salt=salt, derived_key=derive_key(plaintext, salt)).serialize()


def verify_credential(plaintext: str, stored: str) -> bool:
    try:
        record = CredentialRecord.parse(stored)
    except MalformedCredentialError:
        return False
    candidate = derive_key(plaintext, record.salt)
    return hmac.compare_digest(candidate, record.derived_key)


def matches_legacy_credential(plaintext: str, stored: str) -> bool:
    """Constant-time comparison against an unsalted legacy value."""
    return hmac.compare_digest(plaintext.encode('utf-8'), (stored or '').encode('utf-8'))


__all__ = [
    'CredentialRecord', 'LegacyCredentialError', 'MalformedCredentialError',
    'hash_credential', 'verify_credential', 'is_legacy_credential', 'matches_legacy_credential',
]

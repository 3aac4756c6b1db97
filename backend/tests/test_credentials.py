import pytest
from partsdesk.services import credentials
from partsdesk.services.credentials import (
    CredentialRecord, LegacyCredentialError, hash_credential, verify_credential,
    is_legacy_credential, matches_legacy_credential, KEY_LENGTH, SALT_BYTES,
)


def test_hash_then_verify():
    stored = hash_credential('s3cret!')
    assert verify_credential('s3cret!', stored) is True
    assert verify_credential('s3cret?', stored) is False


def test_serialized_shape():
    stored = hash_credential('admin')
    assert stored.count(':') == 1
    salt, key_hex = stored.split(':')
    assert len(salt) == SALT_BYTES * 2
    assert len(bytes.fromhex(key_hex)) == KEY_LENGTH
    assert not is_legacy_credential(stored)


def test_same_plaintext_gets_fresh_salt():
    first = hash_credential('admin')
    second = hash_credential('admin')
    assert first != second
    assert verify_credential('admin', first)
    assert verify_credential('admin', second)


def test_record_parse_roundtrip():
    stored = hash_credential('pw')
    record = CredentialRecord.parse(stored)
    assert record.serialize() == stored


def test_legacy_format_is_reported_not_failed():
    assert is_legacy_credential('admin')
    with pytest.raises(LegacyCredentialError):
        verify_credential('admin', 'admin')


@pytest.mark.parametrize('stored', [
    'abc:def:0011',          # two separators
    'abc:not-hex',
    'abc:' + '00' * 8,       # wrong key length
    ':' + '00' * KEY_LENGTH,  # empty salt
])
def test_malformed_records_never_verify(stored):
    assert verify_credential('anything', stored) is False


def test_legacy_comparison_helper():
    assert matches_legacy_credential('admin', 'admin')
    assert not matches_legacy_credential('admin', 'Admin')


def test_entropy_failure_propagates(monkeypatch):
    def broken(nbytes):
        raise OSError('entropy source unavailable')
    monkeypatch.setattr(credentials.secrets, 'token_hex', broken)
    with pytest.raises(OSError):
        hash_credential('pw')

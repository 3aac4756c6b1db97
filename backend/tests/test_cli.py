import json
import pytest
import partsdesk
from partsdesk import cli
from partsdesk.services.credentials import verify_credential


@pytest.fixture()
def cli_config(tmp_path, monkeypatch):
    # create_app swaps the module-level engine and session registry; restore them afterwards
    monkeypatch.setattr(partsdesk, 'db_engine', partsdesk.db_engine)
    monkeypatch.setattr(partsdesk, 'SessionLocal', partsdesk.SessionLocal)
    return {
        'DATABASE_URL': f"sqlite:///{tmp_path / 'cli.db'}",
        'JWT_SECRET_KEY': 'cli-secret-key-with-enough-length-for-hs256',
        'ADMIN_BOOTSTRAP_PASSWORD': 'admin',
    }


def test_hash_password_prints_record(capsys):
    assert cli.main(['hash-password', 's3cret']) == cli.EXIT_OK
    record = capsys.readouterr().out.strip()
    assert verify_credential('s3cret', record)


def test_status_on_empty_store(cli_config, capsys):
    assert cli.main(['status'], config=cli_config) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert 'Schema version: 0 (latest 2)' in out
    assert 'Admin account: missing' in out


def test_bootstrap_then_status(cli_config, capsys):
    assert cli.main(['bootstrap'], config=cli_config) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert '[DONE] Schema version 0 -> 2 (steps applied: 1, 2)' in out
    assert '[INFO] Admin account: created' in out

    assert cli.main(['bootstrap', '--json'], config=cli_config) == cli.EXIT_OK
    report = json.loads(capsys.readouterr().out)
    assert report['applied_steps'] == []
    assert report['seed'] == 'unchanged'
    assert report['error'] is None

    assert cli.main(['status'], config=cli_config) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert 'Schema version: 2 (latest 2)' in out
    assert 'Admin account: present (role=owner, active=True)' in out


def test_bootstrap_failure_exit_code(cli_config, capsys, monkeypatch):
    from partsdesk.services.bootstrap import SchemaBootstrapper

    def broken_create(self):
        raise RuntimeError('no space left')

    monkeypatch.setattr(SchemaBootstrapper, 'create_schema', broken_create)
    assert cli.main(['bootstrap'], config=cli_config) == cli.EXIT_BOOTSTRAP_FAILED
    captured = capsys.readouterr()
    assert 'no space left' in captured.err


def test_command_required():
    with pytest.raises(SystemExit):
        cli.main([])

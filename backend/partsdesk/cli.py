"""Database maintenance commands.

Usage:
    partsdesk-db bootstrap              # apply pending schema steps and ensure the admin account
    partsdesk-db bootstrap --json       # same, report printed as JSON
    partsdesk-db status                 # schema version and admin presence, no changes
    partsdesk-db hash-password SECRET   # print a salted credential record for SECRET
"""
from __future__ import annotations
import argparse
import json
import sys
import textwrap
from typing import List, Optional
from sqlalchemy import select, inspect

from partsdesk import create_app, get_db
from partsdesk.models.account import User
from partsdesk.services.admin_seed import ADMIN_USERNAME
from partsdesk.services.credentials import hash_credential, is_legacy_credential

EXIT_OK = 0
EXIT_BOOTSTRAP_FAILED = 2


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(
        prog='partsdesk-db',
        description='Schema bootstrap and credential utilities',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  partsdesk-db bootstrap\n  partsdesk-db status\n  partsdesk-db hash-password s3cret\n""")
    )
    sub = p.add_subparsers(dest='command', required=True)
    boot = sub.add_parser('bootstrap', help='Create or upgrade the schema, then ensure the admin account')
    boot.add_argument('--json', action='store_true', help='Print the bootstrap report as JSON')
    sub.add_parser('status', help='Show schema version and admin account state')
    hp = sub.add_parser('hash-password', help='Print a salted credential record')
    hp.add_argument('plaintext')
    return p.parse_args(argv)


def _admin_state(app) -> str:
    with app.app_context():
        session = get_db()
        if not inspect(session.get_bind()).has_table(User.__tablename__):
            return 'missing'
        admin = session.execute(select(User).where(User.username == ADMIN_USERNAME)).scalar_one_or_none()
        if admin is None:
            return 'missing'
        if is_legacy_credential(admin.password_hash):
            return 'legacy-credential'
        return f'present (role={admin.role}, active={admin.is_active})'


def cmd_bootstrap(app, args) -> int:
    report = app.extensions['partsdesk.bootstrapper'].bootstrap()
    if args.json:
        print(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        applied = ', '.join(str(v) for v in report.applied_steps) or 'none'
        print(f"[DONE] Schema version {report.initial_version} -> {report.final_version} (steps applied: {applied})")
        if report.seed:
            print(f"[INFO] Admin account: {report.seed.value}")
    if not report.ok:
        print(f"[ERROR] Bootstrap failed: {report.error}", file=sys.stderr)
        return EXIT_BOOTSTRAP_FAILED
    return EXIT_OK


def cmd_status(app, args) -> int:
    bootstrapper = app.extensions['partsdesk.bootstrapper']
    print(f"Schema version: {bootstrapper.current_version()} (latest {bootstrapper.latest_version})")
    print(f"Admin account: {_admin_state(app)}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None, config: Optional[dict] = None) -> int:
    args = parse_args(argv)
    if args.command == 'hash-password':
        print(hash_credential(args.plaintext))
        return EXIT_OK
    # commands run the bootstrapper explicitly, never implicitly at app creation
    app = create_app({**(config or {}), 'BOOTSTRAP_ON_START': False})
    if args.command == 'bootstrap':
        return cmd_bootstrap(app, args)
    return cmd_status(app, args)


if __name__ == '__main__':
    sys.exit(main())

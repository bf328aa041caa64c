"""Command-line helper for Google Workspace directory lookups.

This module serves as a CLI wrapper around gdirectory.core.google services.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from gdirectory.core.google import (
    Authenticator,
    DirectoryClient,
    NOT_FOUND,
    TOKEN_URL,
    API_BASE_URL,
    DEFAULT_CUSTOMER,
    REQUEST_TIMEOUT,
)
from gdirectory.core.google.exceptions import (
    AuthError,
    DirectoryError,
    TransportError,
)
from gdirectory.core.validators import validate_email
from scripts import audit


def _parse_pairs(pairs: list[str] | None, option: str) -> dict[str, str]:
    """Turn ["key=value", ...] into a dict, rejecting malformed entries."""
    result: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"{option} expects key=value, got {pair!r}")
        result[key] = value
    return result


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Google Workspace directory lookup helper")
    parser.add_argument("--client-id", default=os.environ.get("GOOGLE_CLIENT_ID"))
    parser.add_argument("--client-secret", default=os.environ.get("GOOGLE_CLIENT_SECRET"))
    parser.add_argument("--refresh-token", default=os.environ.get("GOOGLE_REFRESH_TOKEN"))
    parser.add_argument("--token-url", default=os.environ.get("GOOGLE_TOKEN_URL", TOKEN_URL))
    parser.add_argument("--api-url", default=os.environ.get("GOOGLE_DIRECTORY_URL", API_BASE_URL))
    parser.add_argument("--customer", default=os.environ.get("GOOGLE_CUSTOMER", DEFAULT_CUSTOMER))
    parser.add_argument("--timeout", type=float, default=REQUEST_TIMEOUT)
    parser.add_argument("--operator", default="cli",
                        help="Operator identifier for audit logs (default: cli)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging on stderr")

    sub = parser.add_subparsers(dest="cmd")

    ca = sub.add_parser("check-alias", help="Exit 0 if the email is a user or a group")
    ca.add_argument("--email", required=True)
    ca.add_argument("--strict", action="store_true", help="Fail on group errors other than not-found")

    cu = sub.add_parser("check-user", help="Exit 0 if the email belongs to a user")
    cu.add_argument("--email", required=True)

    cg = sub.add_parser("check-group", help="Exit 0 if the email is a group")
    cg.add_argument("--email", required=True)
    cg.add_argument("--strict", action="store_true")

    gu = sub.add_parser("get-user")
    gu.add_argument("--user-key", required=True, help="Primary email, alias or user ID")

    lu = sub.add_parser("list-users")
    lu.add_argument("--query", nargs="*", default=[], metavar="FIELD=VALUE")
    lu.add_argument("--max-results", type=int, default=500)

    cr = sub.add_parser("create-user")
    cr.add_argument("--email", required=True)
    cr.add_argument("--given-name", required=True)
    cr.add_argument("--family-name", required=True)
    cr.add_argument("--password", default=os.environ.get("DIRECTORY_NEW_USER_PASSWORD"))
    cr.add_argument("--org-unit", default=None)
    cr.add_argument("--no-password-change", action="store_true")

    up = sub.add_parser("update-user")
    up.add_argument("--user-key", required=True)
    up.add_argument("--given-name")
    up.add_argument("--family-name")
    up.add_argument("--org-unit")
    state = up.add_mutually_exclusive_group()
    state.add_argument("--suspend", action="store_true")
    state.add_argument("--unsuspend", action="store_true")

    return parser


def _update_fields(args) -> dict:
    fields: dict = {}
    name = {}
    if args.given_name:
        name["givenName"] = args.given_name
    if args.family_name:
        name["familyName"] = args.family_name
    if name:
        fields["name"] = name
    if args.org_unit:
        fields["orgUnitPath"] = args.org_unit
    if args.suspend:
        fields["suspended"] = True
    elif args.unsuspend:
        fields["suspended"] = False
    return fields


def main() -> None:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.cmd:
        parser.print_help()
        return

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.client_id or not args.client_secret or not args.refresh_token:
        parser.error("Missing OAuth credentials (client id, client secret and refresh token are required)")

    if args.cmd == "create-user" and not args.password:
        parser.error("create-user requires --password or DIRECTORY_NEW_USER_PASSWORD")

    try:
        auth = Authenticator(
            args.client_id,
            args.client_secret,
            args.refresh_token,
            token_url=args.token_url,
            timeout=args.timeout,
        )
    except (AuthError, TransportError) as e:
        print(f"[directory] Authentication failed: {e}", file=sys.stderr)
        sys.exit(1)

    client = DirectoryClient(auth, base_url=args.api_url, customer=args.customer, timeout=args.timeout)

    try:
        if args.cmd == "check-alias":
            email = validate_email(args.email)
            found = client.is_email_a_user_or_group(email, strict=args.strict)
            print(f"{email}: {'known' if found else 'unknown'}")
            if not found:
                sys.exit(1)
        elif args.cmd == "check-user":
            email = validate_email(args.email)
            found = client.is_email_a_user(email)
            print(f"{email}: {'user' if found else 'not a user'}")
            if not found:
                sys.exit(1)
        elif args.cmd == "check-group":
            email = validate_email(args.email)
            found = client.is_email_a_group(email, strict=args.strict)
            print(f"{email}: {'group' if found else 'not a group'}")
            if not found:
                sys.exit(1)
        elif args.cmd == "get-user":
            result = client.users.get_user(args.user_key)
            if result is NOT_FOUND:
                print(f"[directory] User '{args.user_key}' not found", file=sys.stderr)
                sys.exit(1)
            _print_json(result.record)
        elif args.cmd == "list-users":
            users = client.users.find_users(_parse_pairs(args.query, "--query"), max_results=args.max_results)
            _print_json(users)
            print(f"[directory] {len(users)} user(s)", file=sys.stderr)
        elif args.cmd == "create-user":
            _create_user(client, args)
        elif args.cmd == "update-user":
            _update_user(client, args, parser)
        else:
            parser.print_help()
    except ValueError as e:
        print(f"[directory] Invalid input: {e}", file=sys.stderr)
        sys.exit(1)
    except (DirectoryError, TransportError) as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)


def _create_user(client: DirectoryClient, args) -> None:
    user = {
        "primaryEmail": args.email,
        "name": {"givenName": args.given_name, "familyName": args.family_name},
        "password": args.password,
        "changePasswordAtNextLogin": not args.no_password_change,
    }
    if args.org_unit:
        user["orgUnitPath"] = args.org_unit
    try:
        created = client.users.create_user(user)
    except (DirectoryError, TransportError) as e:
        audit.safe_log_directory_event(
            "user_create",
            args.email,
            operator=args.operator,
            customer=args.customer,
            details={"error": str(e)},
            success=False,
        )
        raise
    audit.safe_log_directory_event(
        "user_create",
        created.get("primaryEmail", args.email),
        operator=args.operator,
        customer=args.customer,
        details={"id": created.get("id"), "org_unit": args.org_unit},
        success=True,
    )
    _print_json(created)


def _update_user(client: DirectoryClient, args, parser: argparse.ArgumentParser) -> None:
    fields = _update_fields(args)
    if not fields:
        parser.error("update-user requires at least one field to change")
    try:
        updated = client.users.update_user(args.user_key, fields)
    except (DirectoryError, TransportError) as e:
        audit.safe_log_directory_event(
            "user_update",
            args.user_key,
            operator=args.operator,
            customer=args.customer,
            details={"fields": sorted(fields), "error": str(e)},
            success=False,
        )
        raise
    audit.safe_log_directory_event(
        "user_update",
        args.user_key,
        operator=args.operator,
        customer=args.customer,
        details={"fields": sorted(fields)},
        success=True,
    )
    _print_json(updated)


if __name__ == "__main__":
    main()

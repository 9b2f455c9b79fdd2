"""
Management API command line.

Usage:
    idmgmt --domain tenant.example.com --token $TOKEN users get "auth0|123"
    idmgmt users create --data '{"connection": "db", "email": "a@b.c", "password": "..."}'
    idmgmt user-blocks delete "auth0|123"

Or use environment variables:
    export IDMGMT_DOMAIN=tenant.example.com
    export IDMGMT_API_TOKEN=...
    idmgmt users list --query 'q=email:"a@b.c"'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, List, Optional

from idmgmt.config import env_transport_settings
from idmgmt.exceptions import ArgumentError, ManagementAPIError
from idmgmt.management import ManagementClient

logger = logging.getLogger(__name__)


def _json_arg(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}")


def _query_arg(value: str) -> tuple:
    key, sep, val = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {value!r}")
    return key, val


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idmgmt",
        description="Run operations against the identity management API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--domain", default=os.getenv("IDMGMT_DOMAIN"), help="Tenant domain (env: IDMGMT_DOMAIN)")
    parser.add_argument("--token", default=os.getenv("IDMGMT_API_TOKEN"), help="API access token (env: IDMGMT_API_TOKEN)")
    env = env_transport_settings()
    parser.add_argument("--timeout", type=float, default=env["timeout"], help="Request timeout in seconds (env: IDMGMT_TIMEOUT)")
    parser.add_argument("--insecure", dest="verify_ssl", action="store_false", default=env["verify_ssl"],
                        help="Skip SSL certificate verification (env: IDMGMT_VERIFY_SSL=false)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    resources = parser.add_subparsers(dest="resource", required=True)

    users = resources.add_parser("users", help="User records, multifactor providers and identities")
    actions = users.add_subparsers(dest="action", required=True)

    p = actions.add_parser("list", help="List users")
    p.add_argument("--query", type=_query_arg, action="append", default=[], metavar="KEY=VALUE")

    p = actions.add_parser("get", help="Get a user")
    p.add_argument("id")

    p = actions.add_parser("create", help="Create a user")
    p.add_argument("--data", type=_json_arg, required=True)

    p = actions.add_parser("update", help="Update a user")
    p.add_argument("id")
    p.add_argument("--data", type=_json_arg, required=True)

    p = actions.add_parser("delete", help="Delete a user")
    p.add_argument("id")

    p = actions.add_parser("delete-mfa", help="Remove a multifactor provider")
    p.add_argument("id")
    p.add_argument("provider")

    p = actions.add_parser("link", help="Link a secondary account")
    p.add_argument("id")
    p.add_argument("--data", type=_json_arg, required=True)

    p = actions.add_parser("unlink", help="Unlink a secondary account")
    p.add_argument("id")
    p.add_argument("provider")
    p.add_argument("secondary_id")

    blocks = resources.add_parser("user-blocks", help="Login blocks")
    actions = blocks.add_subparsers(dest="action", required=True)
    actions.add_parser("get", help="Get the blocks for a user").add_argument("id")
    actions.add_parser("delete", help="Remove the blocks for a user").add_argument("id")

    return parser


def run(client: ManagementClient, args: argparse.Namespace):
    """Map parsed arguments onto a manager call. Returns the call's awaitable."""
    if args.resource == "user-blocks":
        if args.action == "get":
            return client.user_blocks.get({"id": args.id})
        return client.user_blocks.delete({"id": args.id})

    users = client.users
    if args.action == "list":
        return users.get_all(dict(args.query))
    if args.action == "get":
        return users.get({"id": args.id})
    if args.action == "create":
        return users.create(args.data)
    if args.action == "update":
        return users.update({"id": args.id}, args.data)
    if args.action == "delete":
        return users.delete({"id": args.id})
    if args.action == "delete-mfa":
        return users.delete_multifactor_provider({"id": args.id, "provider": args.provider})
    if args.action == "link":
        return users.link(args.id, args.data)
    if args.action == "unlink":
        return users.unlink({"id": args.id, "provider": args.provider, "user_id": args.secondary_id})

    raise ArgumentError(f"Unknown action: {args.action}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    try:
        client = ManagementClient(args.domain, args.token, timeout=args.timeout, verify_ssl=args.verify_ssl)
        result = asyncio.run(run(client, args))
    except ArgumentError as e:
        logger.error(f"Invalid arguments: {e}")
        return 1
    except ManagementAPIError as e:
        logger.error(f"Request failed: {e}")
        return 1

    if result is not None:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

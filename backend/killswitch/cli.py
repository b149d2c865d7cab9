"""Command-line interface for running the kill switch outside Lambda."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from . import handler
from .types import ActionKind


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    response = handler.handle_event(_build_event(args), config_path=args.config or handler.SWITCH_CONFIG_PATH)
    if args.json:
        print(handler.format_response(response))
    elif response["status"] == "success":
        print(response["message"])
    else:
        print(f"{response['errorType']} at {response['step']}: {response['error']}", file=sys.stderr)
    return 0 if response["status"] == "success" else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Contain a compromised AWS account or role")
    parser.add_argument("action", choices=ActionKind.values())
    parser.add_argument("--target-account-id", required=True, help="Account to remediate")
    parser.add_argument("--role-to-assume", required=True, help="Role assumed in the target or management account")
    parser.add_argument("--target-role-name", default=None, help="Role to strip (detach_policies, delete_role)")
    parser.add_argument("--org-management-account", default=None, help="Organization management account (apply_scp)")
    parser.add_argument("--region", default=None, help=f"AWS region (default: {handler.DEFAULT_REGION})")
    parser.add_argument("--config", default=None, help="Path to the switch configuration file")
    parser.add_argument("--json", action="store_true", help="Print the full JSON response")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def _build_event(args: argparse.Namespace) -> dict[str, str]:
    event = {
        "action": args.action,
        "target_account_id": args.target_account_id,
        "role_to_assume": args.role_to_assume,
        "target_role_name": args.target_role_name,
        "org_management_account": args.org_management_account,
        "region": args.region,
    }
    return {key: value for key, value in event.items() if value}


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

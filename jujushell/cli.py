"""CLI entry point for jujushell configuration tooling."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any, Sequence

from jujushell.config.errors import ConfigError
from jujushell.config.loader import dump_config, initialize_config, read
from jujushell.config.schema import ConfigProfile, ValidatedConfig
from jujushell.core.logging import configure_logging


DEFAULT_CONFIG = Path("./config/jujushell.yml")
REDACTED = "<redacted>"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jujushell")
    parser.add_argument(
        "--log-level",
        type=str,
        default="warning",
        help="Level for the tool's own diagnostics",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create starter config")
    init_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)
    init_parser.add_argument("--force", action="store_true")

    profiles = [member.name.lower() for member in ConfigProfile]

    check_parser = subparsers.add_parser("check", help="Load and validate a config file")
    check_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)
    check_parser.add_argument("--profile", type=str, choices=profiles, default="extended")

    dump_parser = subparsers.add_parser("dump", help="Print the normalised form of a valid config file")
    dump_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)
    dump_parser.add_argument("--profile", type=str, choices=profiles, default="extended")

    return parser


def summarize_config(config: ValidatedConfig) -> dict[str, Any]:
    payload = config.as_dict()
    if payload["tls-key"]:
        payload["tls-key"] = REDACTED
    expiry = config.session_expiry
    payload["tls-mode"] = "dns" if config.uses_dns_tls else ("manual" if config.uses_manual_tls else "none")
    payload["session-expiry-seconds"] = int(expiry.total_seconds()) if expiry is not None else None
    return payload


def _print_error(exc: ConfigError) -> int:
    print(json.dumps(exc.details(), indent=2))
    return 1


def cmd_init(config_path: Path, force: bool) -> int:
    initialize_config(config_path, force=force)
    print(f"wrote config: {config_path}")
    return 0


def cmd_check(config_path: Path, *, profile: str) -> int:
    try:
        config = read(config_path, ConfigProfile.from_name(profile))
    except ConfigError as exc:
        return _print_error(exc)
    print(json.dumps({"config": str(config_path), "profile": profile, "settings": summarize_config(config)}, indent=2))
    return 0


def cmd_dump(config_path: Path, *, profile: str) -> int:
    try:
        config = read(config_path, ConfigProfile.from_name(profile))
    except ConfigError as exc:
        return _print_error(exc)
    sys.stdout.write(dump_config(config))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level, force=True)
    except ValueError as exc:
        parser.error(str(exc))

    if args.command == "init":
        return cmd_init(args.config, args.force)
    if args.command == "check":
        return cmd_check(args.config, profile=args.profile)
    if args.command == "dump":
        return cmd_dump(args.config, profile=args.profile)

    parser.error(f"unknown command: {args.command}")
    return 2

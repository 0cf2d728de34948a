"""
Operator commands for inspecting and seeding the environment.

Usage:
    monday-claude-bridge-env check
    monday-claude-bridge-env validate
    monday-claude-bridge-env generate-key [--bytes N]

``check`` only reports whether each variable is set, never its value.
``validate`` exits with status 1 when the environment would block startup.
"""

import argparse
import sys

from bridge.config import DEFAULT_PORT, ENVIRONMENT_VARIABLES, load_environment
from bridge.security import DEFAULT_KEY_BYTES, generate_secure_key
from bridge.validation import validate_environment


def check_env() -> int:
    env = load_environment()

    print("Environment variables:")
    for name in ENVIRONMENT_VARIABLES:
        if name == "PORT":
            print(f"- PORT: {env.get('PORT') or f'{DEFAULT_PORT} (default)'}")
        else:
            print(f"- {name}: {'Set' if env.get(name) else 'Not set'}")
    return 0


def validate_env() -> int:
    result = validate_environment(load_environment())

    for error in result.errors:
        print(f"ERROR: {error}")
    for warning in result.warnings:
        print(f"WARNING: {warning}")

    if not result.valid:
        print("Environment validation failed.")
        return 1

    print("Environment validation passed.")
    return 0


def generate_key(num_bytes: int) -> int:
    print(generate_secure_key(num_bytes))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="monday-claude-bridge-env",
        description="Inspect, validate and seed the bridge's environment variables.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check", help="Show which environment variables are set")
    subparsers.add_parser("validate", help="Validate the environment as startup would")

    key_parser = subparsers.add_parser(
        "generate-key",
        help="Print a random hex key for ENCRYPTION_KEY or SESSION_SECRET",
    )
    key_parser.add_argument(
        "--bytes",
        type=int,
        default=DEFAULT_KEY_BYTES,
        dest="num_bytes",
        help=f"Number of random bytes (default: {DEFAULT_KEY_BYTES})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``monday-claude-bridge-env`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "check":
        return check_env()
    if args.command == "validate":
        return validate_env()
    if args.num_bytes < 1:
        parser.error("--bytes must be at least 1")
    return generate_key(args.num_bytes)


if __name__ == "__main__":
    sys.exit(main())

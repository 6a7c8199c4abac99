"""Command line interface for previewing VPC network plans."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from vpc_infra.config import NetworkConfig, load_config_file
from vpc_infra.errors import NetworkConfigError
from vpc_infra.log_config import get_logger, set_global_log_level
from vpc_infra.plan import build_network_plan, validate_network_config
from vpc_infra.zones import shuffle_zones

logger = get_logger(__name__)


def _load_config(config_path: Path) -> NetworkConfig:
    """Load a configuration file, exiting with status 2 on failure."""
    try:
        config = load_config_file(config_path)
        logger.info(f"Loaded configuration from {config_path}")
        return config
    except FileNotFoundError:
        print(f"Configuration file not found: {config_path}", file=sys.stderr)
        sys.exit(2)
    except NetworkConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:
        logger.error(f"Failed to load config: {e}")
        print(f"Configuration error: {e}", file=sys.stderr)
        print(f"Check YAML syntax in: {config_path}", file=sys.stderr)
        sys.exit(2)


def plan_command(args: argparse.Namespace) -> None:
    """Build a plan and write it as JSON."""
    config = _load_config(Path(args.config))

    zones = [z.strip() for z in args.zones.split(",") if z.strip()] if args.zones else list(
        config.availability_zones
    )
    az_pool = shuffle_zones(zones, seed=args.seed)

    try:
        plan = build_network_plan(config, az_pool)
    except NetworkConfigError as e:
        logger.error(f"{e.kind}: {e.message}")
        print(f"{e.kind}: {e.message}", file=sys.stderr)
        sys.exit(2)

    output = json.dumps(plan.to_dict(), indent=2)
    if args.output:
        Path(args.output).write_text(output + "\n")
        print(f"Wrote plan for {plan.vpc.name} to {args.output}")
    else:
        print(output)


def validate_command(args: argparse.Namespace) -> None:
    """Check CIDRs without needing availability zones."""
    config = _load_config(Path(args.config))
    try:
        networks = validate_network_config(config)
    except NetworkConfigError as e:
        print(f"{e.kind}: {e.message}", file=sys.stderr)
        sys.exit(2)
    print(f"{config.project_name}: {config.vpc_cidr} with {len(networks)} subnets is valid")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vpc-plan",
        description="Preview and validate VPC network plans",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser("plan", help="Build a network plan and print it as JSON")
    plan_parser.add_argument("config", help="YAML configuration file")
    plan_parser.add_argument(
        "--zones",
        help="Comma-separated availability zones (default: availability_zones from the config)",
    )
    plan_parser.add_argument("--seed", help="Shuffle the zones with this seed (e.g. the stack name)")
    plan_parser.add_argument("-o", "--output", help="Write the plan to this file")
    plan_parser.set_defaults(func=plan_command)

    validate_parser = subparsers.add_parser("validate", help="Validate subnet CIDRs")
    validate_parser.add_argument("config", help="YAML configuration file")
    validate_parser.set_defaults(func=validate_command)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    set_global_log_level(logging.DEBUG if args.verbose else logging.WARNING)
    args.func(args)


if __name__ == "__main__":
    main()

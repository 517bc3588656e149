"""Argument parsing, configuration loading, and provider queries from the shell."""

from __future__ import annotations

import argparse
import logging
import sys

import openstack.exceptions
from keystoneauth1 import exceptions as ks_exceptions

from .config import load_config, validate_config
from .exceptions import CloudProviderError, ConfigError
from .logging_config import configure_logging
from .openstack.provider import OpenStack, new_openstack

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openstack-cloudprovider",
        description="Query an OpenStack cloud through the cloud-provider interface",
    )
    parser.add_argument(
        "-c", "--config",
        required=True,
        help="Path to the cloud provider configuration file",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the configuration file and exit",
    )

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("zone", help="Print the configured region")
    commands.add_parser("local-id", help="Print the instance ID of this machine")
    cmd = commands.add_parser("list", help="List ACTIVE instances matching a name filter")
    cmd.add_argument("filter", nargs="?", default="")
    for name, help_text in (
        ("addresses", "Print all addresses of an instance"),
        ("address", "Print the preferred address of an instance"),
        ("external-id", "Print the server ID of an instance"),
        ("instance-id", "Print the provider instance ID of an instance"),
    ):
        cmd = commands.add_parser(name, help=help_text)
        cmd.add_argument("name")
    cmd = commands.add_parser("name-by-address", help="Find the instance with a fixed IP")
    cmd.add_argument("ip")
    return parser


def run_command(provider: OpenStack, args: argparse.Namespace) -> list[str]:
    """Execute one query and return the output lines."""
    if args.command == "zone":
        return [provider.get_zone().region]
    if args.command == "local-id":
        return [provider.local_instance_id]
    if args.command == "list":
        return provider.list(args.filter)
    if args.command == "addresses":
        return [f"{a.type.value}\t{a.address}" for a in provider.node_addresses(args.name)]
    if args.command == "address":
        return [provider.get_address(args.name)]
    if args.command == "external-id":
        return [provider.external_id(args.name)]
    if args.command == "instance-id":
        return [provider.instance_id(args.name)]
    # name-by-address
    return [provider.instance_name_by_address(args.ip)]


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load config (minimal logging until config is loaded)
    try:
        config = load_config(args.config)
        validate_config(config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.logging)

    if args.validate:
        logger.info("Configuration is valid")
        return 0

    if not args.command:
        parser.print_usage(sys.stderr)
        return 2

    try:
        provider = new_openstack(config)
        for line in run_command(provider, args):
            print(line)
    except (CloudProviderError, openstack.exceptions.SDKException, ks_exceptions.ClientException) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0

    return 0

"""
Azure DevOps provider command line entry point.
"""

import asyncio
import logging
from pathlib import Path

import yaml

from azdo_provider.config import apply_env_overrides, load_config, Config
from azdo_provider.errors import AzureDevOpsError
from azdo_provider.provider import configure, resources


logger = logging.getLogger(__name__)


def cmd_schema(args):
    """Print resource schemas as YAML."""
    all_resources = resources()

    if args.resource:
        if args.resource not in all_resources:
            print(f"Error: Unknown resource type: {args.resource}")
            print(f"Available: {', '.join(sorted(all_resources))}")
            return 1
        selected = {args.resource: all_resources[args.resource]}
    else:
        selected = all_resources

    document = {
        name: {
            "importable": resource.importer is not None,
            "schema": {key: s.to_dict() for key, s in resource.schema.items()},
        }
        for name, resource in selected.items()
    }
    print(yaml.dump(document, default_flow_style=False, sort_keys=True), end="")
    return 0


async def check_connection(config: Config) -> dict:
    """Fetch connection data to verify the organization URL and token."""
    clients = configure(config)
    try:
        return await clients.connection.get_connection_data()
    finally:
        await clients.close()


def cmd_check(args):
    """Verify the configured connection to Azure DevOps."""
    config_path = Path(args.config)
    if config_path.exists():
        config = load_config(config_path)
    else:
        config = Config()
    apply_env_overrides(config)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        data = asyncio.run(check_connection(config))
    except AzureDevOpsError as e:
        print(f"Error: {e}")
        return 1

    user = (data or {}).get("authenticatedUser", {})
    name = user.get("providerDisplayName") or user.get("id") or "unknown"
    print(f"Connected to {config.azure_devops.org_service_url} as {name}")
    return 0


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Azure DevOps resource provider",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # schema command
    schema_parser = subparsers.add_parser("schema", help="Print resource schemas as YAML")
    schema_parser.add_argument(
        "-r", "--resource",
        default=None,
        help="Only print the schema of this resource type",
    )

    # check command
    check_parser = subparsers.add_parser("check", help="Verify the Azure DevOps connection")
    check_parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )

    args = parser.parse_args()

    if args.command == "schema":
        return cmd_schema(args)
    elif args.command == "check":
        return cmd_check(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    exit(main())

#!/usr/bin/env python3
"""
GitHub Cost Center Membership Sync

Keeps the user membership of one GitHub Enterprise cost center in line with
the members of its source organizations:

1. Organization mode (default): every organization linked to the cost center
   (its "Org" resources) contributes all of its members
2. Team mode: --team narrows each linked organization to one team
3. Explicit sources: --organization / --source name the organizations or
   org/team pairs directly instead of using the linked organizations

Users missing from the cost center are added, users no longer in any source
are removed. Intended to run on a schedule (cron, GitHub Actions).
"""

import argparse
import logging
import os
import signal
import sys

import requests
import yaml

from cost_center_sync.config_manager import ConfigManager
from cost_center_sync.cost_center_store import CostCenterStore
from cost_center_sync.errors import CostCenterSyncError
from cost_center_sync.github_api import GitHubMembershipSource
from cost_center_sync.logger_setup import setup_logging
from cost_center_sync.sync_manager import CostCenterSyncManager


def setup_signal_handlers():
    """Setup signal handlers to gracefully handle broken pipes and interrupts."""
    def handle_broken_pipe(signum, frame):
        """Handle broken pipe gracefully - exit quietly when output pipe is closed."""
        sys.exit(0)

    def handle_interrupt(signum, frame):
        """Handle keyboard interrupt gracefully."""
        print("\n\nOperation interrupted by user.", file=sys.stderr)
        sys.exit(1)

    # SIGPIPE does not exist on Windows
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, handle_broken_pipe)
    signal.signal(signal.SIGINT, handle_interrupt)


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Sync GitHub cost center membership with organization or team membership",
        epilog="""
Examples:
  # Sync a cost center with its linked organizations
  %(prog)s --cost-center engineering --enterprise my-enterprise

  # Only members of the 'platform' team in each linked organization
  %(prog)s --cost-center engineering --team platform

  # Explicit org/team pairs, preview only
  %(prog)s --cost-center engineering --source org1/platform --source org2/infra --mode plan
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--cost-center",
        dest="cost_center_name",
        help="Name of the cost center to sync (env: COST_CENTER_NAME)"
    )

    parser.add_argument(
        "--enterprise",
        dest="github_enterprise",
        help="GitHub Enterprise slug (env: GITHUB_ENTERPRISE)"
    )

    parser.add_argument(
        "--organization",
        dest="organizations",
        action="append",
        help="Source organization, repeatable (default: organizations linked to the cost center)"
    )

    parser.add_argument(
        "--team",
        help="Only sync members of this team slug in each organization (env: GITHUB_TEAM)"
    )

    parser.add_argument(
        "--source",
        dest="source_specifiers",
        action="append",
        help="Source as org or org/team, repeatable; cannot be combined with --team"
    )

    parser.add_argument(
        "--api-url",
        dest="github_api_url",
        help="GitHub API base URL (env: GITHUB_API_URL)"
    )

    parser.add_argument(
        "--cost-center-api-url",
        dest="cost_center_api_url",
        help="Base URL of the cost center API if it differs from the GitHub API (env: COST_CENTER_API_URL)"
    )

    parser.add_argument(
        "--mode",
        choices=["plan", "apply"],
        default="apply",
        help="Execution mode: plan (no changes) or apply (push membership changes to GitHub)"
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit"
    )

    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Configuration file path"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser.parse_args(argv)


def write_output(name: str, value: str, environ=None) -> None:
    """Publish an output for later workflow steps when running under GitHub Actions."""
    environ = os.environ if environ is None else environ
    output_file = environ.get("GITHUB_OUTPUT")
    if not output_file:
        return
    with open(output_file, "a", encoding="utf-8") as f:
        f.write(f"{name}={value}\n")


def _show_config(config: ConfigManager) -> None:
    print("\n===== Cost Center Sync Configuration =====")
    for key, value in config.get_config_summary().items():
        if isinstance(value, list):
            value = ", ".join(value)
        print(f"{key}: {value}")
    print("===== End of Configuration =====\n")


def main(argv=None) -> int:
    """Main execution function."""
    setup_signal_handlers()

    args = parse_arguments(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(level=log_level)
    logger = logging.getLogger(__name__)

    try:
        config = ConfigManager(args.config, overrides=vars(args))

        setup_logging(
            level=logging.DEBUG if args.verbose else config.log_level,
            log_file=config.log_file,
            config_file=config.log_config_file
        )

        if args.show_config:
            _show_config(config)
            return 0

        config.validate()
        logger.info("Configuration loaded successfully")

        membership_source = GitHubMembershipSource(
            config.github_token,
            base_url=config.github_api_url,
            timeout=config.request_timeout
        )
        cost_center_store = CostCenterStore(
            config.cost_center_token,
            config.github_enterprise,
            base_url=config.cost_center_api_url,
            timeout=config.request_timeout
        )
        sync_manager = CostCenterSyncManager(config, membership_source, cost_center_store)

        result = sync_manager.run(mode=args.mode)
        write_output("result", result)

    except (CostCenterSyncError, ValueError, requests.exceptions.RequestException,
            yaml.YAMLError, OSError) as e:
        logger.error(f"❌ Cost center sync failed: {str(e)}")
        return 1

    print(result)
    logger.info("Cost center sync completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())

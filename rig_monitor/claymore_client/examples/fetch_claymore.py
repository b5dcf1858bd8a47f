#!/usr/bin/env python3
"""
Example script for querying and controlling a Claymore miner.

This script demonstrates how to use the ClaymoreClient to fetch the status
of a rig, or to restart or reboot it.
"""

import argparse
import json
import logging
import sys

from claymore_client import (
    ClaymoreClient,
    ClaymoreError,
    ValidationError,
    load_client_config,
)
from claymore_client.config_validation import validate_endpoint_config
from claymore_client.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Query or control a Claymore miner")
    parser.add_argument("--address", required=True, help="Miner address as host[:port]")
    parser.add_argument("--password", default="", help="Remote management password")
    parser.add_argument(
        "--action",
        choices=["status", "restart", "reboot"],
        default="status",
        help="Operation to perform (default: status)"
    )
    parser.add_argument("--timeout", type=float, help="Connect and read timeout in seconds")
    parser.add_argument("--json", action="store_true", help="Print status as JSON instead of a report")
    parser.add_argument("--output", help="Output file path (default: stdout)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    """Main function."""
    args = parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_client_config({"timeout": args.timeout})
        endpoint = validate_endpoint_config({"address": args.address, "password": args.password})
        client = ClaymoreClient(config=config)

        if args.action == "restart":
            client.restart(endpoint)
            logger.info(f"Restart sent to {endpoint.address}")
            return 0
        if args.action == "reboot":
            client.reboot(endpoint)
            logger.info(f"Reboot sent to {endpoint.address}")
            return 0

        logger.info(f"Fetching status from miner at {endpoint.address}")
        snapshot = client.get_status(endpoint)

        if args.json:
            text = json.dumps(snapshot.to_dict(), indent=2)
        else:
            text = snapshot.format_report()

        if args.output:
            with open(args.output, "w") as f:
                f.write(text)
            logger.info(f"Status saved to {args.output}")
        else:
            print(text)

        logger.info("Done")
        return 0
    except (ClaymoreError, ValidationError) as e:
        logger.error(f"Error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

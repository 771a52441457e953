#!/usr/bin/env python3
"""
PrivateTechTransfer - Sepolia Contract Deployer
Deploys the contract with the platform fee rate as its only constructor
argument, records the deployment to deployment-info.json and prints the
verification command.

Usage:
- Set up your .env file with SEPOLIA_RPC_URL, PRIVATE_KEY, PLATFORM_FEE_RATE, etc.
- Run: python contract_deployer.py                 (proceed once mined)
- Run: python contract_deployer.py --preset safe   (wait for 5 confirmations)
"""

import argparse
import dataclasses
import sys
from pathlib import Path

from sepolia_deployer.config import DeployerConfig, setup_logging
from sepolia_deployer.flow import run_deployment
from sepolia_deployer.models import CONFIRMATION_PRESETS


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deploy the contract to the configured network")
    parser.add_argument('--preset', choices=sorted(CONFIRMATION_PRESETS), default='fast',
                        help="confirmation policy: fast = proceed once mined, safe = 5 confirmations")
    parser.add_argument('--confirmations', type=non_negative_int,
                        help="explicit confirmation depth, overrides --preset")
    parser.add_argument('--fee-rate', type=non_negative_int,
                        help="platform fee rate in basis points, overrides PLATFORM_FEE_RATE")
    parser.add_argument('--output', type=Path,
                        help="deployment record path, overrides DEPLOYMENT_INFO_PATH")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging()

    try:
        config = DeployerConfig.from_env()
    except ValueError as e:
        print(f"\n❌ CONFIGURATION ERROR: {e}")
        print("   Please check the variables in your .env file.")
        return 1

    overrides = {}
    if args.fee_rate is not None:
        overrides['fee_rate_basis_points'] = args.fee_rate
    if args.output is not None:
        overrides['deployment_info_path'] = args.output
    if overrides:
        config = dataclasses.replace(config, **overrides)

    depth = args.confirmations if args.confirmations is not None else CONFIRMATION_PRESETS[args.preset]

    try:
        outcome = run_deployment(config, confirmation_depth=depth)
    except Exception as e:
        logger.exception("Unexpected deployment error")
        print(f"\n❌ Deployment failed: {e}")
        return 1

    if not outcome.ok:
        print(f"\n❌ Deployment failed: {outcome.error}")
        return 1

    print("\n✅ Deployment complete!")
    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()

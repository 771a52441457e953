#!/usr/bin/env python3
"""
Pre-deployment environment check: RPC connection, deployer account, block data.
Read-only, sends no transactions.
"""

import sys

from sepolia_deployer.config import DeployerConfig, setup_logging
from sepolia_deployer.flow import run_diagnostics


def main() -> int:
    setup_logging()
    config_errors = []
    config = DeployerConfig.from_env(errors=config_errors)

    outcomes = run_diagnostics(config, config_errors=config_errors)
    return 0 if all(o.ok for o in outcomes) else 1


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()

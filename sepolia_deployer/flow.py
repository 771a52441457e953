"""
Deployment and diagnostic flows.

The deployment flow halts on the first failed step and never reaches the
recorder without a confirmed transaction. The diagnostic flow runs every
check even when an earlier one fails, to report all problems in one pass.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from web3 import Web3

from sepolia_deployer.config import LOGGER_NAME, DeployerConfig, make_web3
from sepolia_deployer.database import DeploymentRecorder
from sepolia_deployer.errors import ConnectivityError, Result
from sepolia_deployer.models import (
    FAST_CONFIRMATIONS,
    DeploymentRequest,
    DeploymentResult,
)
from sepolia_deployer.services import (
    AccountInspector,
    ConnectivityProbe,
    DeploymentExecutor,
    OperatorReport,
    PreflightGuard,
)


def run_deployment(config: DeployerConfig,
                   confirmation_depth: int = FAST_CONFIRMATIONS,
                   w3: Optional[Web3] = None,
                   executor_factory: Callable[..., DeploymentExecutor] = DeploymentExecutor,
                   recorder: Optional[DeploymentRecorder] = None,
                   deployed_at: Optional[datetime] = None) -> Result:
    """Deploy the contract once. Returns a Result carrying the DeploymentResult."""
    logger = logging.getLogger(LOGGER_NAME)
    w3 = w3 or make_web3(config)
    fee_rate = config.fee_rate_basis_points

    print(f"Deploying {config.contract_name} to {config.network_name}...\n")
    print(f"Platform fee rate: {fee_rate} basis points ({config.fee_rate_percent}%)")

    # 1. Endpoint
    probed = ConnectivityProbe(w3, config).probe()
    if not probed.ok:
        return probed
    identity = probed.value
    print(f"Network: {identity.name} (chain ID {identity.chain_id})")

    # 2. Signer and balance
    inspector = AccountInspector(w3, config)
    signer = inspector.resolve_signer()
    if not signer.ok:
        return signer
    account = signer.value
    print(f"Deployer account: {account.address}")

    inspected = inspector.inspect(account.address)
    if not inspected.ok:
        return inspected
    snapshot = inspected.value
    print(f"Account balance: {snapshot.balance_ether} ETH\n")

    # 3. Zero-balance guard
    guarded = PreflightGuard().guard(snapshot)
    if not guarded.ok:
        print(f"❌ Error: account balance is 0, get {config.network_name} test ETH first")
        print(f"Faucet: {config.faucet_url}")
        return guarded

    # 4. Submit and confirm
    request = DeploymentRequest(
        fee_rate_basis_points=fee_rate,
        signer_account=account.address,
        confirmation_depth=confirmation_depth,
    )
    logger.info(f"Deploying {config.contract_name} from {account.address} "
                f"(fee rate {fee_rate}, depth {confirmation_depth})")
    executor = executor_factory(w3, account, config)
    deployed = executor.deploy(request)
    if not deployed.ok:
        return deployed

    # 5. Record
    result = DeploymentResult.from_pending(
        deployed.value, request, config.network_name, deployed_at
    )
    recorder = recorder or DeploymentRecorder(config.deployment_info_path)
    recorded = recorder.record(result)
    if not recorded.ok:
        return recorded
    executor.mark_recorded()

    # 6. Report
    print("\n" + OperatorReport(config).report(result))
    return Result.success(result)


@dataclass(frozen=True)
class CheckOutcome:
    name: str
    ok: bool
    detail: str = ''


def run_diagnostics(config: DeployerConfig, w3: Optional[Web3] = None,
                    config_errors: Sequence[str] = ()) -> List[CheckOutcome]:
    """Read-only environment checks before a deployment.

    ``config_errors`` are settings that could not be parsed; they are
    reported as a failed check and the remaining checks still run.
    """
    logger = logging.getLogger(LOGGER_NAME)
    w3 = w3 or make_web3(config)
    outcomes = []

    print("=== Testing deployment environment ===\n")

    if config_errors:
        print("0. Configuration...")
        for message in config_errors:
            print(f"   ❌ {message} (using the default)")
        outcomes.append(CheckOutcome('config', False, '; '.join(config_errors)))
        print()

    print("1. Testing RPC connection...")
    probed = ConnectivityProbe(w3, config).probe()
    if probed.ok:
        identity = probed.value
        print("   ✅ Network connection OK")
        print(f"   Chain ID: {identity.chain_id}")
        print(f"   Network name: {identity.name}")
        outcomes.append(CheckOutcome('rpc', True, f"{identity.name} ({identity.chain_id})"))
    else:
        print(f"   ❌ Network connection failed: {probed.error}")
        outcomes.append(CheckOutcome('rpc', False, str(probed.error)))

    print("\n2. Testing account configuration...")
    inspector = AccountInspector(w3, config)
    signer = inspector.resolve_signer()
    inspected = inspector.inspect(signer.value.address) if signer.ok else signer
    if inspected.ok:
        snapshot = inspected.value
        print(f"   ✅ Deployer account: {snapshot.address}")
        print(f"   Balance: {snapshot.balance_ether} ETH")
        if not PreflightGuard().guard(snapshot).ok:
            print(f"   ⚠️  Warning: account balance is 0, test ETH needed ({config.faucet_url})")
        outcomes.append(CheckOutcome('account', True, snapshot.address))
    else:
        print(f"   ❌ Account configuration failed: {inspected.error}")
        outcomes.append(CheckOutcome('account', False, str(inspected.error)))

    print("\n3. Testing block data...")
    try:
        block_number = w3.eth.block_number
    except Exception as e:
        error = ConnectivityError(f"Block number query failed: {e}")
        print(f"   ❌ Fetching block failed: {error}")
        outcomes.append(CheckOutcome('block', False, str(error)))
    else:
        print(f"   ✅ Current block: {block_number}")
        outcomes.append(CheckOutcome('block', True, str(block_number)))

    if config.etherscan_api_key:
        print("\n   ETHERSCAN_API_KEY: configured")
    else:
        print("\n   ETHERSCAN_API_KEY: not set (only needed for verification)")

    failed = [o.name for o in outcomes if not o.ok]
    if failed:
        logger.warning(f"Environment checks failed: {', '.join(failed)}")
        print(f"\n=== {len(failed)} check(s) failed, fix them before deploying ===\n")
    else:
        print("\n=== All checks passed, ready to deploy ===\n")
    return outcomes

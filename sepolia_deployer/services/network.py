"""
Read-only network checks: endpoint identity, signer balance, zero-balance guard
"""

import logging
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from web3 import Web3

from sepolia_deployer.config import LOGGER_NAME, DeployerConfig
from sepolia_deployer.errors import (
    AccountError,
    ConnectivityError,
    InsufficientFundsError,
    Result,
)
from sepolia_deployer.models import AccountSnapshot, NetworkIdentity

KNOWN_CHAINS = {
    1: 'mainnet',
    17000: 'holesky',
    31337: 'hardhat',
    11155111: 'sepolia',
}


class ConnectivityProbe:
    """Checks that the RPC endpoint answers and reports the expected chain"""

    def __init__(self, w3: Web3, config: DeployerConfig):
        self.w3 = w3
        self.config = config
        self.logger = logging.getLogger(LOGGER_NAME)

    def probe(self) -> Result:
        try:
            chain_id = int(self.w3.eth.chain_id)
        except Exception as e:
            self.logger.error(f"RPC endpoint {self.config.rpc_url} unreachable: {e}")
            return Result.failure(ConnectivityError(f"Cannot reach {self.config.rpc_url}: {e}"))

        expected = self.config.chain_id
        if expected and chain_id != expected:
            self.logger.error(f"Chain ID mismatch: connected to {chain_id}, expected {expected}")
            return Result.failure(ConnectivityError(
                f"Chain ID mismatch: connected to {chain_id}, expected {expected}"
            ))

        identity = NetworkIdentity(chain_id=chain_id, name=KNOWN_CHAINS.get(chain_id, 'unknown'))
        self.logger.info(f"Connected to {identity.name} (chain id {identity.chain_id})")
        return Result.success(identity)


class AccountInspector:
    """Resolves the configured signer and reads its balance"""

    def __init__(self, w3: Web3, config: DeployerConfig):
        self.w3 = w3
        self.config = config
        self.logger = logging.getLogger(LOGGER_NAME)

    def resolve_signer(self) -> Result:
        """Local signing account built from PRIVATE_KEY"""
        if not self.config.private_key:
            return Result.failure(AccountError("No signer configured: set PRIVATE_KEY"))
        try:
            account: LocalAccount = Account.from_key(self.config.private_key)
        except Exception as e:
            # never echo the key itself
            return Result.failure(AccountError(f"PRIVATE_KEY is not a valid private key ({type(e).__name__})"))
        return Result.success(account)

    def inspect(self, signer_account: Optional[str]) -> Result:
        if not signer_account:
            return Result.failure(AccountError("No signer configured: set PRIVATE_KEY"))
        try:
            address = to_checksum_address(signer_account)
            balance = int(self.w3.eth.get_balance(address))
        except Exception as e:
            self.logger.error(f"Balance query for {signer_account} failed: {e}")
            return Result.failure(AccountError(f"Balance query failed for {signer_account}: {e}"))

        snapshot = AccountSnapshot(address=address, balance=balance)
        self.logger.info(f"Signer {address} balance: {balance} wei")
        return Result.success(snapshot)


class PreflightGuard:
    """Halts the flow when the signer cannot possibly pay for gas.

    Only an exact zero balance is rejected. Any positive balance proceeds
    without estimating the real deployment cost.
    """

    def guard(self, snapshot: AccountSnapshot) -> Result:
        if snapshot.balance == 0:
            return Result.failure(InsufficientFundsError(
                f"Account {snapshot.address} has a balance of 0"
            ))
        return Result.success(snapshot)

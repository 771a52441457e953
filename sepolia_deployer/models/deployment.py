"""
Deployment data models: request, pending transaction, final result
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from web3 import Web3

# Named confirmation presets. "fast" proceeds as soon as the creation
# transaction is mined, "safe" waits for 5 confirmations.
FAST_CONFIRMATIONS = 1
SAFE_CONFIRMATIONS = 5
CONFIRMATION_PRESETS = {
    'fast': FAST_CONFIRMATIONS,
    'safe': SAFE_CONFIRMATIONS,
}


def basis_points_to_percent(basis_points: int) -> Decimal:
    """Exact percentage for a basis-point rate (100 -> 1, 12345678 -> 123456.78)"""
    return Decimal(basis_points) / 100


def _check_non_negative_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


class DeploymentState(Enum):
    """States of a single deployment attempt"""
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    AWAITING_INCLUSION = 'awaiting_inclusion'
    AWAITING_CONFIRMATIONS = 'awaiting_confirmations'
    CONFIRMED = 'confirmed'
    RECORDED = 'recorded'
    ABORTED = 'aborted'


@dataclass(frozen=True)
class NetworkIdentity:
    """Chain id and human readable name reported by the endpoint"""
    chain_id: int
    name: str


@dataclass(frozen=True)
class AccountSnapshot:
    """Signer address and balance (wei) at the time of the query"""
    address: str
    balance: int

    @property
    def balance_ether(self) -> Decimal:
        return Web3.from_wei(self.balance, 'ether')


@dataclass(frozen=True)
class DeploymentRequest:
    """Represents a contract deployment request"""
    fee_rate_basis_points: int
    signer_account: str
    confirmation_depth: int = FAST_CONFIRMATIONS

    def __post_init__(self):
        _check_non_negative_int('fee_rate_basis_points', self.fee_rate_basis_points)
        _check_non_negative_int('confirmation_depth', self.confirmation_depth)
        if not self.signer_account:
            raise ValueError("signer_account is required")


@dataclass(frozen=True)
class PendingDeployment:
    """A mined creation transaction and the confirmations observed for it"""
    transaction_hash: str
    contract_address: str
    inclusion_block: int
    observed_block: int
    confirmations: int


@dataclass(frozen=True)
class DeploymentResult:
    """Facts about a confirmed deployment, as written to deployment-info.json"""
    network: str
    contract_address: str
    deployer_address: str
    fee_rate_basis_points: int
    transaction_hash: str
    deployed_at: str
    block_number: int

    @classmethod
    def from_pending(cls, pending: PendingDeployment, request: DeploymentRequest,
                     network: str, deployed_at: Optional[datetime] = None) -> 'DeploymentResult':
        """Build the result of a confirmed deployment.

        Refuses pending deployments without at least one on-chain
        confirmation, so no placeholder result can reach the recorder.
        """
        if pending.confirmations < 1:
            raise ValueError(
                f"Transaction {pending.transaction_hash} has no confirmations yet"
            )
        if pending.observed_block < pending.inclusion_block:
            raise ValueError(
                f"Observed block {pending.observed_block} is before inclusion block "
                f"{pending.inclusion_block}"
            )
        deployed_at = deployed_at or datetime.now(timezone.utc)
        return cls(
            network=network,
            contract_address=pending.contract_address,
            deployer_address=request.signer_account,
            fee_rate_basis_points=request.fee_rate_basis_points,
            transaction_hash=pending.transaction_hash,
            deployed_at=deployed_at.isoformat(),
            block_number=pending.observed_block,
        )

    def to_dict(self) -> Dict:
        return {
            'network': self.network,
            'contractAddress': self.contract_address,
            'deployer': self.deployer_address,
            'platformFeeRate': self.fee_rate_basis_points,
            'txHash': self.transaction_hash,
            'deploymentTime': self.deployed_at,
            'blockNumber': self.block_number,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'DeploymentResult':
        return cls(
            network=data['network'],
            contract_address=data['contractAddress'],
            deployer_address=data['deployer'],
            fee_rate_basis_points=int(data['platformFeeRate']),
            transaction_hash=data['txHash'],
            deployed_at=data['deploymentTime'],
            block_number=int(data['blockNumber']),
        )

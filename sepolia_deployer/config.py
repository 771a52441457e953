"""
Configuration and logging setup for the deployer
"""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from web3 import Web3

from sepolia_deployer.models import basis_points_to_percent

LOGGER_NAME = 'sepolia_deployer'

DEFAULT_RPC_URL = 'https://ethereum-sepolia-rpc.publicnode.com'
DEFAULT_CHAIN_ID = 11155111
DEFAULT_FEE_RATE = 100
DEFAULT_CONTRACT_NAME = 'PrivateTechTransfer'
DEFAULT_VERIFY_TEMPLATE = 'npx hardhat verify --network {network} {address} {fee_rate}'


def _int_setting(environ: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _float_setting(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def normalize_private_key(key: Optional[str]) -> Optional[str]:
    """Accept keys with or without the 0x prefix"""
    if not key or not key.strip():
        return None
    key = key.strip()
    if key.startswith('0x') or key.startswith('0X'):
        key = key[2:]
    return '0x' + key


@dataclass(frozen=True)
class DeployerConfig:
    """Process-wide settings, read once at startup and never mutated"""
    rpc_url: str = DEFAULT_RPC_URL
    private_key: Optional[str] = None
    chain_id: Optional[int] = DEFAULT_CHAIN_ID
    network_name: str = 'sepolia'
    fee_rate_basis_points: int = DEFAULT_FEE_RATE
    etherscan_api_key: Optional[str] = None
    contract_name: str = DEFAULT_CONTRACT_NAME
    artifact_path: Optional[Path] = None
    deployment_info_path: Path = Path('deployment-info.json')
    tx_timeout: float = 120.0
    poll_latency: float = 2.0
    explorer_url: str = 'https://sepolia.etherscan.io'
    faucet_url: str = 'https://sepoliafaucet.com'
    verify_command_template: str = DEFAULT_VERIFY_TEMPLATE

    @property
    def resolved_artifact_path(self) -> Path:
        """Hardhat artifact location unless overridden"""
        if self.artifact_path is not None:
            return self.artifact_path
        name = self.contract_name
        return Path('artifacts') / 'contracts' / f'{name}.sol' / f'{name}.json'

    @property
    def fee_rate_percent(self) -> Decimal:
        return basis_points_to_percent(self.fee_rate_basis_points)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 errors: Optional[List[str]] = None) -> 'DeployerConfig':
        """Load configuration from the environment (and .env when reading os.environ).

        Invalid numeric settings raise ValueError. When an ``errors`` list is
        given they fall back to their defaults instead and the messages are
        appended to it, so read-only tools can still use the rest.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        def setting(reader, name, default):
            try:
                return reader(environ, name, default)
            except ValueError as e:
                if errors is None:
                    raise
                errors.append(str(e))
                return default

        chain_id = setting(_int_setting, 'CHAIN_ID', DEFAULT_CHAIN_ID)
        artifact_path = environ.get('ARTIFACT_PATH')

        return cls(
            rpc_url=environ.get('SEPOLIA_RPC_URL') or DEFAULT_RPC_URL,
            private_key=normalize_private_key(environ.get('PRIVATE_KEY')),
            chain_id=chain_id or None,
            network_name=environ.get('NETWORK_NAME') or 'sepolia',
            fee_rate_basis_points=setting(_int_setting, 'PLATFORM_FEE_RATE', DEFAULT_FEE_RATE),
            etherscan_api_key=environ.get('ETHERSCAN_API_KEY') or None,
            contract_name=environ.get('CONTRACT_NAME') or DEFAULT_CONTRACT_NAME,
            artifact_path=Path(artifact_path) if artifact_path else None,
            deployment_info_path=Path(environ.get('DEPLOYMENT_INFO_PATH') or 'deployment-info.json'),
            tx_timeout=setting(_float_setting, 'TX_TIMEOUT', 120.0),
            poll_latency=setting(_float_setting, 'POLL_LATENCY', 2.0),
            explorer_url=(environ.get('EXPLORER_URL') or 'https://sepolia.etherscan.io').rstrip('/'),
            faucet_url=environ.get('FAUCET_URL') or 'https://sepoliafaucet.com',
            verify_command_template=environ.get('VERIFY_COMMAND_TEMPLATE') or DEFAULT_VERIFY_TEMPLATE,
        )


def make_web3(config: DeployerConfig) -> Web3:
    """HTTP client for the configured endpoint. Does not touch the network."""
    return Web3(Web3.HTTPProvider(
        config.rpc_url,
        request_kwargs={'timeout': config.tx_timeout},
    ))


def setup_logging(log_dir: str = 'logs') -> logging.Logger:
    """Setup logging"""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    os.makedirs(log_dir, exist_ok=True)
    logger.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(os.path.join(log_dir, 'deployer.log'), encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    # stdout carries the operator report; the console handler only surfaces problems
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    if os.getenv('DEBUG_DEPLOY', 'false').lower() == 'true':
        console_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s'
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    return logger

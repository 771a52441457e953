"""
Tests for environment configuration
"""

import logging
from decimal import Decimal
from pathlib import Path

import pytest

from sepolia_deployer.config import (
    DEFAULT_RPC_URL,
    LOGGER_NAME,
    DeployerConfig,
    normalize_private_key,
    setup_logging,
)


def test_defaults():
    config = DeployerConfig.from_env({})

    assert config.rpc_url == DEFAULT_RPC_URL
    assert config.chain_id == 11155111
    assert config.network_name == 'sepolia'
    assert config.fee_rate_basis_points == 100
    assert config.private_key is None
    assert config.etherscan_api_key is None
    assert config.deployment_info_path == Path('deployment-info.json')
    assert config.tx_timeout == 120.0
    assert config.resolved_artifact_path == Path(
        'artifacts/contracts/PrivateTechTransfer.sol/PrivateTechTransfer.json'
    )


def test_reads_environment():
    config = DeployerConfig.from_env({
        'SEPOLIA_RPC_URL': 'https://rpc.example.org',
        'PRIVATE_KEY': 'ab' * 32,
        'PLATFORM_FEE_RATE': '250',
        'ETHERSCAN_API_KEY': 'KEY',
        'ARTIFACT_PATH': 'build/PTT.json',
        'DEPLOYMENT_INFO_PATH': 'out/info.json',
        'TX_TIMEOUT': '60',
        'EXPLORER_URL': 'https://explorer.example.org/',
    })

    assert config.rpc_url == 'https://rpc.example.org'
    assert config.private_key == '0x' + 'ab' * 32
    assert config.fee_rate_basis_points == 250
    assert config.fee_rate_percent == 2.5
    assert config.etherscan_api_key == 'KEY'
    assert config.resolved_artifact_path == Path('build/PTT.json')
    assert config.deployment_info_path == Path('out/info.json')
    assert config.tx_timeout == 60.0
    assert config.explorer_url == 'https://explorer.example.org'


def test_blank_fee_rate_uses_default():
    assert DeployerConfig.from_env({'PLATFORM_FEE_RATE': ' '}).fee_rate_basis_points == 100


def test_zero_fee_rate_is_allowed():
    assert DeployerConfig.from_env({'PLATFORM_FEE_RATE': '0'}).fee_rate_basis_points == 0


@pytest.mark.parametrize('raw', ['1.5', 'abc', '-1'])
def test_invalid_fee_rate(raw):
    with pytest.raises(ValueError, match='PLATFORM_FEE_RATE'):
        DeployerConfig.from_env({'PLATFORM_FEE_RATE': raw})


def test_chain_id_zero_disables_pinning():
    assert DeployerConfig.from_env({'CHAIN_ID': '0'}).chain_id is None


@pytest.mark.parametrize('raw, expected', [
    (None, None),
    ('', None),
    ('0x' + '1' * 64, '0x' + '1' * 64),
    ('1' * 64, '0x' + '1' * 64),
    ('  ' + '1' * 64 + '\n', '0x' + '1' * 64),
])
def test_normalize_private_key(raw, expected):
    assert normalize_private_key(raw) == expected


def test_collects_invalid_settings_when_asked():
    errors = []

    config = DeployerConfig.from_env({
        'PLATFORM_FEE_RATE': 'one percent',
        'TX_TIMEOUT': 'soon',
        'SEPOLIA_RPC_URL': 'https://rpc.example.org',
    }, errors=errors)

    assert config.fee_rate_basis_points == 100
    assert config.tx_timeout == 120.0
    assert config.rpc_url == 'https://rpc.example.org'
    assert len(errors) == 2
    assert 'PLATFORM_FEE_RATE' in errors[0]
    assert 'TX_TIMEOUT' in errors[1]


def test_fee_rate_percent_is_exact():
    config = DeployerConfig.from_env({'PLATFORM_FEE_RATE': '12345678'})

    assert config.fee_rate_percent == Decimal('123456.78')
    assert str(config.fee_rate_percent) == '123456.78'


@pytest.fixture
def fresh_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved = logger.handlers[:]
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved


def console_handlers(logger):
    return [h for h in logger.handlers if not isinstance(h, logging.FileHandler)]


def test_setup_logging_attaches_handlers_once(fresh_logger, tmp_path, monkeypatch):
    monkeypatch.delenv('DEBUG_DEPLOY', raising=False)

    first = setup_logging(str(tmp_path / 'logs'))
    second = setup_logging(str(tmp_path / 'logs'))

    assert first is second is fresh_logger
    assert len(fresh_logger.handlers) == 2
    assert (tmp_path / 'logs' / 'deployer.log').exists()
    assert [h.level for h in console_handlers(fresh_logger)] == [logging.WARNING]


def test_debug_deploy_makes_console_verbose(fresh_logger, tmp_path, monkeypatch):
    monkeypatch.setenv('DEBUG_DEPLOY', 'TRUE')

    setup_logging(str(tmp_path / 'logs'))

    assert [h.level for h in console_handlers(fresh_logger)] == [logging.DEBUG]

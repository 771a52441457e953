"""
Shared fakes for the web3 client and signer.
No test touches a real network.
"""

from types import SimpleNamespace

import pytest
from web3.exceptions import TimeExhausted

from sepolia_deployer.config import DeployerConfig
from sepolia_deployer.services.artifacts import ContractArtifact

# Well-known local development key (hardhat/anvil account #0)
TEST_KEY = '0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80'
TEST_ADDRESS = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
CONTRACT_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'
TX_HASH = b'\x11' * 32
TX_HASH_HEX = '0x' + '11' * 32
SEPOLIA = 11155111

CTOR_ABI = [{
    "type": "constructor",
    "inputs": [{"name": "_platformFeeRate", "type": "uint256"}],
    "stateMutability": "nonpayable",
}]


class FakeConstructor:
    def __init__(self, eth, args):
        self.eth = eth
        self.args = args

    def build_transaction(self, params):
        self.eth.calls.append('build_transaction')
        self.eth.constructor_args = self.args
        self.eth.tx_params = dict(params)
        return {
            **params,
            'gas': 1_500_000,
            'maxFeePerGas': 2_000_000_000,
            'maxPriorityFeePerGas': 1_000_000_000,
            'value': 0,
            'data': '0x6080604052',
        }


class FakeFactory:
    def __init__(self, eth):
        self.eth = eth

    def constructor(self, *args):
        return FakeConstructor(self.eth, args)


class FakeEth:
    """Scriptable stand-in for web3's `w3.eth`.

    `heads` is the sequence returned by successive `block_number` reads;
    the last value repeats once the sequence is exhausted.
    """

    def __init__(self, chain_id=SEPOLIA, balance=10 ** 18, heads=(100,),
                 receipt=None, send_error=None, receipt_error=None,
                 balance_error=None, head_error=None):
        self._chain_id = chain_id
        self.balance = balance
        self.heads = list(heads)
        self.receipt = receipt if receipt is not None else {
            'status': 1,
            'contractAddress': CONTRACT_ADDRESS,
            'blockNumber': 100,
        }
        self.send_error = send_error
        self.receipt_error = receipt_error
        self.balance_error = balance_error
        self.head_error = head_error
        self.calls = []
        self.head_reads = 0
        self.constructor_args = None
        self.tx_params = None
        self.raw_sent = None

    @property
    def chain_id(self):
        self.calls.append('chain_id')
        if isinstance(self._chain_id, Exception):
            raise self._chain_id
        return self._chain_id

    @property
    def block_number(self):
        self.calls.append('block_number')
        if self.head_error is not None:
            raise self.head_error
        self.head_reads += 1
        if len(self.heads) > 1:
            return self.heads.pop(0)
        return self.heads[0]

    def get_balance(self, address):
        self.calls.append('get_balance')
        if self.balance_error is not None:
            raise self.balance_error
        return self.balance

    def contract(self, abi=None, bytecode=None):
        self.calls.append('contract')
        return FakeFactory(self)

    def get_transaction_count(self, address, block_identifier='latest'):
        self.calls.append('get_transaction_count')
        return 7

    def send_raw_transaction(self, raw):
        self.calls.append('send_raw_transaction')
        if self.send_error is not None:
            raise self.send_error
        self.raw_sent = raw
        return TX_HASH

    def wait_for_transaction_receipt(self, tx_hash, timeout=120, poll_latency=0.1):
        self.calls.append('wait_for_transaction_receipt')
        if self.receipt_error is not None:
            raise self.receipt_error
        return self.receipt


class FakeWeb3:
    def __init__(self, **kwargs):
        self.eth = FakeEth(**kwargs)


class FakeSigner:
    def __init__(self, address=TEST_ADDRESS):
        self.address = address
        self.signed = []

    def sign_transaction(self, tx):
        self.signed.append(tx)
        return SimpleNamespace(raw_transaction=b'\x02signed')


def fake_artifact_loader(path, contract_name):
    return ContractArtifact(contract_name=contract_name, abi=CTOR_ABI, bytecode='0x6080604052')


@pytest.fixture
def config(tmp_path):
    return DeployerConfig(
        private_key=TEST_KEY,
        deployment_info_path=tmp_path / 'deployment-info.json',
        tx_timeout=30,
        poll_latency=0,
    )


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def timeout_error():
    return TimeExhausted("Transaction is not in the chain after 30 seconds")

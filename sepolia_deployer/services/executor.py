"""
Contract-creation transaction: submit, wait for inclusion, wait for confirmations
"""

import logging
import time
from typing import Callable, Optional

from web3 import Web3
from web3.exceptions import TimeExhausted

from sepolia_deployer.config import LOGGER_NAME, DeployerConfig
from sepolia_deployer.errors import (
    ArtifactError,
    ConfirmationTimeoutError,
    ConnectivityError,
    DeploymentError,
    Result,
    SubmissionError,
)
from sepolia_deployer.models import DeploymentRequest, DeploymentState, PendingDeployment
from sepolia_deployer.services.artifacts import load_artifact


class DeploymentExecutor:
    """One-shot deployer for a single creation transaction.

    IDLE -> SUBMITTING -> AWAITING_INCLUSION -> [AWAITING_CONFIRMATIONS]
    -> CONFIRMED -> RECORDED, with ABORTED reachable from any non-terminal
    state. A new instance is needed for every run.
    """

    def __init__(self, w3: Web3, account, config: DeployerConfig,
                 artifact_loader: Callable = load_artifact,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.w3 = w3
        self.account = account
        self.config = config
        self.artifact_loader = artifact_loader
        self.sleep = sleep
        self.clock = clock
        self.logger = logging.getLogger(LOGGER_NAME)

        self.state = DeploymentState.IDLE
        self.abort_reason: Optional[DeploymentError] = None
        self.transaction_hash: Optional[str] = None
        self.confirmations_required = 0

    def _transition(self, new_state: DeploymentState, detail: str = ''):
        self.logger.debug(f"Executor {self.state.value} -> {new_state.value} {detail}".rstrip())
        self.state = new_state

    def _abort(self, result: Result) -> Result:
        self.abort_reason = result.error
        self.logger.error(f"Deployment aborted in state {self.state.value}: {result.error}")
        self._transition(DeploymentState.ABORTED)
        return result

    def deploy(self, request: DeploymentRequest) -> Result:
        """Submit the creation transaction and track it to the requested depth"""
        if self.state is not DeploymentState.IDLE:
            raise RuntimeError(f"Executor already used (state: {self.state.value})")
        self.confirmations_required = max(request.confirmation_depth, 1)

        self._transition(DeploymentState.SUBMITTING)
        submitted = self._submit(request)
        if not submitted.ok:
            return self._abort(submitted)
        self.transaction_hash = submitted.value

        self._transition(DeploymentState.AWAITING_INCLUSION, self.transaction_hash)
        included = self._await_inclusion(self.transaction_hash)
        if not included.ok:
            return self._abort(included)
        contract_address, inclusion_block = included.value

        if self.confirmations_required > 1:
            self._transition(
                DeploymentState.AWAITING_CONFIRMATIONS, f"({self.confirmations_required})"
            )
            print(f"\n⏳ Waiting for {self.confirmations_required} block confirmations...")
        confirmed = self._await_confirmations(inclusion_block)
        if not confirmed.ok:
            return self._abort(confirmed)
        observed_block, confirmations = confirmed.value

        self._transition(DeploymentState.CONFIRMED, f"at block {observed_block}")
        if self.confirmations_required > 1:
            print(f"✅ Contract confirmed ({confirmations} confirmations)")

        return Result.success(PendingDeployment(
            transaction_hash=self.transaction_hash,
            contract_address=contract_address,
            inclusion_block=inclusion_block,
            observed_block=observed_block,
            confirmations=confirmations,
        ))

    def mark_recorded(self):
        if self.state is not DeploymentState.CONFIRMED:
            raise RuntimeError(f"Cannot record a deployment in state {self.state.value}")
        self._transition(DeploymentState.RECORDED)

    def _submit(self, request: DeploymentRequest) -> Result:
        print("Preparing deployment...")
        try:
            artifact = self.artifact_loader(
                self.config.resolved_artifact_path, self.config.contract_name
            )
        except ArtifactError as e:
            return Result.failure(e)

        if request.signer_account.lower() != self.account.address.lower():
            return Result.failure(SubmissionError(
                f"Request signer {request.signer_account} does not match "
                f"configured account {self.account.address}"
            ))

        print("Sending deployment transaction...")
        try:
            factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
            nonce = self.w3.eth.get_transaction_count(self.account.address, 'pending')
            tx_params = {'from': self.account.address, 'nonce': nonce}
            if self.config.chain_id:
                tx_params['chainId'] = self.config.chain_id
            # gas and EIP-1559 fees are filled in by the client
            tx = factory.constructor(request.fee_rate_basis_points).build_transaction(tx_params)
            signed_tx = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Exception as e:
            return Result.failure(SubmissionError(f"Deployment transaction rejected: {e}"))

        tx_hash_hex = Web3.to_hex(tx_hash)
        self.logger.info(f"Creation transaction sent: {tx_hash_hex} (nonce {nonce})")
        print("Transaction sent!")
        print(f"Transaction hash: {tx_hash_hex}")
        return Result.success(tx_hash_hex)

    def _await_inclusion(self, tx_hash: str) -> Result:
        print("\nWaiting for the transaction to be mined...")
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.config.tx_timeout,
                poll_latency=self.config.poll_latency,
            )
        except TimeExhausted as e:
            return Result.failure(ConfirmationTimeoutError(
                f"Transaction {tx_hash} not mined within {self.config.tx_timeout:g}s: {e}"
            ))
        except Exception as e:
            return Result.failure(ConnectivityError(f"Receipt query for {tx_hash} failed: {e}"))

        if receipt['status'] != 1:
            return Result.failure(SubmissionError(
                f"Deployment transaction {tx_hash} reverted in block {receipt['blockNumber']}"
            ))
        contract_address = receipt.get('contractAddress')
        if not contract_address:
            return Result.failure(SubmissionError(
                f"Receipt for {tx_hash} carries no contract address"
            ))
        inclusion_block = int(receipt['blockNumber'])
        self.logger.info(f"{tx_hash} included in block {inclusion_block} -> {contract_address}")
        return Result.success((contract_address, inclusion_block))

    def _await_confirmations(self, inclusion_block: int) -> Result:
        """Poll the chain head until it is deep enough over the inclusion block.

        The inclusion block counts as the first confirmation.
        """
        required = self.confirmations_required
        deadline = self.clock() + self.config.tx_timeout
        while True:
            try:
                head = int(self.w3.eth.block_number)
            except Exception as e:
                return Result.failure(ConnectivityError(f"Block number query failed: {e}"))

            confirmations = head - inclusion_block + 1
            if confirmations >= required:
                return Result.success((head, confirmations))
            if self.clock() >= deadline:
                return Result.failure(ConfirmationTimeoutError(
                    f"Only {max(confirmations, 0)}/{required} confirmations for "
                    f"{self.transaction_hash} after {self.config.tx_timeout:g}s"
                ))
            self.logger.debug(f"{max(confirmations, 0)}/{required} confirmations at block {head}")
            self.sleep(self.config.poll_latency)

"""
Error taxonomy and the per-call result type used by the deployment flow
"""

from dataclasses import dataclass
from typing import Any, Optional


class DeploymentError(Exception):
    """Base class for every fatal deployment error"""


class ConnectivityError(DeploymentError):
    """Endpoint unreachable or a chain query failed"""


class AccountError(DeploymentError):
    """No signer configured or the balance query failed"""


class InsufficientFundsError(DeploymentError):
    """Signer balance is zero, detected before submission"""


class SubmissionError(DeploymentError):
    """Creation transaction rejected, reverted or malformed"""


class ArtifactError(SubmissionError):
    """Compiled contract artifact missing or unusable"""


class ConfirmationTimeoutError(DeploymentError):
    """Gave up waiting for inclusion or confirmations"""


class PersistenceError(DeploymentError):
    """Deployment record could not be written or read"""


@dataclass(frozen=True)
class Result:
    """Outcome of a single network step: a value or a DeploymentError"""
    value: Any = None
    error: Optional[DeploymentError] = None

    @classmethod
    def success(cls, value: Any = None) -> 'Result':
        return cls(value=value)

    @classmethod
    def failure(cls, error: DeploymentError) -> 'Result':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

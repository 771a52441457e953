from .artifacts import ContractArtifact, load_artifact
from .executor import DeploymentExecutor
from .network import AccountInspector, ConnectivityProbe, PreflightGuard
from .report import OperatorReport

__all__ = [
    'AccountInspector',
    'ConnectivityProbe',
    'ContractArtifact',
    'DeploymentExecutor',
    'OperatorReport',
    'PreflightGuard',
    'load_artifact',
]

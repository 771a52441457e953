from .deployment import (
    CONFIRMATION_PRESETS,
    FAST_CONFIRMATIONS,
    SAFE_CONFIRMATIONS,
    AccountSnapshot,
    DeploymentRequest,
    DeploymentResult,
    DeploymentState,
    NetworkIdentity,
    PendingDeployment,
    basis_points_to_percent,
)

__all__ = [
    'CONFIRMATION_PRESETS',
    'FAST_CONFIRMATIONS',
    'SAFE_CONFIRMATIONS',
    'AccountSnapshot',
    'DeploymentRequest',
    'DeploymentResult',
    'DeploymentState',
    'NetworkIdentity',
    'PendingDeployment',
    'basis_points_to_percent',
]

from .deployment_store import DeploymentRecorder

__all__ = ['DeploymentRecorder']

"""
Persistence of the latest deployment record (deployment-info.json)
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from sepolia_deployer.config import LOGGER_NAME
from sepolia_deployer.errors import PersistenceError, Result
from sepolia_deployer.models import DeploymentResult


class DeploymentRecorder:
    """Writes the deployment record, replacing whatever was there before.

    The record is written to a temporary file next to the target and moved
    into place, so a failed write leaves the previous record untouched.
    """

    def __init__(self, path='deployment-info.json'):
        self.path = Path(path)
        self.logger = logging.getLogger(LOGGER_NAME)

    def record(self, result: DeploymentResult) -> Result:
        payload = json.dumps(result.to_dict(), indent=2) + "\n"
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=self.path.parent,
                                             prefix=f'.{self.path.name}.', suffix='.tmp',
                                             delete=False) as tmp:
                tmp_path = tmp.name
                tmp.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            self.logger.error(f"Failed to write {self.path}: {e}")
            return Result.failure(PersistenceError(f"Cannot write deployment record {self.path}: {e}"))

        self.logger.info(f"Deployment record written to {self.path}")
        return Result.success(self.path)

    def load(self) -> DeploymentResult:
        """Read the stored record back"""
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
            return DeploymentResult.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise PersistenceError(f"Cannot read deployment record {self.path}: {e}") from e

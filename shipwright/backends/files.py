"""File-backed deployment log: one append-only file per deployment."""

from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from shipwright.backends.base import DeploymentLog

if TYPE_CHECKING:
    from shipwright.config import ShipwrightConfig


class FileDeploymentLog(DeploymentLog):
    """
    Writes each deployment's log to {log_dir}/{deployment_id}.log.

    Lines are prefixed with an ISO-8601 UTC timestamp.
    """

    def __init__(self, log_dir: Path | str):
        self._log_dir = Path(log_dir).expanduser()

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    @classmethod
    def from_config(cls, config: "ShipwrightConfig") -> "FileDeploymentLog":
        return cls(config.deployment_log_dir())

    def path_for(self, deployment_id: int) -> Path:
        return self._log_dir / f"{deployment_id}.log"

    def write(self, deployment_id: int, message: str) -> None:
        self._log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(timezone.utc).isoformat()
        with open(self.path_for(deployment_id), "a") as f:
            f.write(f"{timestamp} {message}\n")

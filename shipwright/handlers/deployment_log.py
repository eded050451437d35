"""
Handler for logging.* instructions.

debug/info go to the "shipwright.workflow" logger; log_to_file goes to the
per-deployment log and is mirrored at debug level with the deployment id
attached, so the structured formatter can pick it up.
"""

import logging
from typing import Any, Optional

from shipwright.backends.base import DeploymentLog
from shipwright.handlers.base import Handler
from shipwright.instructions import Debug, Info, Instruction, LogToFile
from shipwright.schemas import OpFamily

WORKFLOW_LOGGER = "shipwright.workflow"


class LoggingHandler(Handler):
    family = OpFamily.LOGGING

    def __init__(self, deployment_log: DeploymentLog, logger: Optional[logging.Logger] = None):
        self._deployment_log = deployment_log
        self._logger = logger or logging.getLogger(WORKFLOW_LOGGER)

    def execute(self, instruction: Instruction) -> Any:
        if isinstance(instruction, LogToFile):
            self._deployment_log.write(instruction.deployment_id, instruction.message)
            self._logger.debug(
                instruction.message,
                extra={"deployment_id": instruction.deployment_id},
            )
            return None
        if isinstance(instruction, Debug):
            self._logger.debug(instruction.message)
            return None
        if isinstance(instruction, Info):
            self._logger.info(instruction.message)
            return None
        raise self._unsupported(instruction)

"""Handler for scheduler.* instructions."""

from typing import Any

from shipwright.backends.base import Scheduler
from shipwright.handlers.base import Handler
from shipwright.instructions import DeleteDeployment, Instruction, Launch
from shipwright.schemas import OpFamily


class SchedulerHandler(Handler):
    family = OpFamily.SCHEDULER

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler

    def execute(self, instruction: Instruction) -> Any:
        if isinstance(instruction, Launch):
            return self._scheduler.launch(
                instruction.image,
                instruction.datacenter,
                instruction.namespace,
                instruction.unit,
                instruction.plan,
                instruction.hash,
            )
        if isinstance(instruction, DeleteDeployment):
            self._scheduler.delete(instruction.datacenter, instruction.deployment)
            return None
        raise self._unsupported(instruction)

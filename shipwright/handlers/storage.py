"""Handler for storage.* instructions."""

from typing import Any

from shipwright.backends.base import Storage
from shipwright.handlers.base import Handler
from shipwright.instructions import (
    CreateDeploymentStatus,
    CreateTrafficShift,
    GetDeployment,
    GetNamespace,
    GetRoutingGraph,
    Instruction,
)
from shipwright.schemas import OpFamily


class StorageHandler(Handler):
    family = OpFamily.STORAGE

    def __init__(self, storage: Storage):
        self._storage = storage

    def execute(self, instruction: Instruction) -> Any:
        if isinstance(instruction, CreateDeploymentStatus):
            self._storage.create_deployment_status(
                instruction.deployment_id, instruction.status, instruction.message
            )
            return None
        if isinstance(instruction, GetDeployment):
            return self._storage.get_deployment(instruction.deployment_id)
        if isinstance(instruction, GetNamespace):
            return self._storage.get_namespace(instruction.datacenter, instruction.namespace)
        if isinstance(instruction, GetRoutingGraph):
            return self._storage.get_routing_graph(instruction.deployment)
        if isinstance(instruction, CreateTrafficShift):
            self._storage.create_traffic_shift(
                instruction.namespace_id,
                instruction.to,
                instruction.policy,
                instruction.duration,
            )
            return None
        raise self._unsupported(instruction)

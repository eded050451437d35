"""Handler for registry.* instructions."""

from typing import Any

from shipwright.backends.base import ImageRegistryClient
from shipwright.handlers.base import Handler
from shipwright.instructions import Extract, Instruction, Pull, Push, Tag
from shipwright.schemas import OpFamily


class ImageRegistryHandler(Handler):
    family = OpFamily.REGISTRY

    def __init__(self, client: ImageRegistryClient):
        self._client = client

    def execute(self, instruction: Instruction) -> Any:
        if isinstance(instruction, Extract):
            return self._client.extract(instruction.unit)
        if isinstance(instruction, Pull):
            code, logs = self._client.pull(instruction.image)
            return code, list(logs)
        if isinstance(instruction, Tag):
            return self._client.tag(instruction.image, instruction.registry)
        if isinstance(instruction, Push):
            code, logs = self._client.push(instruction.image)
            return code, list(logs)
        raise self._unsupported(instruction)

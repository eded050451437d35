"""Handler for discovery.* instructions."""

from typing import Any

from shipwright.backends.base import DiscoveryStore
from shipwright.handlers.base import Handler
from shipwright.instructions import Instruction, KvDelete, KvPut
from shipwright.schemas import OpFamily


class DiscoveryHandler(Handler):
    family = OpFamily.DISCOVERY

    def __init__(self, store: DiscoveryStore):
        self._store = store

    def execute(self, instruction: Instruction) -> Any:
        if isinstance(instruction, KvPut):
            self._store.put(instruction.key, instruction.value)
            return None
        if isinstance(instruction, KvDelete):
            self._store.delete(instruction.key)
            return None
        raise self._unsupported(instruction)

"""Handler for secrets.* instructions."""

from typing import Any

from shipwright.backends.base import SecretsStore
from shipwright.handlers.base import Handler
from shipwright.instructions import CreatePolicy, DeletePolicy, Instruction
from shipwright.schemas import OpFamily


class SecretsHandler(Handler):
    family = OpFamily.SECRETS

    def __init__(self, store: SecretsStore):
        self._store = store

    def execute(self, instruction: Instruction) -> Any:
        if isinstance(instruction, CreatePolicy):
            self._store.create_policy(
                instruction.config,
                instruction.stack,
                instruction.namespace,
                sorted(instruction.roles),
            )
            return None
        if isinstance(instruction, DeletePolicy):
            self._store.delete_policy(instruction.stack, instruction.namespace)
            return None
        raise self._unsupported(instruction)

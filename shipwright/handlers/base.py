"""
Base handler protocol and common implementations.

Handlers execute instructions dispatched by the Interpreter. Each handler
covers one instruction family and wraps one backend:
- registry: extract/pull/tag/push (ImageRegistryClient)
- discovery: put/delete (DiscoveryStore)
- secrets: create/delete policy (SecretsStore)
- logging: log_to_file/debug/info (DeploymentLog + python logging)
- storage: status, lookups, traffic shifts (Storage)
- scheduler: launch/delete (Scheduler)

Control instructions never reach a handler.
"""

from abc import ABC, abstractmethod
from typing import Any

from shipwright.errors import UnsupportedInstructionError
from shipwright.instructions import Instruction
from shipwright.schemas import OpFamily


class Handler(ABC):
    """
    Abstract base class for instruction handlers.

    Subclasses set `family` and implement execute(), returning exactly the
    result type the instruction declares.
    """

    family: OpFamily

    @abstractmethod
    def execute(self, instruction: Instruction) -> Any:
        """
        Execute an instruction.

        Args:
            instruction: The instruction to execute

        Returns:
            The instruction's declared result

        Raises:
            Exception: If execution fails
        """
        pass

    def _unsupported(self, instruction: Instruction) -> UnsupportedInstructionError:
        return UnsupportedInstructionError(
            f"Unsupported {self.family.value} instruction: {instruction.op.value}"
        )


class NoOpHandler(Handler):
    """
    No-op handler for testing and dry-run mode.

    Returns None for every instruction without executing anything.
    """

    def __init__(self, family: OpFamily):
        self.family = family

    def execute(self, instruction: Instruction) -> Any:
        """Return None without executing."""
        return None

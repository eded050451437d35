"""
Handler Registry for dispatching instructions to the appropriate handler.

The registry maps instruction families to their Handler implementations,
providing a central dispatch mechanism for the Interpreter.

Control instructions (pure, fail) are handled directly by the Interpreter
and do NOT go through the registry.
"""

from typing import Any, Optional, TYPE_CHECKING

from shipwright.handlers.base import Handler, NoOpHandler
from shipwright.instructions import Instruction
from shipwright.schemas import OpFamily

if TYPE_CHECKING:
    from shipwright.backends import (
        DeploymentLog,
        DiscoveryStore,
        ImageRegistryClient,
        InMemoryBackends,
        Scheduler,
        SecretsStore,
        Storage,
    )

HANDLED_FAMILIES = tuple(f for f in OpFamily if f != OpFamily.CONTROL)


class HandlerRegistry:
    """
    Registry for handler dispatch by instruction family.

    Usage:
        registry = HandlerRegistry()
        registry.register(OpFamily.STORAGE, StorageHandler(storage))

        # Dispatch an instruction
        result = registry.dispatch(GetDeployment(42))

        # Or use factories
        registry = HandlerRegistry.create_default(storage=storage, scheduler=scheduler)
        registry = HandlerRegistry.create_in_memory()
    """

    def __init__(self) -> None:
        """Initialize an empty handler registry."""
        self._handlers: dict[OpFamily, Handler] = {}

    def register(self, family: OpFamily, handler: Handler) -> None:
        """
        Register a handler for an instruction family.

        Args:
            family: Instruction family
            handler: Handler instance for this family

        Raises:
            ValueError: If family is the control family
        """
        if family == OpFamily.CONTROL:
            raise ValueError("control instructions are handled by the interpreter")
        self._handlers[family] = handler

    def get(self, family: OpFamily) -> Handler:
        """
        Get the handler for an instruction family.

        Raises:
            KeyError: If no handler registered for this family
        """
        if family not in self._handlers:
            registered = [f.value for f in self._handlers]
            raise KeyError(
                f"No handler registered for family: {family.value}. "
                f"Registered: {registered}"
            )
        return self._handlers[family]

    def has(self, family: OpFamily) -> bool:
        return family in self._handlers

    def list_families(self) -> list[OpFamily]:
        return list(self._handlers.keys())

    def dispatch(self, instruction: Instruction) -> Any:
        """
        Dispatch an instruction to the handler of its family.

        Args:
            instruction: The instruction to execute

        Returns:
            The result produced by the handler

        Raises:
            KeyError: If no handler registered for the instruction's family
        """
        return self.get(instruction.family).execute(instruction)

    @classmethod
    def create_default(
        cls,
        registry_client: Optional["ImageRegistryClient"] = None,
        discovery: Optional["DiscoveryStore"] = None,
        secrets: Optional["SecretsStore"] = None,
        storage: Optional["Storage"] = None,
        scheduler: Optional["Scheduler"] = None,
        deployment_log: Optional["DeploymentLog"] = None,
    ) -> "HandlerRegistry":
        """
        Create a registry wrapping the given backends.

        Families without a backend get a NoOpHandler.

        Returns:
            Configured HandlerRegistry
        """
        from shipwright.handlers.deployment_log import LoggingHandler
        from shipwright.handlers.discovery import DiscoveryHandler
        from shipwright.handlers.image_registry import ImageRegistryHandler
        from shipwright.handlers.scheduler import SchedulerHandler
        from shipwright.handlers.secrets import SecretsHandler
        from shipwright.handlers.storage import StorageHandler

        registry = cls.create_noop()
        if registry_client is not None:
            registry.register(OpFamily.REGISTRY, ImageRegistryHandler(registry_client))
        if discovery is not None:
            registry.register(OpFamily.DISCOVERY, DiscoveryHandler(discovery))
        if secrets is not None:
            registry.register(OpFamily.SECRETS, SecretsHandler(secrets))
        if storage is not None:
            registry.register(OpFamily.STORAGE, StorageHandler(storage))
        if scheduler is not None:
            registry.register(OpFamily.SCHEDULER, SchedulerHandler(scheduler))
        if deployment_log is not None:
            registry.register(OpFamily.LOGGING, LoggingHandler(deployment_log))
        return registry

    @classmethod
    def create_in_memory(cls, backends: Optional["InMemoryBackends"] = None) -> "HandlerRegistry":
        """
        Create a registry backed entirely by in-memory backends.

        Args:
            backends: Backends to use; a fresh set is created if omitted

        Returns:
            HandlerRegistry dispatching to the in-memory backends
        """
        if backends is None:
            from shipwright.backends import InMemoryBackends
            backends = InMemoryBackends()
        return cls.create_default(
            registry_client=backends.registry,
            discovery=backends.discovery,
            secrets=backends.secrets,
            storage=backends.storage,
            scheduler=backends.scheduler,
            deployment_log=backends.deployment_log,
        )

    @classmethod
    def create_noop(cls) -> "HandlerRegistry":
        """
        Create a registry with NoOp handlers for every family.

        Useful for testing and dry-run mode.
        """
        registry = cls()
        for family in HANDLED_FAMILIES:
            registry.register(family, NoOpHandler(family))
        return registry

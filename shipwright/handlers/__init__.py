"""
Handlers module for shipwright instruction families.

The Interpreter walks a program; for every non-control instruction it asks
the HandlerRegistry for the handler of the instruction's family, and the
handler calls the matching backend.

Usage:
    from shipwright.handlers import HandlerRegistry

    registry = HandlerRegistry.create_default(storage=storage, scheduler=scheduler)
    # Or everything in memory
    registry = HandlerRegistry.create_in_memory(backends)
"""

from shipwright.handlers.base import Handler, NoOpHandler
from shipwright.handlers.registry import HandlerRegistry
from shipwright.handlers.image_registry import ImageRegistryHandler
from shipwright.handlers.discovery import DiscoveryHandler
from shipwright.handlers.secrets import SecretsHandler
from shipwright.handlers.deployment_log import LoggingHandler
from shipwright.handlers.storage import StorageHandler
from shipwright.handlers.scheduler import SchedulerHandler

__all__ = [
    "Handler",
    "NoOpHandler",
    "HandlerRegistry",
    "ImageRegistryHandler",
    "DiscoveryHandler",
    "SecretsHandler",
    "LoggingHandler",
    "StorageHandler",
    "SchedulerHandler",
]

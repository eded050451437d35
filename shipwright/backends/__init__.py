"""
Backends - the collaborators programs are executed against.

- base: abstract interfaces (registry, discovery, secrets, storage, scheduler, deployment log)
- memory: in-memory implementations for tests and dry runs
- files: file-backed deployment log
"""

from shipwright.backends.base import (
    ImageRegistryClient,
    DiscoveryStore,
    SecretsStore,
    Storage,
    Scheduler,
    DeploymentLog,
)
from shipwright.backends.memory import (
    ScriptedImageRegistry,
    InMemoryDiscoveryStore,
    InMemorySecretsStore,
    InMemoryStorage,
    InMemoryScheduler,
    InMemoryDeploymentLog,
    InMemoryBackends,
    StatusRecord,
    TrafficShiftRecord,
)
from shipwright.backends.files import FileDeploymentLog

__all__ = [
    "ImageRegistryClient",
    "DiscoveryStore",
    "SecretsStore",
    "Storage",
    "Scheduler",
    "DeploymentLog",
    "ScriptedImageRegistry",
    "InMemoryDiscoveryStore",
    "InMemorySecretsStore",
    "InMemoryStorage",
    "InMemoryScheduler",
    "InMemoryDeploymentLog",
    "InMemoryBackends",
    "StatusRecord",
    "TrafficShiftRecord",
    "FileDeploymentLog",
]

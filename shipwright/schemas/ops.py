"""
Op enum defining the instruction taxonomy for shipwright.

Operations are grouped into families, one per backend a workflow touches:
- registry.*  -> image registry (extract, pull, tag, push)
- discovery.* -> service-discovery key/value store
- secrets.*   -> secrets/policy store
- logging.*   -> structured logging and per-deployment log files
- storage.*   -> durable deployment storage
- scheduler.* -> cluster scheduler
- control.*   -> handled natively by the interpreter (pure value, failure)
"""

from enum import Enum


class OpFamily(str, Enum):
    """Instruction families. Each non-control family maps to one handler."""
    REGISTRY = "registry"
    DISCOVERY = "discovery"
    SECRETS = "secrets"
    LOGGING = "logging"
    STORAGE = "storage"
    SCHEDULER = "scheduler"
    CONTROL = "control"


class Op(str, Enum):
    """
    Enumeration of every instruction a workflow program may contain.

    Naming convention: {family}.{action}
    """
    # Image registry
    REGISTRY_EXTRACT = "registry.extract"
    REGISTRY_PULL = "registry.pull"
    REGISTRY_TAG = "registry.tag"
    REGISTRY_PUSH = "registry.push"

    # Service discovery
    DISCOVERY_PUT = "discovery.put"
    DISCOVERY_DELETE = "discovery.delete"

    # Secrets
    SECRETS_CREATE_POLICY = "secrets.create_policy"
    SECRETS_DELETE_POLICY = "secrets.delete_policy"

    # Logging
    LOGGING_LOG_TO_FILE = "logging.log_to_file"
    LOGGING_DEBUG = "logging.debug"
    LOGGING_INFO = "logging.info"

    # Durable storage
    STORAGE_CREATE_DEPLOYMENT_STATUS = "storage.create_deployment_status"
    STORAGE_GET_DEPLOYMENT = "storage.get_deployment"
    STORAGE_GET_NAMESPACE = "storage.get_namespace"
    STORAGE_GET_ROUTING_GRAPH = "storage.get_routing_graph"
    STORAGE_CREATE_TRAFFIC_SHIFT = "storage.create_traffic_shift"

    # Scheduler
    SCHEDULER_LAUNCH = "scheduler.launch"
    SCHEDULER_DELETE = "scheduler.delete"

    # Control (native to the interpreter)
    CONTROL_PURE = "control.pure"
    CONTROL_FAIL = "control.fail"

    @property
    def family(self) -> OpFamily:
        """Get the family (and therefore the handler) of this operation."""
        prefix = self.value.split(".")[0]
        return OpFamily(prefix)

    @property
    def is_native(self) -> bool:
        """Control ops are executed by the interpreter, not by a handler."""
        return self.family == OpFamily.CONTROL

    @classmethod
    def from_string(cls, value: str) -> "Op":
        """Parse an Op from its string value."""
        for op in cls:
            if op.value == value:
                return op
        raise ValueError(f"Unknown operation: {value}")

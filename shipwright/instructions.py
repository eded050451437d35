"""
Instruction catalog - the closed set of atomic operations a program can contain.

Every instruction is a frozen dataclass deriving from Instruction, tagged by
a class-level Op. All families share one base type so that a Program can hold
any of them and sequencing is written once (see shipwright.program).

Constructing an instruction performs no side effect. The declared result of
each instruction is documented on its class; an interpreter must produce
exactly that value or fail.
"""

from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Any, ClassVar, Optional

from shipwright.schemas import (
    Datacenter,
    Deployment,
    DeploymentStatus,
    Image,
    NamespaceName,
    Op,
    OpFamily,
    Plan,
    PolicyConfig,
    RegistryURI,
    StackName,
    TrafficShiftPolicy,
    UnitDef,
)


def _describe_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (DeploymentStatus, Op)):
        return value.value
    if isinstance(value, Deployment):
        return {"id": value.id, "stack_name": str(value.stack_name)}
    if isinstance(value, UnitDef):
        return f"{value.name}@{value.version}"
    if isinstance(value, (Datacenter, Plan)):
        return value.name
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (frozenset, set)):
        return sorted(str(v) for v in value)
    return str(value)


@dataclass(frozen=True)
class Instruction:
    """Base class for every catalog instruction."""
    op: ClassVar[Op]

    @property
    def family(self) -> OpFamily:
        return self.op.family

    def describe(self) -> dict[str, Any]:
        """Serialize to a dictionary for traces and log output."""
        result: dict[str, Any] = {"op": self.op.value}
        for f in fields(self):
            result[f.name] = _describe_value(getattr(self, f.name))
        return result


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Extract(Instruction):
    """Resolve the image a unit ships. Result: Image."""
    unit: UnitDef
    op: ClassVar[Op] = Op.REGISTRY_EXTRACT


@dataclass(frozen=True)
class Pull(Instruction):
    """Pull an image. Result: (exit_code, [PullOutput])."""
    image: Image
    op: ClassVar[Op] = Op.REGISTRY_PULL


@dataclass(frozen=True)
class Tag(Instruction):
    """Tag an image for another registry. Result: (exit_code, Image)."""
    image: Image
    registry: RegistryURI
    op: ClassVar[Op] = Op.REGISTRY_TAG


@dataclass(frozen=True)
class Push(Instruction):
    """Push an image. Result: (exit_code, [PushOutput])."""
    image: Image
    op: ClassVar[Op] = Op.REGISTRY_PUSH


# -----------------------------------------------------------------------------
# Discovery
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class KvPut(Instruction):
    """Write a key to the discovery store. Result: None."""
    key: str
    value: str
    op: ClassVar[Op] = Op.DISCOVERY_PUT


@dataclass(frozen=True)
class KvDelete(Instruction):
    """Delete a key from the discovery store. Result: None."""
    key: str
    op: ClassVar[Op] = Op.DISCOVERY_DELETE


# -----------------------------------------------------------------------------
# Secrets
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class CreatePolicy(Instruction):
    """Create (or replace) the access policy of a stack. Result: None."""
    config: PolicyConfig
    stack: StackName
    namespace: NamespaceName
    roles: frozenset[str]
    op: ClassVar[Op] = Op.SECRETS_CREATE_POLICY


@dataclass(frozen=True)
class DeletePolicy(Instruction):
    """Delete the access policy of a stack if it exists. Result: None."""
    stack: StackName
    namespace: NamespaceName
    op: ClassVar[Op] = Op.SECRETS_DELETE_POLICY


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class LogToFile(Instruction):
    """Append a line to the log of a deployment. Result: None."""
    deployment_id: int
    message: str
    op: ClassVar[Op] = Op.LOGGING_LOG_TO_FILE


@dataclass(frozen=True)
class Debug(Instruction):
    message: str
    op: ClassVar[Op] = Op.LOGGING_DEBUG


@dataclass(frozen=True)
class Info(Instruction):
    message: str
    op: ClassVar[Op] = Op.LOGGING_INFO


# -----------------------------------------------------------------------------
# Storage
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateDeploymentStatus(Instruction):
    """Append a status record for a deployment. Result: None."""
    deployment_id: int
    status: DeploymentStatus
    message: Optional[str] = None
    op: ClassVar[Op] = Op.STORAGE_CREATE_DEPLOYMENT_STATUS


@dataclass(frozen=True)
class GetDeployment(Instruction):
    """Look up a deployment. Result: Deployment, or None when absent."""
    deployment_id: int
    op: ClassVar[Op] = Op.STORAGE_GET_DEPLOYMENT


@dataclass(frozen=True)
class GetNamespace(Instruction):
    """Look up a namespace of a datacenter. Result: Namespace, or None when absent."""
    datacenter: str
    namespace: NamespaceName
    op: ClassVar[Op] = Op.STORAGE_GET_NAMESPACE


@dataclass(frozen=True)
class GetRoutingGraph(Instruction):
    """Read the outgoing routing graph of a deployment. Result: RoutingGraph."""
    deployment: Deployment
    op: ClassVar[Op] = Op.STORAGE_GET_ROUTING_GRAPH


@dataclass(frozen=True)
class CreateTrafficShift(Instruction):
    """
    Create a traffic shift towards `to`. Result: None.

    Storage treats repeated creation for the same (namespace, target) as a no-op.
    """
    namespace_id: int
    to: Deployment
    policy: TrafficShiftPolicy
    duration: timedelta
    op: ClassVar[Op] = Op.STORAGE_CREATE_TRAFFIC_SHIFT


# -----------------------------------------------------------------------------
# Scheduler
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Launch(Instruction):
    """Launch a unit on the scheduler. Result: opaque handle string."""
    image: Image
    datacenter: Datacenter
    namespace: NamespaceName
    unit: UnitDef
    plan: Plan
    hash: str
    op: ClassVar[Op] = Op.SCHEDULER_LAUNCH


@dataclass(frozen=True)
class DeleteDeployment(Instruction):
    """Remove a deployment from the scheduler. Result: None."""
    datacenter: Datacenter
    deployment: Deployment
    op: ClassVar[Op] = Op.SCHEDULER_DELETE


# -----------------------------------------------------------------------------
# Control
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class PureValue(Instruction):
    """Yield `value` with no side effect."""
    value: Any
    op: ClassVar[Op] = Op.CONTROL_PURE


@dataclass(frozen=True)
class Fail(Instruction):
    """Abort the program carrying `error`. Never yields a result."""
    error: BaseException
    op: ClassVar[Op] = Op.CONTROL_FAIL

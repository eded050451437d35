"""
Datacenter-level schemas: where things are deployed and what is running.

Datacenter -> Namespace -> Deployment

StackName and ServiceName are always derived from a unit and its version,
never assigned by hand.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .manifest import FeatureVersion, UnitDef, Version
from .policy import PolicyConfig, TrafficShift


class DeploymentStatus(str, Enum):
    """Lifecycle stage of a deployment."""
    PENDING = "pending"
    DEPLOYING = "deploying"
    WARMING = "warming"
    READY = "ready"
    DEPRECATED = "deprecated"
    GARBAGE = "garbage"
    FAILED = "failed"
    UNKNOWN = "unknown"
    TERMINATED = "terminated"

    @property
    def stage(self) -> Optional[int]:
        """Position in the forward lifecycle, None for failed and unknown."""
        return _LIFECYCLE.get(self)


_LIFECYCLE = {
    status: i
    for i, status in enumerate([
        DeploymentStatus.PENDING,
        DeploymentStatus.DEPLOYING,
        DeploymentStatus.WARMING,
        DeploymentStatus.READY,
        DeploymentStatus.DEPRECATED,
        DeploymentStatus.GARBAGE,
        DeploymentStatus.TERMINATED,
    ])
}


@dataclass(frozen=True)
class Domain:
    """DNS domain of a datacenter."""
    name: str


@dataclass(frozen=True)
class NamespaceName:
    """Name of a namespace as referenced from a manifest, e.g. "dev" or "dev/sandbox"."""
    value: str

    def __post_init__(self):
        if not self.value or self.value.startswith("/") or self.value.endswith("/"):
            raise ValueError(f"Invalid namespace name: '{self.value}'")

    @property
    def root(self) -> str:
        return self.value.split("/")[0]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Datacenter:
    """
    A target execution environment.

    Attributes:
        name: Unique datacenter name
        domain: DNS domain used when publishing discovery information
        docker_registry: Registry URI images are promoted to before launch
        policy: Secret policy configuration; None disables policy provisioning
        default_traffic_shift: Traffic shift used when a plan does not specify one
    """
    name: str
    domain: Domain
    docker_registry: str
    policy: Optional[PolicyConfig] = None
    default_traffic_shift: Optional[TrafficShift] = None


@dataclass(frozen=True)
class Namespace:
    """A logical partition of exactly one datacenter."""
    id: int
    name: NamespaceName
    datacenter: str


@dataclass(frozen=True)
class StackName:
    """Identity of one deployed stack: unit name, exact version and deployment hash."""
    service_type: str
    version: Version
    hash: str

    def __str__(self) -> str:
        v = self.version
        return f"{self.service_type}--{v.major}-{v.minor}-{v.patch}--{self.hash}"


@dataclass(frozen=True)
class ServiceName:
    """Identity of a service across patch releases: unit name and feature version."""
    service_type: str
    version: FeatureVersion

    def __str__(self) -> str:
        return f"{self.service_type}@{self.version}"


@dataclass(frozen=True)
class Deployment:
    """
    A materialized running instance of a unit + plan in a namespace.

    Attributes:
        id: Storage identifier, immutable
        unit: The versioned unit that was deployed
        plan: Name of the plan the unit was launched with
        namespace: Namespace the deployment lives in
        hash: Deployment hash distinguishing repeated deploys of one version
        guid: Globally unique identifier handed out by storage
        strategy: Name of the strategy that deployed it
    """
    id: int
    unit: UnitDef
    plan: str
    namespace: Namespace
    hash: str
    guid: str = ""
    strategy: str = ""

    @property
    def stack_name(self) -> StackName:
        return StackName(self.unit.name, self.unit.version, self.hash)

    @property
    def service_name(self) -> ServiceName:
        return ServiceName(self.unit.name, self.unit.version.to_feature_version())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "id": self.id,
            "unit": self.unit.to_dict(),
            "plan": self.plan,
            "namespace": str(self.namespace.name),
            "datacenter": self.namespace.datacenter,
            "hash": self.hash,
            "guid": self.guid,
            "strategy": self.strategy,
            "stack_name": str(self.stack_name),
        }

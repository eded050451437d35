"""
shipwright.schemas - Data model for the deployment control plane.

UnitDef + Plan -> (Strategy) -> Deployment in a Namespace of a Datacenter

- ops: the instruction taxonomy (Op, OpFamily)
- manifest: UnitDef, Version, Plan, alerting
- datacenter: Datacenter, Namespace, Deployment, StackName, ServiceName, DeploymentStatus
- image: Image and registry log records
- policy: traffic shift and secret policies
- routing: routing graph snapshots used for discovery
"""

from .ops import Op, OpFamily
from .policy import (
    TrafficShiftPolicy,
    TrafficShift,
    PolicyConfig,
    LINEAR_POLICY,
    ATOMIC_POLICY,
)
from .manifest import (
    Version,
    FeatureVersion,
    Port,
    AlertRule,
    AlertOptOut,
    UnitDef,
    Plan,
)
from .datacenter import (
    DeploymentStatus,
    Domain,
    NamespaceName,
    Datacenter,
    Namespace,
    StackName,
    ServiceName,
    Deployment,
)
from .image import (
    Image,
    RegistryURI,
    RegistryOutput,
    PullStatus,
    PullError,
    PushStatus,
    PushProgress,
    PushError,
)
from .routing import (
    RoutingNode,
    RoutePath,
    RouteEdge,
    RoutingGraph,
)

__all__ = [
    # Ops
    "Op",
    "OpFamily",
    # Policies
    "TrafficShiftPolicy",
    "TrafficShift",
    "PolicyConfig",
    "LINEAR_POLICY",
    "ATOMIC_POLICY",
    # Manifest
    "Version",
    "FeatureVersion",
    "Port",
    "AlertRule",
    "AlertOptOut",
    "UnitDef",
    "Plan",
    # Datacenter
    "DeploymentStatus",
    "Domain",
    "NamespaceName",
    "Datacenter",
    "Namespace",
    "StackName",
    "ServiceName",
    "Deployment",
    # Images
    "Image",
    "RegistryURI",
    "RegistryOutput",
    "PullStatus",
    "PullError",
    "PushStatus",
    "PushProgress",
    "PushError",
    # Routing
    "RoutingNode",
    "RoutePath",
    "RouteEdge",
    "RoutingGraph",
]

"""
In-memory backends for testing and dry runs.

They honour the same contracts as production collaborators, in particular:
- InMemoryStorage.create_traffic_shift is idempotent per (namespace, target)
- InMemorySecretsStore.create_policy replaces, delete_policy ignores missing
- InMemoryDiscoveryStore.delete ignores missing keys
- InMemoryStorage.create_deployment_status rejects lifecycle regressions
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from shipwright.backends.base import (
    DeploymentLog,
    DiscoveryStore,
    ImageRegistryClient,
    Scheduler,
    SecretsStore,
    Storage,
)
from shipwright.errors import StatusRegressionError
from shipwright.policies import policy_name
from shipwright.schemas import (
    Datacenter,
    Deployment,
    DeploymentStatus,
    Image,
    Namespace,
    NamespaceName,
    Plan,
    PolicyConfig,
    PullStatus,
    PushStatus,
    RegistryURI,
    RouteEdge,
    RoutingGraph,
    RoutingNode,
    StackName,
    TrafficShiftPolicy,
    UnitDef,
)


def _utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StatusRecord:
    deployment_id: int
    status: DeploymentStatus
    message: Optional[str]
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class TrafficShiftRecord:
    namespace_id: int
    to: Deployment
    policy: TrafficShiftPolicy
    duration: timedelta
    created_at: datetime = field(default_factory=_utcnow)


class ScriptedImageRegistry(ImageRegistryClient):
    """
    Registry client returning pre-configured results.

    Args:
        pull_result: (exit_code, records) returned by every pull
        push_result: (exit_code, records) returned by every push
        tag_exit_code: Exit code returned alongside the tagged image
    """

    def __init__(
        self,
        pull_result: Optional[tuple[int, list]] = None,
        push_result: Optional[tuple[int, list]] = None,
        tag_exit_code: int = 0,
    ):
        self.pull_result = pull_result or (0, [PullStatus("Download complete")])
        self.push_result = push_result or (0, [PushStatus("Pushed")])
        self.tag_exit_code = tag_exit_code
        self.calls: list[tuple[str, str]] = []

    def extract(self, unit: UnitDef) -> Image:
        self.calls.append(("extract", unit.deployable))
        return Image.parse(unit.deployable)

    def pull(self, image: Image) -> tuple[int, list]:
        self.calls.append(("pull", str(image)))
        return self.pull_result

    def tag(self, image: Image, registry: RegistryURI) -> tuple[int, Image]:
        tagged = image.for_registry(registry)
        self.calls.append(("tag", str(tagged)))
        return self.tag_exit_code, tagged

    def push(self, image: Image) -> tuple[int, list]:
        self.calls.append(("push", str(image)))
        return self.push_result


class InMemoryDiscoveryStore(DiscoveryStore):
    def __init__(self):
        self.data: dict[str, str] = {}
        self.history: list[tuple[str, str]] = []

    def put(self, key: str, value: str) -> None:
        self.history.append(("put", key))
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.history.append(("delete", key))
        self.data.pop(key, None)


class InMemorySecretsStore(SecretsStore):
    def __init__(self):
        self.policies: dict[str, dict[str, list[str]]] = {}

    def create_policy(
        self,
        config: PolicyConfig,
        stack: StackName,
        namespace: NamespaceName,
        roles: Iterable[str],
    ) -> None:
        self.policies[policy_name(stack, namespace)] = config.render_rules(namespace.value, roles)

    def delete_policy(self, stack: StackName, namespace: NamespaceName) -> None:
        self.policies.pop(policy_name(stack, namespace), None)


class InMemoryStorage(Storage):
    """Dictionary-backed storage with helpers for seeding test data."""

    def __init__(self):
        self.deployments: dict[int, Deployment] = {}
        self.namespaces: dict[tuple[str, str], Namespace] = {}
        self.routes: list[RouteEdge] = []
        self.statuses: list[StatusRecord] = []
        self.traffic_shifts: dict[tuple[int, int], TrafficShiftRecord] = {}

    # Seeding helpers

    def add_namespace(self, datacenter: str, name: str) -> Namespace:
        key = (datacenter, name)
        if key not in self.namespaces:
            self.namespaces[key] = Namespace(
                id=len(self.namespaces) + 1,
                name=NamespaceName(name),
                datacenter=datacenter,
            )
        return self.namespaces[key]

    def add_deployment(self, deployment: Deployment) -> Deployment:
        self.deployments[deployment.id] = deployment
        return deployment

    def add_route(self, edge: RouteEdge) -> None:
        self.routes.append(edge)

    def statuses_for(self, deployment_id: int) -> list[StatusRecord]:
        return [r for r in self.statuses if r.deployment_id == deployment_id]

    # Storage interface

    def create_deployment_status(
        self,
        deployment_id: int,
        status: DeploymentStatus,
        message: Optional[str],
    ) -> None:
        if status.stage is not None:
            stages = [r.status.stage for r in self.statuses_for(deployment_id)]
            latest = max((st for st in stages if st is not None), default=None)
            if latest is not None and status.stage < latest:
                raise StatusRegressionError(
                    f"Deployment {deployment_id} cannot move back to {status.value}"
                )
        self.statuses.append(StatusRecord(deployment_id, status, message))

    def get_deployment(self, deployment_id: int) -> Optional[Deployment]:
        return self.deployments.get(deployment_id)

    def get_namespace(self, datacenter: str, namespace: NamespaceName) -> Optional[Namespace]:
        return self.namespaces.get((datacenter, namespace.value))

    def get_routing_graph(self, deployment: Deployment) -> RoutingGraph:
        node = RoutingNode.of(deployment)
        return RoutingGraph.from_edges(e for e in self.routes if e.source == node)

    def create_traffic_shift(
        self,
        namespace_id: int,
        to: Deployment,
        policy: TrafficShiftPolicy,
        duration: timedelta,
    ) -> None:
        key = (namespace_id, to.id)
        if key in self.traffic_shifts:
            return
        self.traffic_shifts[key] = TrafficShiftRecord(namespace_id, to, policy, duration)


class InMemoryScheduler(Scheduler):
    def __init__(self):
        self.running: dict[str, Image] = {}
        self.deleted: list[str] = []

    def launch(
        self,
        image: Image,
        dc: Datacenter,
        ns: NamespaceName,
        unit: UnitDef,
        plan: Plan,
        hash: str,
    ) -> str:
        handle = f"{dc.name}/{ns}/{StackName(unit.name, unit.version, hash)}"
        self.running[handle] = image
        return handle

    def delete(self, dc: Datacenter, deployment: Deployment) -> None:
        handle = f"{dc.name}/{deployment.namespace.name}/{deployment.stack_name}"
        self.running.pop(handle, None)
        self.deleted.append(handle)


class InMemoryDeploymentLog(DeploymentLog):
    def __init__(self):
        self.lines: dict[int, list[str]] = {}

    def write(self, deployment_id: int, message: str) -> None:
        self.lines.setdefault(deployment_id, []).append(message)

    def lines_for(self, deployment_id: int) -> list[str]:
        return list(self.lines.get(deployment_id, []))


@dataclass
class InMemoryBackends:
    """One of each in-memory backend, wired together for a test or dry run."""
    registry: ScriptedImageRegistry = field(default_factory=ScriptedImageRegistry)
    discovery: InMemoryDiscoveryStore = field(default_factory=InMemoryDiscoveryStore)
    secrets: InMemorySecretsStore = field(default_factory=InMemorySecretsStore)
    storage: InMemoryStorage = field(default_factory=InMemoryStorage)
    scheduler: InMemoryScheduler = field(default_factory=InMemoryScheduler)
    deployment_log: InMemoryDeploymentLog = field(default_factory=InMemoryDeploymentLog)

"""
Collaborator interfaces.

These are the backends a program is ultimately executed against. Each
handler in shipwright.handlers wraps exactly one of them. Implementations
own their own concurrency control; nothing here takes a lock.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Iterable, Optional

from shipwright.schemas import (
    Datacenter,
    Deployment,
    DeploymentStatus,
    Image,
    Namespace,
    NamespaceName,
    Plan,
    PolicyConfig,
    RegistryURI,
    RoutingGraph,
    StackName,
    TrafficShiftPolicy,
    UnitDef,
)


class ImageRegistryClient(ABC):
    """Image registry operations. Pull and push report (exit_code, log records)."""

    @abstractmethod
    def extract(self, unit: UnitDef) -> Image:
        pass

    @abstractmethod
    def pull(self, image: Image) -> tuple[int, list]:
        pass

    @abstractmethod
    def tag(self, image: Image, registry: RegistryURI) -> tuple[int, Image]:
        pass

    @abstractmethod
    def push(self, image: Image) -> tuple[int, list]:
        pass


class DiscoveryStore(ABC):
    """Key/value store used for service discovery and alert definitions."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a key. Deleting a missing key is not an error."""
        pass


class SecretsStore(ABC):
    """
    Secret access policies scoped by stack and namespace.

    create_policy is create-or-replace; delete_policy is delete-if-exists.
    """

    @abstractmethod
    def create_policy(
        self,
        config: PolicyConfig,
        stack: StackName,
        namespace: NamespaceName,
        roles: Iterable[str],
    ) -> None:
        pass

    @abstractmethod
    def delete_policy(self, stack: StackName, namespace: NamespaceName) -> None:
        pass


class Storage(ABC):
    """
    Durable deployment storage.

    Reads return None when the record is absent. Status records and traffic
    shifts are append-only; creating a traffic shift that already exists for
    the same (namespace, target) is a no-op.
    """

    @abstractmethod
    def create_deployment_status(
        self,
        deployment_id: int,
        status: DeploymentStatus,
        message: Optional[str],
    ) -> None:
        pass

    @abstractmethod
    def get_deployment(self, deployment_id: int) -> Optional[Deployment]:
        pass

    @abstractmethod
    def get_namespace(self, datacenter: str, namespace: NamespaceName) -> Optional[Namespace]:
        pass

    @abstractmethod
    def get_routing_graph(self, deployment: Deployment) -> RoutingGraph:
        pass

    @abstractmethod
    def create_traffic_shift(
        self,
        namespace_id: int,
        to: Deployment,
        policy: TrafficShiftPolicy,
        duration: timedelta,
    ) -> None:
        pass


class Scheduler(ABC):
    """Cluster scheduler."""

    @abstractmethod
    def launch(
        self,
        image: Image,
        dc: Datacenter,
        ns: NamespaceName,
        unit: UnitDef,
        plan: Plan,
        hash: str,
    ) -> str:
        """Launch a unit and return an opaque handle."""
        pass

    @abstractmethod
    def delete(self, dc: Datacenter, deployment: Deployment) -> None:
        pass


class DeploymentLog(ABC):
    """Per-deployment log sink."""

    @abstractmethod
    def write(self, deployment_id: int, message: str) -> None:
        pass

"""
Routing graph schemas.

A RoutingGraph is an immutable snapshot of which stacks talk to which, on
which port, with what weight. Storage produces it; discovery publication
only ever reads the outgoing edges of a single node.
"""

from dataclasses import dataclass, field
from typing import Iterable

from .datacenter import Deployment, StackName


@dataclass(frozen=True)
class RoutingNode:
    """A node in the routing graph, one per deployed stack."""
    stack_name: StackName

    @property
    def service_type(self) -> str:
        return self.stack_name.service_type

    @classmethod
    def of(cls, deployment: Deployment) -> "RoutingNode":
        return cls(deployment.stack_name)


@dataclass(frozen=True)
class RoutePath:
    """
    How traffic reaches a target node.

    Attributes:
        port_name: Named port on the target unit
        port_number: Port number on the target unit
        weight: Share of traffic (0-100) sent to this target for the port
    """
    port_name: str
    port_number: int
    weight: int = 100

    def __post_init__(self):
        if not 0 <= self.weight <= 100:
            raise ValueError(f"Route weight must be within 0-100, got {self.weight}")


@dataclass(frozen=True)
class RouteEdge:
    source: RoutingNode
    target: RoutingNode
    path: RoutePath


@dataclass(frozen=True)
class RoutingGraph:
    """Immutable directed graph of routing edges."""
    edges: tuple[RouteEdge, ...] = field(default_factory=tuple)

    @classmethod
    def from_edges(cls, edges: Iterable[RouteEdge]) -> "RoutingGraph":
        return cls(tuple(edges))

    @property
    def nodes(self) -> frozenset[RoutingNode]:
        found = set()
        for edge in self.edges:
            found.add(edge.source)
            found.add(edge.target)
        return frozenset(found)

    def outgoing(self, node: RoutingNode) -> list[RouteEdge]:
        """Edges leaving `node`, in graph order."""
        return [e for e in self.edges if e.source == node]

"""
Discovery publication.

For a deployment, reads its routing graph from storage, computes the
discovery table from the outgoing edges of its node, and writes the table to
the discovery store under a key derived from datacenter domain, namespace and
stack name.

The table is pure data computed from the graph: the same graph always
serializes to byte-identical JSON.
"""

import json
from dataclasses import dataclass
from typing import Any

from shipwright import syntax as s
from shipwright.program import Program
from shipwright.schemas import (
    Datacenter,
    Deployment,
    NamespaceName,
    RoutingGraph,
    RoutingNode,
    StackName,
)

DISCOVERY_PREFIX = "discovery/v1"


@dataclass(frozen=True, order=True)
class NamedService:
    """A dependency as seen by the caller: service type and port name."""
    service_type: str
    port_name: str


@dataclass(frozen=True, order=True)
class DiscoveryTarget:
    """One stack that serves a NamedService, with its port and traffic weight."""
    stack: str
    port: int
    weight: int


DiscoveryTable = dict[NamedService, tuple[DiscoveryTarget, ...]]


def discovery_key(domain: str, ns: NamespaceName, sn: StackName) -> str:
    return f"{DISCOVERY_PREFIX}/{domain}/{ns}/{sn}"


def discovery_table(node: RoutingNode, graph: RoutingGraph) -> DiscoveryTable:
    """
    Compute the discovery table of `node`.

    Args:
        node: The routing node of the deployment being published
        graph: Routing graph containing the node's outgoing edges

    Returns:
        Mapping of each dependency to its targets. Keys and targets are
        sorted so the table is deterministic.
    """
    grouped: dict[NamedService, set[DiscoveryTarget]] = {}
    for edge in graph.outgoing(node):
        service = NamedService(edge.target.service_type, edge.path.port_name)
        target = DiscoveryTarget(
            stack=str(edge.target.stack_name),
            port=edge.path.port_number,
            weight=edge.path.weight,
        )
        grouped.setdefault(service, set()).add(target)

    return {service: tuple(sorted(grouped[service])) for service in sorted(grouped)}


def render_discovery_info(
    domain: str,
    ns: NamespaceName,
    sn: StackName,
    table: DiscoveryTable,
) -> str:
    """Serialize a discovery table to canonical JSON."""
    routes: list[dict[str, Any]] = []
    for service, targets in table.items():
        routes.append({
            "service": service.service_type,
            "port_name": service.port_name,
            "targets": [
                {"stack": t.stack, "port": t.port, "weight": t.weight}
                for t in targets
            ],
        })
    payload = {
        "domain": domain,
        "namespace": str(ns),
        "stack": str(sn),
        "routes": routes,
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


def write_discovery(
    deployment_id: int,
    sn: StackName,
    ns: NamespaceName,
    dc: Datacenter,
) -> Program[None]:
    """
    Publish discovery information for a deployment.

    Fails if the deployment does not exist.
    """

    def publish(deployment: Deployment) -> Program[None]:
        if deployment is None:
            return s.fail(f"cannot publish discovery info: deployment {deployment_id} not found")
        return s.get_routing_graph(deployment).bind(
            lambda graph: s.put(
                discovery_key(dc.domain.name, ns, sn),
                render_discovery_info(
                    dc.domain.name, ns, sn, discovery_table(RoutingNode.of(deployment), graph)
                ),
            )
        )

    return s.get_deployment(deployment_id).bind(publish)


def delete_discovery(dc: Datacenter, ns: NamespaceName, sn: StackName) -> Program[None]:
    return s.delete_key(discovery_key(dc.domain.name, ns, sn))

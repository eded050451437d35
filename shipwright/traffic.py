"""
Traffic shift activation.

    namespace lookup -> target lookup -> service name -> create shift record

A missing namespace or target ends the program successfully with None: there
is nothing to shift. Creating the record is idempotent on the storage side,
so activating the same shift twice leaves a single record.
"""

from datetime import timedelta
from typing import Optional

from shipwright import syntax as s
from shipwright.program import Program
from shipwright.schemas import (
    Datacenter,
    Deployment,
    Namespace,
    NamespaceName,
    TrafficShiftPolicy,
)


def create_traffic_shift(
    deployment_id: int,
    ns_ref: NamespaceName,
    dc: Datacenter,
    policy: TrafficShiftPolicy,
    duration: timedelta,
) -> Program[Optional[None]]:
    """
    Build the traffic shift activation program.

    Args:
        deployment_id: Deployment traffic is shifted to
        ns_ref: Namespace the deployment runs in
        dc: Datacenter of the namespace
        policy: Policy governing the shift
        duration: How long the shift takes

    Returns:
        Program yielding None whether or not a shift was created
    """

    def activate(ns: Namespace, to: Deployment) -> Program[None]:
        sn = to.service_name
        return s.debug(
            f"creating {policy} traffic shift to {sn} in namespace {ns.name} over {duration}"
        ).then(s.traffic_shift(ns.id, to, policy, duration))

    return s.optional(
        s.get_namespace(dc.name, ns_ref),
        lambda ns: s.optional(
            s.get_deployment(deployment_id),
            lambda to: activate(ns, to),
        ),
    )

"""
Magnetar - the full-featured strategy.

Deploy:
    status(Pending) -> promote image -> provision secret policy
    -> publish alerts -> launch -> publish discovery + activate traffic shift
    (units with ports only) -> status(Ready | Warming)

Destroy:
    scheduler delete -> delete discovery key -> delete alerts
    -> revoke secret policy -> status(Terminated)

Policy provisioning and revocation are both gated on the datacenter having a
policy config, so they always come in pairs.
"""

from typing import Optional

from shipwright import syntax as s
from shipwright.alerts import delete_alerts, write_alerts
from shipwright.discovery import delete_discovery, write_discovery
from shipwright.policies import delete_policy, write_policy
from shipwright.program import Done, Program
from shipwright.promotion import promote_image
from shipwright.schemas import (
    Datacenter,
    Deployment,
    DeploymentStatus,
    Image,
    Namespace,
    NamespaceName,
    Plan,
    StackName,
    TrafficShift,
    UnitDef,
)
from shipwright.strategies.base import Strategy
from shipwright.traffic import create_traffic_shift


def _traffic_shift_for(plan: Plan, dc: Datacenter) -> Optional[TrafficShift]:
    return plan.traffic_shift or dc.default_traffic_shift


class Magnetar(Strategy[None]):
    name = "Magnetar"

    def deploy(
        self,
        id: int,
        hash: str,
        unit: UnitDef,
        plan: Plan,
        dc: Datacenter,
        ns: NamespaceName,
    ) -> Program[None]:
        sn = StackName(unit.name, unit.version, hash)

        def provision(image: Image) -> Program[None]:
            return (
                self._write_policy(unit, dc, sn, ns)
                .then(write_alerts(sn, ns, plan.name, unit, plan.alert_opt_outs))
                .bind(lambda key: s.when(
                    key is not None, s.log_to_file(id, f"wrote alert definitions to {key}")
                ))
                .then(s.launch(image, dc, ns, unit, plan, hash))
                .bind(lambda handle: s.debug(f"scheduler responded with: {handle}"))
                .then(s.when(unit.exposes_ports, self._expose(id, sn, ns, plan, dc)))
                .then(s.status(
                    id,
                    DeploymentStatus.READY if plan.is_periodic else DeploymentStatus.WARMING,
                    "======> workflow completed <======",
                ))
            )

        return (
            s.status(id, DeploymentStatus.PENDING, "workflow about to start")
            .then(promote_image(id, unit, dc.docker_registry))
            .bind(provision)
        )

    def destroy(self, deployment: Deployment, dc: Datacenter, ns: Namespace) -> Program[None]:
        sn = deployment.stack_name
        return (
            s.delete(dc, deployment)
            .then(delete_discovery(dc, ns.name, sn))
            .then(delete_alerts(sn))
            .then(s.when(dc.policy is not None, delete_policy(sn, ns.name)))
            .then(s.status(
                deployment.id,
                DeploymentStatus.TERMINATED,
                f"decommissioned deployment {sn} in {dc.name}/{ns.name}",
            ))
        )

    def _write_policy(
        self, unit: UnitDef, dc: Datacenter, sn: StackName, ns: NamespaceName
    ) -> Program[None]:
        if dc.policy is None:
            return Done(None)
        return write_policy(dc.policy, sn, ns, unit.resources)

    def _expose(
        self, id: int, sn: StackName, ns: NamespaceName, plan: Plan, dc: Datacenter
    ) -> Program[None]:
        shift = _traffic_shift_for(plan, dc)
        publish = write_discovery(id, sn, ns, dc)
        if shift is None:
            return publish
        return publish.then(
            create_traffic_shift(id, ns, dc, shift.policy, shift.duration)
        )

"""
Canopus - a minimal strategy for schedulers that manage discovery, secrets
and traffic on their own.

Deploy:  status(Pending) -> promote image -> launch -> status(Ready | Warming)
Destroy: scheduler delete -> status(Terminated)
"""

from shipwright import syntax as s
from shipwright.program import Program
from shipwright.promotion import promote_image
from shipwright.schemas import (
    Datacenter,
    Deployment,
    DeploymentStatus,
    Namespace,
    NamespaceName,
    Plan,
    UnitDef,
)
from shipwright.strategies.base import Strategy


class Canopus(Strategy[None]):
    name = "Canopus"

    def deploy(
        self,
        id: int,
        hash: str,
        unit: UnitDef,
        plan: Plan,
        dc: Datacenter,
        ns: NamespaceName,
    ) -> Program[None]:
        return (
            s.status(id, DeploymentStatus.PENDING, "workflow about to start")
            .then(promote_image(id, unit, dc.docker_registry))
            .bind(lambda image: s.launch(image, dc, ns, unit, plan, hash))
            .bind(lambda handle: s.debug(f"scheduler responded with: {handle}"))
            .then(s.status(
                id,
                DeploymentStatus.READY if plan.is_periodic else DeploymentStatus.WARMING,
                "======> workflow completed <======",
            ))
        )

    def destroy(self, deployment: Deployment, dc: Datacenter, ns: Namespace) -> Program[None]:
        return s.delete(dc, deployment).then(
            s.status(
                deployment.id,
                DeploymentStatus.TERMINATED,
                f"decommissioned deployment {deployment.stack_name} in {dc.name}/{ns.name}",
            )
        )

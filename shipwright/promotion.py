"""
Image promotion pipeline.

Replicates the image a unit ships into the registry of the target datacenter:

    extract -> status(Deploying) -> pull -> log -> check
            -> tag -> push -> log -> check -> tagged image

Registries sometimes exit 0 even though they reported an error in their
output, so a step only succeeds with exit code 0 AND no error records.
"""

from typing import Sequence

from shipwright import syntax as s
from shipwright.program import Done, Program, traverse
from shipwright.schemas import (
    DeploymentStatus,
    Image,
    PullError,
    PushError,
    RegistryOutput,
    RegistryURI,
    UnitDef,
)


def check_registry_output(
    action: str,
    exit_code: int,
    logs: Sequence[RegistryOutput],
    marker: type,
) -> Program[None]:
    """
    Fail unless the registry exited cleanly and reported no error markers.

    Args:
        action: Name of the registry action, used in the failure message
        exit_code: Exit code returned by the registry
        logs: Log records returned by the registry
        marker: Record type that marks an error (PullError or PushError)

    Returns:
        Done(None) on success, otherwise a failing program whose message
        names the exit code and every error marker, comma-joined
    """
    errors = [entry for entry in logs if isinstance(entry, marker)]
    if exit_code == 0 and not errors:
        return Done(None)
    reason = ", ".join(str(e) for e in errors)
    return s.fail(f"{action} failed with exit code: {exit_code} and reason: {reason}")


def _log_lines(deployment_id: int, logs: Sequence[RegistryOutput]) -> Program[list]:
    return traverse(logs, lambda out: s.log_to_file(deployment_id, out.as_string()))


def promote_image(deployment_id: int, unit: UnitDef, registry: RegistryURI) -> Program[Image]:
    """
    Build the promotion program for a unit.

    Args:
        deployment_id: Deployment whose log and status receive progress
        unit: Unit whose image is promoted
        registry: Destination registry

    Returns:
        Program yielding the image as tagged for `registry`
    """

    def replicate(image: Image) -> Program[Image]:
        return (
            s.status(
                deployment_id,
                DeploymentStatus.DEPLOYING,
                f"replicating {image} to remote registry {registry}",
            )
            .then(s.pull(image))
            .bind(lambda pulled: after_pull(image, pulled))
        )

    def after_pull(image: Image, pulled) -> Program[Image]:
        code, logs = pulled
        return (
            _log_lines(deployment_id, logs)
            .then(check_registry_output("pull", code, logs, PullError))
            # tag exit code is not checked; a bad tag surfaces as a push failure
            .then(s.tag(image, registry))
            .bind(lambda tagged: push_tagged(tagged[1]))
        )

    def push_tagged(tagged: Image) -> Program[Image]:
        return s.push(tagged).bind(
            lambda pushed: _log_lines(deployment_id, pushed[1])
            .then(check_registry_output("push", pushed[0], pushed[1], PushError))
            .map(lambda _: tagged)
        )

    return s.extract(unit).bind(replicate)

"""
Policy schemas: traffic shifting and secret access.

TrafficShiftPolicy decides how much traffic the new deployment receives at a
given point of a shift. PolicyConfig describes how secret-access rules are
rendered for a stack in a namespace.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


LINEAR = "linear"
ATOMIC = "atomic"


@dataclass(frozen=True)
class TrafficShiftPolicy:
    """
    Policy governing gradual traffic migration between two deployments.

    Attributes:
        kind: Policy kind ("linear" or "atomic")
        description: Human-readable description
    """
    kind: str
    description: str = ""

    def __post_init__(self):
        if self.kind not in (LINEAR, ATOMIC):
            raise ValueError(
                f"Unknown traffic shift policy '{self.kind}'. "
                f"Expected one of: {LINEAR}, {ATOMIC}"
            )

    def to_weight(self, elapsed: timedelta, duration: timedelta) -> float:
        """
        Fraction of traffic routed to the target deployment.

        Args:
            elapsed: Time since the shift started
            duration: Total duration of the shift

        Returns:
            A value between 0.0 (all traffic on the old deployment)
            and 1.0 (all traffic on the new one)
        """
        if duration <= timedelta(0) or elapsed >= duration:
            return 1.0
        if elapsed <= timedelta(0):
            return 0.0
        if self.kind == ATOMIC:
            return 0.0
        return elapsed / duration

    @classmethod
    def from_string(cls, value: str) -> "TrafficShiftPolicy":
        """Look up one of the built-in policies by name."""
        for policy in (LINEAR_POLICY, ATOMIC_POLICY):
            if policy.kind == value:
                return policy
        raise ValueError(f"Unknown traffic shift policy: {value}")

    def __str__(self) -> str:
        return self.kind


LINEAR_POLICY = TrafficShiftPolicy(
    LINEAR, "shift traffic from the old deployment to the new one at a constant rate"
)
ATOMIC_POLICY = TrafficShiftPolicy(
    ATOMIC, "keep all traffic on the old deployment until the shift ends, then flip"
)


@dataclass(frozen=True)
class TrafficShift:
    """A policy together with how long the shift should take."""
    policy: TrafficShiftPolicy
    duration: timedelta


@dataclass(frozen=True)
class PolicyConfig:
    """
    Secret-access policy descriptor for a datacenter.

    Attributes:
        resource_creds_path: Path template for resource credentials. May use
            {namespace} and {resource} placeholders.
        pki_path: Optional PKI mount granting certificate issuance
    """
    resource_creds_path: str
    pki_path: Optional[str] = None

    def render_rules(self, namespace: str, resources) -> dict[str, list[str]]:
        """
        Render the path -> capabilities rules for a set of resources.

        Args:
            namespace: Namespace the stack runs in
            resources: Resource names the stack may read

        Returns:
            Mapping of secret path to granted capabilities, sorted by path
        """
        rules: dict[str, list[str]] = {}
        for resource in sorted(set(resources)):
            path = self.resource_creds_path.format(namespace=namespace, resource=resource)
            rules[path] = ["read"]
        if self.pki_path:
            rules[f"{self.pki_path}/issue/{namespace}"] = ["create", "update"]
        return dict(sorted(rules.items()))

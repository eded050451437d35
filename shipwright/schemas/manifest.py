"""
Manifest-level schemas: what gets deployed, and how.

UnitDef describes a deployable unit at a specific version. Plan describes the
resources and runtime behaviour applied when launching it. Both are frozen:
once a Deployment references them they never change.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .policy import TrafficShift


@dataclass(frozen=True, order=True)
class FeatureVersion:
    """Major/minor version pair used to name a service across patch releases."""
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True, order=True)
class Version:
    """A semantic version of a unit."""
    major: int
    minor: int
    patch: int

    def to_feature_version(self) -> FeatureVersion:
        return FeatureVersion(self.major, self.minor)

    @classmethod
    def parse(cls, value: str) -> "Version":
        """
        Parse a dotted version string.

        Args:
            value: A string such as "1.2.3"

        Returns:
            The parsed Version

        Raises:
            ValueError: If the string is not three dot-separated integers
        """
        parts = value.strip().split(".")
        if len(parts) != 3:
            raise ValueError(f"Invalid version '{value}': expected major.minor.patch")
        try:
            major, minor, patch = (int(p) for p in parts)
        except ValueError:
            raise ValueError(f"Invalid version '{value}': components must be integers")
        return cls(major, minor, patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class Port:
    """A named port exposed by a unit."""
    name: str
    number: int
    protocol: str = "http"


@dataclass(frozen=True)
class AlertRule:
    """A single alerting rule shipped with a unit."""
    alert: str
    expression: str


@dataclass(frozen=True)
class AlertOptOut:
    """Exclusion of a named alert, attached to a plan at deploy time."""
    alert: str


@dataclass(frozen=True)
class UnitDef:
    """
    A deployable unit at a specific version.

    Attributes:
        name: Unit name, used as the service type in discovery
        version: Immutable version of this unit
        deployable: Image reference the registry extracts (e.g. "acme/api:1.2.3")
        kind: Unit kind ("service" or "job")
        description: Free-form description
        ports: Ports exposed by the unit; units with ports get discovery and traffic shifting
        resources: Names of secret resources the unit may read
        alerting: Alert rules published alongside the deployment
    """
    name: str
    version: Version
    deployable: str
    kind: str = "service"
    description: str = ""
    ports: tuple[Port, ...] = ()
    resources: tuple[str, ...] = ()
    alerting: tuple[AlertRule, ...] = ()

    @property
    def exposes_ports(self) -> bool:
        return len(self.ports) > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "name": self.name,
            "version": str(self.version),
            "deployable": self.deployable,
            "kind": self.kind,
            "description": self.description,
            "ports": [
                {"name": p.name, "number": p.number, "protocol": p.protocol}
                for p in self.ports
            ],
            "resources": list(self.resources),
            "alerting": [
                {"alert": r.alert, "expression": r.expression} for r in self.alerting
            ],
        }


@dataclass(frozen=True)
class Plan:
    """
    Resource and runtime plan applied when launching a unit.

    A plan with a schedule describes a periodic unit; those are considered
    ready as soon as the scheduler accepts them.
    """
    name: str
    cpu: float = 0.5
    memory: int = 512
    instances: int = 1
    schedule: Optional[str] = None
    traffic_shift: Optional[TrafficShift] = None
    alert_opt_outs: tuple[AlertOptOut, ...] = field(default_factory=tuple)

    @property
    def is_periodic(self) -> bool:
        return self.schedule is not None

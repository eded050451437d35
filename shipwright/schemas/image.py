"""
Image schemas and the log records returned by registry operations.

Pull and push return an exit code together with an ordered list of log
records. Error records (PullError, PushError) act as markers: a registry that
exits 0 but emitted an error record has still failed.
"""

from dataclasses import dataclass, replace
from typing import ClassVar, Optional, Union

# Registry URI, e.g. "registry.example.com/team"
RegistryURI = str


@dataclass(frozen=True)
class Image:
    """
    A registry image reference.

    Attributes:
        name: Repository name (e.g. "acme/api")
        tag: Tag, if any
        registry: Registry host/prefix, None for the default registry
        digest: Content digest, if known
    """
    name: str
    tag: Optional[str] = None
    registry: Optional[RegistryURI] = None
    digest: Optional[str] = None

    def for_registry(self, registry: RegistryURI) -> "Image":
        """Return the same image addressed at another registry."""
        return replace(self, registry=registry.rstrip("/"))

    @classmethod
    def parse(cls, ref: str) -> "Image":
        """
        Parse an image reference such as "registry.local:5000/acme/api:1.2.3".

        A leading path component containing a dot or a colon, or equal to
        "localhost", is treated as the registry.
        """
        digest = None
        if "@" in ref:
            ref, digest = ref.split("@", 1)

        registry = None
        first, sep, rest = ref.partition("/")
        if sep and ("." in first or ":" in first or first == "localhost"):
            registry = first
            ref = rest

        tag = None
        name, colon, maybe_tag = ref.rpartition(":")
        if colon and "/" not in maybe_tag:
            tag = maybe_tag
        else:
            name = ref

        if not name:
            raise ValueError(f"Invalid image reference: '{ref}'")
        return cls(name=name, tag=tag, registry=registry, digest=digest)

    def __str__(self) -> str:
        out = self.name
        if self.registry:
            out = f"{self.registry}/{out}"
        if self.tag:
            out = f"{out}:{self.tag}"
        if self.digest:
            out = f"{out}@{self.digest}"
        return out


@dataclass(frozen=True)
class RegistryOutput:
    """Base class for a single log record emitted by a registry operation."""
    is_error: ClassVar[bool] = False

    def as_string(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class PullStatus(RegistryOutput):
    status: str
    layer: Optional[str] = None

    def as_string(self) -> str:
        if self.layer:
            return f"{self.layer}: {self.status}"
        return self.status


@dataclass(frozen=True)
class PullError(RegistryOutput):
    message: str
    is_error: ClassVar[bool] = True

    def as_string(self) -> str:
        return f"error: {self.message}"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class PushStatus(RegistryOutput):
    status: str

    def as_string(self) -> str:
        return self.status


@dataclass(frozen=True)
class PushProgress(RegistryOutput):
    layer: str
    progress: str

    def as_string(self) -> str:
        return f"{self.layer}: {self.progress}"


@dataclass(frozen=True)
class PushError(RegistryOutput):
    message: str
    is_error: ClassVar[bool] = True

    def as_string(self) -> str:
        return f"error: {self.message}"

    def __str__(self) -> str:
        return self.message


PullOutput = Union[PullStatus, PullError]
PushOutput = Union[PushStatus, PushProgress, PushError]

"""
Smart constructors lifting catalog instructions into programs.

Workflows are written against these functions rather than against the
instruction classes directly:

    from shipwright import syntax as s

    prog = (
        s.status(id, DeploymentStatus.PENDING, "workflow about to start")
        .then(s.launch(image, dc, ns, unit, plan, hash))
        .bind(lambda handle: s.debug(f"scheduler responded with: {handle}"))
    )
"""

from datetime import timedelta
from typing import Any, Callable, Optional, TypeVar, Union

from shipwright.errors import WorkflowFailure
from shipwright.instructions import (
    CreateDeploymentStatus,
    CreatePolicy,
    CreateTrafficShift,
    Debug,
    DeleteDeployment,
    DeletePolicy,
    Extract,
    Fail,
    GetDeployment,
    GetNamespace,
    GetRoutingGraph,
    Info,
    KvDelete,
    KvPut,
    Launch,
    LogToFile,
    Pull,
    Push,
    PureValue,
    Tag,
)
from shipwright.program import Done, Program
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

A = TypeVar("A")
B = TypeVar("B")


# Control

def pure(value: A) -> Program[A]:
    """Lift a plain value through the control family."""
    return Program.lift(PureValue(value))


def fail(error: Union[BaseException, str]) -> Program[Any]:
    """Abort the program. A string reason becomes a WorkflowFailure."""
    if isinstance(error, str):
        error = WorkflowFailure(error)
    return Program.lift(Fail(error))


def when(condition: bool, program: Program[Any]) -> Program[None]:
    """Run `program` only if `condition` holds; the result is discarded."""
    if condition:
        return program.map(lambda _: None)
    return Done(None)


def optional(
    program: Program[Optional[A]],
    f: Callable[[A], Program[Optional[B]]],
) -> Program[Optional[B]]:
    """
    Continue with `f` only when `program` produced a value.

    A None result ends the chain successfully with None. Absence is not a
    failure.
    """
    return program.bind(lambda value: Done(None) if value is None else f(value))


# Scheduler

def launch(
    image: Image,
    dc: Datacenter,
    ns: NamespaceName,
    unit: UnitDef,
    plan: Plan,
    hash: str,
) -> Program[str]:
    return Program.lift(Launch(image, dc, ns, unit, plan, hash))


def delete(dc: Datacenter, deployment: Deployment) -> Program[None]:
    return Program.lift(DeleteDeployment(dc, deployment))


# Logging

def log_to_file(deployment_id: int, message: str) -> Program[None]:
    return Program.lift(LogToFile(deployment_id, message))


def debug(message: str) -> Program[None]:
    return Program.lift(Debug(message))


def info(message: str) -> Program[None]:
    return Program.lift(Info(message))


def status(deployment_id: int, s: DeploymentStatus, message: str) -> Program[None]:
    """
    Record a deployment status.

    Always one log line followed by one durable status record carrying the
    same message. Callers never write either half on its own.
    """
    return log_to_file(deployment_id, message).then(
        Program.lift(CreateDeploymentStatus(deployment_id, s, message))
    )


# Discovery store

def put(key: str, value: str) -> Program[None]:
    return Program.lift(KvPut(key, value))


def delete_key(key: str) -> Program[None]:
    return Program.lift(KvDelete(key))


# Secrets

def create_policy(
    config: PolicyConfig,
    stack: StackName,
    ns: NamespaceName,
    roles,
) -> Program[None]:
    return Program.lift(CreatePolicy(config, stack, ns, frozenset(roles)))


def delete_policy(stack: StackName, ns: NamespaceName) -> Program[None]:
    return Program.lift(DeletePolicy(stack, ns))


# Storage

def get_deployment(deployment_id: int) -> Program[Optional[Deployment]]:
    return Program.lift(GetDeployment(deployment_id))


def get_namespace(datacenter: str, ns: NamespaceName) -> Program[Optional[Namespace]]:
    return Program.lift(GetNamespace(datacenter, ns))


def get_routing_graph(deployment: Deployment) -> Program[RoutingGraph]:
    return Program.lift(GetRoutingGraph(deployment))


def traffic_shift(
    namespace_id: int,
    to: Deployment,
    policy: TrafficShiftPolicy,
    duration: timedelta,
) -> Program[None]:
    return Program.lift(CreateTrafficShift(namespace_id, to, policy, duration))


# Registry

def extract(unit: UnitDef) -> Program[Image]:
    return Program.lift(Extract(unit))


def pull(image: Image) -> Program[tuple]:
    return Program.lift(Pull(image))


def tag(image: Image, registry: RegistryURI) -> Program[tuple]:
    return Program.lift(Tag(image, registry))


def push(image: Image) -> Program[tuple]:
    return Program.lift(Push(image))

from datetime import timedelta

import pytest

from shipwright.backends import InMemoryBackends
from shipwright.handlers import HandlerRegistry
from shipwright.interpreter import Interpreter
from shipwright.schemas import (
    AlertRule,
    Datacenter,
    Deployment,
    Domain,
    LINEAR_POLICY,
    NamespaceName,
    Plan,
    PolicyConfig,
    Port,
    TrafficShift,
    UnitDef,
    Version,
)


@pytest.fixture
def backends():
    return InMemoryBackends()


@pytest.fixture
def handlers(backends):
    return HandlerRegistry.create_in_memory(backends)


@pytest.fixture
def interpreter(handlers):
    return Interpreter(handlers)


@pytest.fixture
def unit() -> UnitDef:
    return UnitDef(
        name="api",
        version=Version(1, 2, 3),
        deployable="acme/api:1.2.3",
        ports=(Port("http", 8080),),
        resources=("db", "cache"),
        alerting=(
            AlertRule("HighLatency", "p99_latency_ms > 500"),
            AlertRule("ErrorRate", "error_ratio > 0.05"),
        ),
    )


@pytest.fixture
def worker_unit() -> UnitDef:
    """A unit without ports, alerts or resources."""
    return UnitDef(
        name="worker",
        version=Version(0, 4, 1),
        deployable="acme/worker:0.4.1",
        kind="job",
    )


@pytest.fixture
def plan() -> Plan:
    return Plan(name="default")


@pytest.fixture
def policy_config() -> PolicyConfig:
    return PolicyConfig("secret/{namespace}/{resource}/creds", pki_path="pki/dc1")


@pytest.fixture
def datacenter(policy_config) -> Datacenter:
    return Datacenter(
        name="dc1",
        domain=Domain("dc1.example.com"),
        docker_registry="registry.dc1.example.com",
        policy=policy_config,
        default_traffic_shift=TrafficShift(LINEAR_POLICY, timedelta(minutes=10)),
    )


@pytest.fixture
def bare_datacenter() -> Datacenter:
    """A datacenter with no policy config and no default traffic shift."""
    return Datacenter(
        name="dc2",
        domain=Domain("dc2.example.com"),
        docker_registry="registry.dc2.example.com",
    )


@pytest.fixture
def ns_name() -> NamespaceName:
    return NamespaceName("dev")


@pytest.fixture
def namespace(backends, datacenter, ns_name):
    return backends.storage.add_namespace(datacenter.name, ns_name.value)


@pytest.fixture
def deployment(backends, unit, plan, namespace) -> Deployment:
    return backends.storage.add_deployment(
        Deployment(
            id=42,
            unit=unit,
            plan=plan.name,
            namespace=namespace,
            hash="abc123",
            strategy="Magnetar",
        )
    )

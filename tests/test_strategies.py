"""Tests for workflow strategies: lookup, deploy and destroy end-to-end."""

from datetime import timedelta

import pytest

from shipwright.alerts import alerts_key
from shipwright.backends import ScriptedImageRegistry
from shipwright.discovery import discovery_key
from shipwright.errors import StrategyNotFoundError, WorkflowFailure
from shipwright.handlers import HandlerRegistry
from shipwright.interpreter import interpret
from shipwright.policies import policy_name
from shipwright.schemas import (
    ATOMIC_POLICY,
    AlertOptOut,
    DeploymentStatus,
    Op,
    Plan,
    PullError,
    TrafficShift,
)
from shipwright.strategies import (
    STRATEGIES,
    Canopus,
    Magnetar,
    from_string,
    get_strategy,
    strategy_names,
)


# =============================================================================
# REGISTRY
# =============================================================================


class TestStrategyLookup:
    def test_magnetar(self):
        strategy = from_string("Magnetar")
        assert isinstance(strategy, Magnetar)
        assert strategy.name == "Magnetar"

    def test_canopus(self):
        assert isinstance(from_string("Canopus"), Canopus)

    def test_nonexistent(self):
        assert from_string("nonexistent") is None

    def test_lookup_is_case_sensitive(self):
        assert from_string("magnetar") is None

    def test_get_strategy_raises(self):
        with pytest.raises(StrategyNotFoundError, match="nonexistent"):
            get_strategy("nonexistent")

    def test_fixed_set(self):
        assert strategy_names() == ["Magnetar", "Canopus"]
        assert len(STRATEGIES) == 2

    def test_repr(self):
        assert repr(from_string("Canopus")) == "Canopus(name=Canopus)"


# =============================================================================
# MAGNETAR
# =============================================================================


class TestMagnetarDeploy:
    def _deploy(self, handlers, deployment, plan, datacenter, ns_name):
        program = Magnetar().deploy(
            deployment.id, deployment.hash, deployment.unit, plan, datacenter, ns_name
        )
        return interpret(program, handlers)

    def test_full_deploy(self, backends, handlers, deployment, plan, datacenter, ns_name, namespace):
        result = self._deploy(handlers, deployment, plan, datacenter, ns_name)

        assert result.success, result.error
        sn = deployment.stack_name
        assert [r.status for r in backends.storage.statuses_for(deployment.id)] == [
            DeploymentStatus.PENDING,
            DeploymentStatus.DEPLOYING,
            DeploymentStatus.WARMING,
        ]
        assert policy_name(sn, ns_name) in backends.secrets.policies
        assert alerts_key(sn) in backends.discovery.data
        assert discovery_key("dc1.example.com", ns_name, sn) in backends.discovery.data
        assert (namespace.id, deployment.id) in backends.storage.traffic_shifts
        assert f"dc1/dev/{sn}" in backends.scheduler.running

    def test_instruction_order(self, handlers, deployment, plan, datacenter, ns_name, namespace):
        result = self._deploy(handlers, deployment, plan, datacenter, ns_name)

        ops = result.ops
        assert ops.index(Op.SECRETS_CREATE_POLICY) < ops.index(Op.SCHEDULER_LAUNCH)
        assert ops.index(Op.REGISTRY_PUSH) < ops.index(Op.SECRETS_CREATE_POLICY)
        assert ops.index(Op.SCHEDULER_LAUNCH) < ops.index(Op.STORAGE_GET_ROUTING_GRAPH)
        assert ops.index(Op.STORAGE_GET_ROUTING_GRAPH) < ops.index(Op.STORAGE_CREATE_TRAFFIC_SHIFT)
        assert ops[-1] == Op.STORAGE_CREATE_DEPLOYMENT_STATUS

    def test_periodic_plan_is_ready(self, backends, handlers, deployment, datacenter, ns_name, namespace):
        plan = Plan(name="nightly", schedule="0 3 * * *")

        self._deploy(handlers, deployment, plan, datacenter, ns_name)

        final = backends.storage.statuses_for(deployment.id)[-1]
        assert final.status == DeploymentStatus.READY
        assert final.message == "======> workflow completed <======"

    def test_plan_traffic_shift_overrides_default(
        self, backends, handlers, deployment, datacenter, ns_name, namespace
    ):
        plan = Plan(name="default", traffic_shift=TrafficShift(ATOMIC_POLICY, timedelta(minutes=1)))

        self._deploy(handlers, deployment, plan, datacenter, ns_name)

        record = backends.storage.traffic_shifts[(namespace.id, deployment.id)]
        assert record.policy == ATOMIC_POLICY
        assert record.duration == timedelta(minutes=1)

    def test_alert_opt_outs(self, backends, handlers, deployment, datacenter, ns_name, namespace):
        plan = Plan(
            name="default",
            alert_opt_outs=(AlertOptOut("HighLatency"), AlertOptOut("ErrorRate")),
        )

        self._deploy(handlers, deployment, plan, datacenter, ns_name)

        assert alerts_key(deployment.stack_name) not in backends.discovery.data

    def test_unit_without_ports_skips_discovery(
        self, backends, handlers, worker_unit, plan, datacenter, ns_name, namespace
    ):
        program = Magnetar().deploy(5, "h1", worker_unit, plan, datacenter, ns_name)

        result = interpret(program, handlers)

        assert result.success
        assert Op.STORAGE_GET_ROUTING_GRAPH not in result.ops
        assert backends.storage.traffic_shifts == {}

    def test_no_policy_config_skips_policy(
        self, backends, handlers, deployment, plan, bare_datacenter, ns_name
    ):
        backends.storage.add_namespace(bare_datacenter.name, ns_name.value)

        result = self._deploy(handlers, deployment, plan, bare_datacenter, ns_name)

        assert result.success
        assert Op.SECRETS_CREATE_POLICY not in result.ops
        assert Op.STORAGE_CREATE_TRAFFIC_SHIFT not in result.ops

    def test_failed_promotion_stops_before_launch(
        self, backends, deployment, plan, datacenter, ns_name, namespace
    ):
        backends.registry = ScriptedImageRegistry(pull_result=(0, [PullError("disk full")]))
        handlers = HandlerRegistry.create_in_memory(backends)

        result = self._deploy(handlers, deployment, plan, datacenter, ns_name)

        assert isinstance(result.error, WorkflowFailure)
        assert "disk full" in str(result.error)
        assert backends.scheduler.running == {}
        assert backends.secrets.policies == {}


class TestMagnetarDestroy:
    def test_destroy_reverses_deploy(
        self, backends, handlers, deployment, plan, datacenter, ns_name, namespace
    ):
        strategy = from_string("Magnetar")
        interpret(
            strategy.deploy(deployment.id, deployment.hash, deployment.unit, plan, datacenter, ns_name),
            handlers,
        )

        result = interpret(strategy.destroy(deployment, datacenter, namespace), handlers)

        assert result.success
        assert backends.scheduler.running == {}
        assert backends.discovery.data == {}
        assert backends.secrets.policies == {}
        final = backends.storage.statuses_for(deployment.id)[-1]
        assert final.status == DeploymentStatus.TERMINATED
        assert final.message == f"decommissioned deployment {deployment.stack_name} in dc1/dev"

    def test_policy_ops_are_paired(
        self, handlers, deployment, plan, bare_datacenter, datacenter, ns_name, namespace
    ):
        strategy = Magnetar()
        for dc in (datacenter, bare_datacenter):
            deploy = interpret(
                strategy.deploy(deployment.id, deployment.hash, deployment.unit, plan, dc, ns_name),
                handlers,
            )
            destroy = interpret(strategy.destroy(deployment, dc, namespace), handlers)

            created = deploy.ops.count(Op.SECRETS_CREATE_POLICY)
            deleted = destroy.ops.count(Op.SECRETS_DELETE_POLICY)
            assert created == deleted == (1 if dc.policy else 0)

    def test_destroy_never_deployed(self, backends, handlers, deployment, datacenter, namespace):
        result = interpret(Magnetar().destroy(deployment, datacenter, namespace), handlers)

        assert result.success
        assert backends.scheduler.deleted == [f"dc1/dev/{deployment.stack_name}"]


# =============================================================================
# CANOPUS
# =============================================================================


class TestCanopus:
    def test_deploy(self, backends, handlers, deployment, plan, datacenter, ns_name, namespace):
        program = Canopus().deploy(
            deployment.id, deployment.hash, deployment.unit, plan, datacenter, ns_name
        )

        result = interpret(program, handlers)

        assert result.success
        assert Op.SECRETS_CREATE_POLICY not in result.ops
        assert Op.DISCOVERY_PUT not in result.ops
        assert [r.status for r in backends.storage.statuses_for(deployment.id)] == [
            DeploymentStatus.PENDING,
            DeploymentStatus.DEPLOYING,
            DeploymentStatus.WARMING,
        ]

    def test_destroy(self, backends, handlers, deployment, datacenter, namespace):
        result = interpret(Canopus().destroy(deployment, datacenter, namespace), handlers)

        assert result.ops == [
            Op.SCHEDULER_DELETE,
            Op.LOGGING_LOG_TO_FILE,
            Op.STORAGE_CREATE_DEPLOYMENT_STATUS,
        ]
        assert backends.storage.statuses_for(deployment.id)[-1].status == DeploymentStatus.TERMINATED


# =============================================================================
# STATUS PAIRING
# =============================================================================


class TestStatusPairing:
    """Every status record is immediately preceded by a log line with the same message."""

    @pytest.mark.parametrize("strategy", STRATEGIES, ids=lambda s: s.name)
    def test_every_status_is_logged(
        self, strategy, backends, handlers, deployment, plan, datacenter, ns_name, namespace
    ):
        deploy = interpret(
            strategy.deploy(deployment.id, deployment.hash, deployment.unit, plan, datacenter, ns_name),
            handlers,
        )
        destroy = interpret(strategy.destroy(deployment, datacenter, namespace), handlers)

        for result in (deploy, destroy):
            ops = result.ops
            for i, op in enumerate(ops):
                if op == Op.STORAGE_CREATE_DEPLOYMENT_STATUS:
                    assert ops[i - 1] == Op.LOGGING_LOG_TO_FILE

        lines = backends.deployment_log.lines_for(deployment.id)
        for record in backends.storage.statuses_for(deployment.id):
            assert record.message in lines

"""Tests for the image promotion pipeline."""

import pytest

from shipwright.backends import ScriptedImageRegistry
from shipwright.errors import WorkflowFailure
from shipwright.handlers import HandlerRegistry
from shipwright.interpreter import interpret
from shipwright.program import Done
from shipwright.promotion import check_registry_output, promote_image
from shipwright.schemas import (
    DeploymentStatus,
    Image,
    Op,
    PullError,
    PullStatus,
    PushError,
    PushProgress,
    PushStatus,
)


# =============================================================================
# check_registry_output
# =============================================================================


class TestCheckRegistryOutput:
    """Exit code 0 and no error markers is the only success."""

    def test_clean_exit_no_logs(self):
        program = check_registry_output("pull", 0, [], PullError)
        assert program == Done(None)

    def test_clean_exit_with_status_lines(self):
        program = check_registry_output("pull", 0, [PullStatus("Pulling fs layer")], PullError)
        assert program == Done(None)

    def test_nonzero_exit_without_markers(self, handlers):
        result = interpret(check_registry_output("pull", 1, [], PullError), handlers)

        assert isinstance(result.error, WorkflowFailure)
        assert "exit code: 1" in str(result.error)
        assert str(result.error) == "pull failed with exit code: 1 and reason: "

    def test_zero_exit_with_error_marker(self, handlers):
        logs = [PullStatus("Pulling"), PullError("disk full")]
        result = interpret(check_registry_output("pull", 0, logs, PullError), handlers)

        assert not result.success
        assert "disk full" in str(result.error)
        assert "exit code: 0" in str(result.error)

    def test_markers_are_comma_joined(self, handlers):
        logs = [PushError("denied"), PushStatus("retrying"), PushError("quota exceeded")]
        result = interpret(check_registry_output("push", 2, logs, PushError), handlers)

        assert str(result.error) == (
            "push failed with exit code: 2 and reason: denied, quota exceeded"
        )

    def test_only_matching_marker_type_counts(self):
        logs = [PushError("not a pull error")]
        assert check_registry_output("pull", 0, logs, PullError) == Done(None)


# =============================================================================
# promote_image
# =============================================================================


class TestPromoteImage:
    """extract -> status -> pull -> log -> check -> tag -> push -> log -> check."""

    REGISTRY = "registry.dc1.example.com"

    def test_success_yields_tagged_image(self, backends, handlers, unit):
        result = interpret(promote_image(7, unit, self.REGISTRY), handlers)

        assert result.success
        assert result.value == Image("acme/api", "1.2.3", registry=self.REGISTRY)
        assert [c[0] for c in backends.registry.calls] == ["extract", "pull", "tag", "push"]
        assert backends.registry.calls[-1] == ("push", f"{self.REGISTRY}/acme/api:1.2.3")

    def test_records_deploying_status(self, backends, handlers, unit):
        interpret(promote_image(7, unit, self.REGISTRY), handlers)

        statuses = backends.storage.statuses_for(7)
        assert [r.status for r in statuses] == [DeploymentStatus.DEPLOYING]
        assert statuses[0].message == (
            f"replicating acme/api:1.2.3 to remote registry {self.REGISTRY}"
        )

    def test_logs_every_registry_line(self, backends, unit):
        backends.registry = ScriptedImageRegistry(
            pull_result=(0, [PullStatus("Pulling fs layer", layer="a1"), PullStatus("Done")]),
            push_result=(0, [PushProgress("a1", "3/5 MB"), PushStatus("Pushed")]),
        )
        handlers = HandlerRegistry.create_in_memory(backends)

        interpret(promote_image(7, unit, self.REGISTRY), handlers)

        assert backends.deployment_log.lines_for(7) == [
            f"replicating acme/api:1.2.3 to remote registry {self.REGISTRY}",
            "a1: Pulling fs layer",
            "Done",
            "a1: 3/5 MB",
            "Pushed",
        ]

    def test_empty_pull_output_succeeds(self, backends, unit):
        backends.registry = ScriptedImageRegistry(pull_result=(0, []))
        result = interpret(
            promote_image(7, unit, self.REGISTRY),
            HandlerRegistry.create_in_memory(backends),
        )

        assert result.success

    def test_pull_exit_code_fails_before_tag(self, backends, unit):
        backends.registry = ScriptedImageRegistry(pull_result=(1, []))
        result = interpret(
            promote_image(7, unit, self.REGISTRY),
            HandlerRegistry.create_in_memory(backends),
        )

        assert "exit code: 1" in str(result.error)
        assert Op.REGISTRY_TAG not in result.ops
        assert [c[0] for c in backends.registry.calls] == ["extract", "pull"]

    def test_tag_exit_code_is_not_checked(self, backends, unit):
        backends.registry = ScriptedImageRegistry(tag_exit_code=1)
        result = interpret(
            promote_image(7, unit, self.REGISTRY),
            HandlerRegistry.create_in_memory(backends),
        )

        assert result.success
        assert [c[0] for c in backends.registry.calls] == ["extract", "pull", "tag", "push"]

    def test_pull_error_marker_fails(self, backends, unit):
        backends.registry = ScriptedImageRegistry(pull_result=(0, [PullError("disk full")]))
        result = interpret(
            promote_image(7, unit, self.REGISTRY),
            HandlerRegistry.create_in_memory(backends),
        )

        assert not result.success
        assert "disk full" in str(result.error)
        assert backends.deployment_log.lines_for(7)[-1] == "error: disk full"

    def test_push_error_marker_fails(self, backends, unit):
        backends.registry = ScriptedImageRegistry(
            push_result=(0, [PushProgress("a1", "1/5 MB"), PushError("unauthorized")])
        )
        result = interpret(
            promote_image(7, unit, self.REGISTRY),
            HandlerRegistry.create_in_memory(backends),
        )

        assert str(result.error) == "push failed with exit code: 0 and reason: unauthorized"

    @pytest.mark.parametrize("registry", ["registry.dc1.example.com", "registry.dc1.example.com/"])
    def test_registry_trailing_slash_ignored(self, handlers, unit, registry):
        result = interpret(promote_image(7, unit, registry), handlers)
        assert str(result.value) == "registry.dc1.example.com/acme/api:1.2.3"

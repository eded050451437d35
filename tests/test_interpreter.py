"""Tests for the reference interpreter.

Tests cover:
- Native control instructions (pure, fail)
- Dispatch through the HandlerRegistry
- Outcome tracking
- Instruction and program timeouts on the failure channel
"""

import threading
import time

import pytest

from shipwright import syntax as s
from shipwright.backends import InMemoryDeploymentLog
from shipwright.config import ShipwrightConfig
from shipwright.errors import InstructionTimeoutError, ProgramTimeoutError, WorkflowFailure
from shipwright.handlers import HandlerRegistry, LoggingHandler
from shipwright.interpreter import (
    ExecutionResult,
    InstructionStatus,
    Interpreter,
    interpret,
)
from shipwright.program import Done
from shipwright.schemas import Op, OpFamily


class SlowDeploymentLog(InMemoryDeploymentLog):
    """Deployment log that blocks on write until released."""

    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay
        self.release = threading.Event()

    def write(self, deployment_id: int, message: str) -> None:
        self.release.wait(self.delay)
        super().write(deployment_id, message)


def _slow_handlers(delay: float):
    log = SlowDeploymentLog(delay)
    registry = HandlerRegistry.create_in_memory()
    registry.register(OpFamily.LOGGING, LoggingHandler(log))
    return registry, log


# =============================================================================
# BASIC EXECUTION
# =============================================================================


class TestInterpreter:
    def test_done_program(self):
        result = Interpreter().run(Done("value"))

        assert result.success
        assert result.value == "value"
        assert result.outcomes == []

    def test_default_handlers_are_noop(self):
        result = Interpreter().run(s.get_deployment(1))

        assert result.success
        assert result.value is None
        assert set(Interpreter().handlers.list_families()) == set(OpFamily) - {OpFamily.CONTROL}

    def test_pure_yields_value(self, interpreter):
        assert interpreter.run(s.pure(41).map(lambda x: x + 1)).value == 42

    def test_fail_yields_error(self, interpreter):
        result = interpreter.run(s.fail("nope"))

        assert not result.success
        assert isinstance(result.error, WorkflowFailure)
        assert result.outcomes == []

    def test_dispatch_reaches_backend(self, backends, interpreter):
        interpreter.run(s.put("k", "v"))
        assert backends.discovery.data == {"k": "v"}

    def test_unwrap(self, interpreter):
        assert interpreter.run(s.pure(3)).unwrap() == 3
        with pytest.raises(WorkflowFailure, match="nope"):
            interpreter.run(s.fail("nope")).unwrap()

    def test_interpreter_is_reusable(self, backends, interpreter):
        interpreter.run(s.log_to_file(1, "a"))
        interpreter.run(s.log_to_file(1, "b"))
        assert backends.deployment_log.lines_for(1) == ["a", "b"]

    def test_exception_in_continuation_fails_program(self, interpreter):
        result = interpreter.run(s.pure(1).map(lambda x: x / 0))
        assert isinstance(result.error, ZeroDivisionError)

    def test_from_config(self, handlers):
        config = ShipwrightConfig(instruction_timeout_seconds=5, program_timeout_seconds=60)

        interpreter = Interpreter.from_config(config, handlers)

        assert interpreter.handlers is handlers
        assert interpreter.run(s.pure(1)).value == 1


# =============================================================================
# OUTCOMES
# =============================================================================


class TestOutcomes:
    def test_outcome_per_instruction(self, interpreter):
        program = s.debug("a").then(s.put("k", "v")).then(s.pure("done"))

        result = interpreter.run(program)

        assert [o.index for o in result.outcomes] == [0, 1, 2]
        assert result.ops == [Op.LOGGING_DEBUG, Op.DISCOVERY_PUT, Op.CONTROL_PURE]
        assert all(o.status == InstructionStatus.COMPLETED for o in result.outcomes)
        assert result.failed_instruction is None

    def test_failed_outcome_has_error(self, backends, interpreter):
        def refuse(*args):
            raise PermissionError("kv store is read-only")

        backends.discovery.delete = refuse

        result = interpreter.run(s.debug("a").then(s.delete_key("k")))

        failed = result.failed_instruction
        assert failed.index == 1
        assert failed.op == Op.DISCOVERY_DELETE
        assert failed.error == {
            "type": "PermissionError",
            "message": "kv store is read-only",
        }
        assert isinstance(result.error, PermissionError)

    def test_outcome_to_dict(self, interpreter):
        outcome = interpreter.run(s.debug("a")).outcomes[0]

        data = outcome.to_dict()

        assert data["op"] == "logging.debug"
        assert data["status"] == "completed"
        assert data["instruction"] == {"op": "logging.debug", "message": "a"}
        assert "error" not in data
        assert outcome.duration_ms >= 0


# =============================================================================
# TIMEOUTS
# =============================================================================


class TestTimeouts:
    def test_instruction_timeout(self):
        handlers, log = _slow_handlers(delay=5)
        interpreter = Interpreter(handlers, instruction_timeout=0.05)

        result = interpreter.run(s.log_to_file(1, "slow").then(s.debug("never")))
        log.release.set()

        assert not result.success
        assert isinstance(result.error, InstructionTimeoutError)
        assert "logging.log_to_file" in str(result.error)
        assert Op.LOGGING_DEBUG not in result.ops
        assert result.failed_instruction.error["type"] == "InstructionTimeoutError"

    def test_fast_instruction_within_timeout(self, handlers):
        result = Interpreter(handlers, instruction_timeout=5).run(s.put("k", "v"))
        assert result.success

    def test_program_timeout(self):
        handlers, log = _slow_handlers(delay=0.05)
        interpreter = Interpreter(handlers, program_timeout=0.12)
        program = s.log_to_file(1, "a")
        for i in range(20):
            program = program.then(s.log_to_file(1, str(i)))

        result = interpreter.run(program)
        log.release.set()

        assert isinstance(result.error, ProgramTimeoutError)
        assert len(log.lines_for(1)) < 21

    def test_program_timeout_already_elapsed(self, handlers):
        interpreter = Interpreter(handlers, program_timeout=0.01)
        program = s.pure(1).map(lambda x: time.sleep(0.05) or x).then(s.debug("late"))

        result = interpreter.run(program)

        assert isinstance(result.error, ProgramTimeoutError)

    def test_program_timeout_with_only_pure_instructions(self):
        interpreter = Interpreter(HandlerRegistry.create_noop(), program_timeout=0.05)
        program = s.pure(1).map(lambda x: time.sleep(0.2) or x).then(s.pure(2))

        result = interpreter.run(program)

        assert not result.success
        assert isinstance(result.error, ProgramTimeoutError)

    def test_program_timeout_in_final_continuation(self):
        interpreter = Interpreter(HandlerRegistry.create_noop(), program_timeout=0.05)
        program = s.pure(1).map(lambda x: time.sleep(0.2) or x)

        result = interpreter.run(program)

        assert isinstance(result.error, ProgramTimeoutError)
        assert "before completing" in str(result.error)

    def test_interpret_passes_timeouts(self):
        handlers, log = _slow_handlers(delay=5)

        result = interpret(s.log_to_file(1, "slow"), handlers, instruction_timeout=0.05)
        log.release.set()

        assert isinstance(result, ExecutionResult)
        assert isinstance(result.error, InstructionTimeoutError)

"""
Interpreter - walks a Program and executes its instructions.

The Interpreter implements:
- Native handling of control instructions (pure, fail)
- Handler dispatch for every other family via HandlerRegistry
- Per-instruction and per-program timeouts
- Outcome tracking (one InstructionOutcome per executed instruction)

Execution flow:
1. Done(value): stop, the run succeeded with value
2. Failed(error): stop, the run failed with error
3. Suspend(instruction, continuations):
   a. pure: the result is the carried value
   b. fail: the program becomes Failed(carried error)
   c. anything else: dispatch to the family handler, under timeout
   d. feed the result to resume() and loop

Backend exceptions are never caught and retried here; they end the run and
are reported unchanged on ExecutionResult.error. Timeouts surface on the same
channel as InstructionTimeoutError / ProgramTimeoutError.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, TYPE_CHECKING

from shipwright.errors import InstructionTimeoutError, ProgramTimeoutError
from shipwright.instructions import Fail, Instruction, PureValue
from shipwright.program import Done, Failed, Program, Suspend
from shipwright.schemas import Op
from shipwright.utils import format_duration

if TYPE_CHECKING:
    from shipwright.config import ShipwrightConfig
    from shipwright.handlers import HandlerRegistry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class InstructionStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class InstructionOutcome:
    """
    Record of one executed instruction.

    Attributes:
        index: Position of the instruction in the run (0-based)
        op: The instruction's op
        status: completed or failed
        started_at: When execution started
        completed_at: When execution ended
        error: {"type": ..., "message": ...} when status is failed
        instruction: The instruction as rendered by Instruction.describe()
    """
    index: int
    op: Op
    status: InstructionStatus
    started_at: datetime
    completed_at: datetime
    error: Optional[dict[str, str]] = None
    instruction: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        return (self.completed_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "index": self.index,
            "op": self.op.value,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
        }
        if self.instruction:
            result["instruction"] = self.instruction
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class ExecutionResult:
    """Result of interpreting a program."""
    success: bool
    value: Any = None
    error: Optional[BaseException] = None
    outcomes: list[InstructionOutcome] = field(default_factory=list)

    @property
    def failed_instruction(self) -> Optional[InstructionOutcome]:
        for outcome in self.outcomes:
            if outcome.status == InstructionStatus.FAILED:
                return outcome
        return None

    @property
    def ops(self) -> list[Op]:
        return [o.op for o in self.outcomes]

    def unwrap(self) -> Any:
        """
        Return the program's value, or raise its error.

        Raises:
            BaseException: The error the program failed with
        """
        if self.error is not None:
            raise self.error
        return self.value


def _error_info(error: BaseException) -> dict[str, str]:
    return {"type": type(error).__name__, "message": str(error)}


class Interpreter:
    """
    Reference interpreter for shipwright programs.

    Usage:
        from shipwright.handlers import HandlerRegistry

        handlers = HandlerRegistry.create_in_memory(backends)
        interpreter = Interpreter(handlers, instruction_timeout=30)
        result = interpreter.run(strategy.deploy(...))

    One Interpreter may run many programs, also from several threads; each
    run keeps its own state.
    """

    def __init__(
        self,
        handlers: Optional["HandlerRegistry"] = None,
        instruction_timeout: Optional[float] = None,
        program_timeout: Optional[float] = None,
    ):
        """
        Initialize the interpreter.

        Args:
            handlers: HandlerRegistry for instruction dispatch (default: all no-op)
            instruction_timeout: Seconds a single instruction may take (None: unbounded)
            program_timeout: Seconds a whole run may take (None: unbounded)
        """
        if handlers is None:
            from shipwright.handlers import HandlerRegistry
            handlers = HandlerRegistry.create_noop()
        self._handlers = handlers
        self._instruction_timeout = instruction_timeout
        self._program_timeout = program_timeout

    @classmethod
    def from_config(
        cls,
        config: "ShipwrightConfig",
        handlers: Optional["HandlerRegistry"] = None,
    ) -> "Interpreter":
        return cls(
            handlers=handlers,
            instruction_timeout=config.instruction_timeout_seconds,
            program_timeout=config.program_timeout_seconds,
        )

    @property
    def handlers(self) -> "HandlerRegistry":
        return self._handlers

    def run(self, program: Program[Any]) -> ExecutionResult:
        """
        Interpret a program until it finishes.

        Args:
            program: The program to run

        Returns:
            ExecutionResult with the value or the error, and per-instruction outcomes
        """
        outcomes: list[InstructionOutcome] = []
        started = time.monotonic()
        deadline = None
        if self._program_timeout is not None:
            deadline = time.monotonic() + self._program_timeout

        pool: Optional[ThreadPoolExecutor] = None
        if self._instruction_timeout is not None or deadline is not None:
            pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="shipwright")

        try:
            while True:
                if isinstance(program, Done) and self._past(deadline):
                    program = Failed(ProgramTimeoutError(
                        f"Program exceeded {self._program_timeout}s before completing"
                    ))
                    continue

                if isinstance(program, Done):
                    logger.info(
                        f"Program completed: {len(outcomes)} instructions "
                        f"in {format_duration(time.monotonic() - started)}"
                    )
                    return ExecutionResult(success=True, value=program.value, outcomes=outcomes)

                if isinstance(program, Failed):
                    logger.error(f"Program failed: {program.error}")
                    return ExecutionResult(success=False, error=program.error, outcomes=outcomes)

                if not isinstance(program, Suspend):
                    raise TypeError(f"Not a program: {program!r}")

                instruction = program.instruction
                if isinstance(instruction, Fail):
                    program = Failed(instruction.error)
                    continue

                started_at = _utcnow()
                try:
                    result = self._execute(instruction, pool, deadline)
                except Exception as e:
                    outcomes.append(InstructionOutcome(
                        index=len(outcomes),
                        op=instruction.op,
                        status=InstructionStatus.FAILED,
                        started_at=started_at,
                        completed_at=_utcnow(),
                        error=_error_info(e),
                        instruction=instruction.describe(),
                    ))
                    program = Failed(e)
                    continue

                outcomes.append(InstructionOutcome(
                    index=len(outcomes),
                    op=instruction.op,
                    status=InstructionStatus.COMPLETED,
                    started_at=started_at,
                    completed_at=_utcnow(),
                    instruction=instruction.describe(),
                ))
                try:
                    program = program.resume(result)
                except Exception as e:
                    program = Failed(e)
        finally:
            if pool is not None:
                pool.shutdown(wait=False)

    @staticmethod
    def _past(deadline: Optional[float]) -> bool:
        return deadline is not None and time.monotonic() >= deadline

    def _execute(
        self,
        instruction: Instruction,
        pool: Optional[ThreadPoolExecutor],
        deadline: Optional[float],
    ) -> Any:
        if self._past(deadline):
            raise ProgramTimeoutError(
                f"Program exceeded {self._program_timeout}s before {instruction.op.value}"
            )

        if isinstance(instruction, PureValue):
            return instruction.value

        logger.debug(
            f"Executing {instruction.op.value}: {instruction.describe()}",
            extra={"op": instruction.op.value},
        )

        if pool is None:
            return self._handlers.dispatch(instruction)

        timeout = self._instruction_timeout
        program_bound = False
        if deadline is not None:
            remaining = max(deadline - time.monotonic(), 0.0)
            if timeout is None or remaining < timeout:
                timeout = remaining
                program_bound = True

        future = pool.submit(self._handlers.dispatch, instruction)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            if program_bound:
                raise ProgramTimeoutError(
                    f"Program exceeded {self._program_timeout}s during {instruction.op.value}"
                ) from None
            raise InstructionTimeoutError(
                f"{instruction.op.value} did not complete within {self._instruction_timeout}s"
            ) from None


def interpret(
    program: Program[Any],
    handlers: Optional["HandlerRegistry"] = None,
    instruction_timeout: Optional[float] = None,
    program_timeout: Optional[float] = None,
) -> ExecutionResult:
    """
    Run a program once with a fresh Interpreter.

    Args:
        program: The program to run
        handlers: HandlerRegistry for instruction dispatch (default: all no-op)
        instruction_timeout: Seconds a single instruction may take
        program_timeout: Seconds a whole run may take

    Returns:
        ExecutionResult
    """
    interpreter = Interpreter(
        handlers=handlers,
        instruction_timeout=instruction_timeout,
        program_timeout=program_timeout,
    )
    return interpreter.run(program)

"""
Error classes for shipwright.

Failure channel contract:
- A program fails when an instruction fails (backend exception, timeout) or
  when the program itself aborts through the `fail` control instruction.
- Nothing in program construction catches or retries. Failures reach the
  interpreter unchanged and are reported on ExecutionResult.error.
- Absence ("namespace not found, nothing to do") is a None result, never an
  exception.
"""


class ShipwrightError(Exception):
    """Base exception for shipwright."""
    pass


class WorkflowFailure(ShipwrightError):
    """
    Explicit failure raised by a program through the `fail` control instruction.

    Examples:
    - Registry pull/push reported error markers
    - A deployment required by a sub-program does not exist

    The message is user-visible and is recorded as-is.
    """
    pass


class InstructionTimeoutError(ShipwrightError):
    """
    A single instruction did not complete within the configured timeout.

    Surfaces on the same failure channel as a backend error.
    """
    pass


class ProgramTimeoutError(ShipwrightError):
    """The whole program exceeded its deadline before reaching a result."""
    pass


class StatusRegressionError(ShipwrightError):
    """A deployment status would move backwards in the lifecycle."""
    pass


class UnsupportedInstructionError(ShipwrightError):
    """A handler received an instruction outside of its family."""
    pass


class StrategyNotFoundError(ShipwrightError):
    """No workflow strategy is registered under the requested name."""
    pass


class ConfigError(ShipwrightError):
    """Configuration validation error."""
    pass

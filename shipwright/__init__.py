"""
shipwright - deployment workflows as inspectable programs.

Workflows are built as Program values from a closed catalog of instructions
and run by an Interpreter against pluggable backends.
"""

__version__ = "0.1.0"

from shipwright.errors import (
    ShipwrightError,
    WorkflowFailure,
    InstructionTimeoutError,
    ProgramTimeoutError,
    StatusRegressionError,
    UnsupportedInstructionError,
    StrategyNotFoundError,
    ConfigError,
)
from shipwright.program import Program, Done, Suspend, Failed, sequence, traverse
from shipwright.strategies import Strategy, Magnetar, Canopus, from_string, get_strategy
from shipwright.handlers import HandlerRegistry
from shipwright.interpreter import Interpreter, ExecutionResult, interpret

__all__ = [
    "__version__",
    "ShipwrightError",
    "WorkflowFailure",
    "InstructionTimeoutError",
    "ProgramTimeoutError",
    "StatusRegressionError",
    "UnsupportedInstructionError",
    "StrategyNotFoundError",
    "ConfigError",
    "Program",
    "Done",
    "Suspend",
    "Failed",
    "sequence",
    "traverse",
    "Strategy",
    "Magnetar",
    "Canopus",
    "from_string",
    "get_strategy",
    "HandlerRegistry",
    "Interpreter",
    "ExecutionResult",
    "interpret",
]

"""
Workflow strategies and their registry.

The set of strategies is fixed: there is no runtime registration.

Usage:
    from shipwright.strategies import from_string

    strategy = from_string("Magnetar")
    if strategy is None:
        ...  # strategy not found
    program = strategy.deploy(id, hash, unit, plan, dc, ns)
"""

from typing import Optional

from shipwright.errors import StrategyNotFoundError
from shipwright.strategies.base import Strategy
from shipwright.strategies.canopus import Canopus
from shipwright.strategies.magnetar import Magnetar

STRATEGIES: tuple[Strategy, ...] = (Magnetar(), Canopus())


def from_string(name: str) -> Optional[Strategy]:
    """
    Look up a strategy by name.

    Args:
        name: Strategy name, e.g. "Magnetar"

    Returns:
        The strategy, or None if no strategy has that name
    """
    for strategy in STRATEGIES:
        if strategy.name == name:
            return strategy
    return None


def get_strategy(name: str) -> Strategy:
    """
    Look up a strategy by name, raising when it is unknown.

    Raises:
        StrategyNotFoundError: If no strategy has that name
    """
    strategy = from_string(name)
    if strategy is None:
        raise StrategyNotFoundError(
            f"Unknown strategy: {name}. Available: {strategy_names()}"
        )
    return strategy


def strategy_names() -> list[str]:
    return [s.name for s in STRATEGIES]


__all__ = [
    "Strategy",
    "Magnetar",
    "Canopus",
    "STRATEGIES",
    "from_string",
    "get_strategy",
    "strategy_names",
]

"""
Base strategy protocol.

A strategy is a named, pluggable implementation of the deploy/destroy
lifecycle. It only decides the *shape* of a program: which instructions run
and in what order. It holds no runtime state.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from shipwright.program import Program
from shipwright.schemas import (
    Datacenter,
    Deployment,
    Namespace,
    NamespaceName,
    Plan,
    UnitDef,
)

O = TypeVar("O")


class Strategy(ABC, Generic[O]):
    """
    Abstract base class for workflow strategies.

    The output type O lets a strategy report bookkeeping beyond bare success.
    """

    name: str = ""

    @abstractmethod
    def deploy(
        self,
        id: int,
        hash: str,
        unit: UnitDef,
        plan: Plan,
        dc: Datacenter,
        ns: NamespaceName,
    ) -> Program[O]:
        """
        Build the program that brings a deployment up.

        Args:
            id: Storage id of the deployment being created
            hash: Deployment hash
            unit: Versioned unit to deploy
            plan: Plan to launch it with
            dc: Target datacenter
            ns: Target namespace

        Returns:
            The deploy program
        """
        pass

    @abstractmethod
    def destroy(self, deployment: Deployment, dc: Datacenter, ns: Namespace) -> Program[O]:
        """
        Build the program that tears a deployment down.

        Args:
            deployment: The deployment to remove
            dc: Datacenter it runs in
            ns: Namespace it runs in

        Returns:
            The destroy program
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name})"

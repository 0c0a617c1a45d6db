# src/qcircuitsim/gates/base.py
"""
Gate base classes.

A gate is an immutable operation descriptor. The application engine never
looks inside one: it only hands ``(gate, sites)`` to :meth:`Gate.apply_to`.

Classes
-------
Gate
    Abstract operation acting on ``support`` consecutive element sites.
UnitaryGate
    Gate given by a ``d**k x d**k`` matrix, built per application.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Tuple

import numpy as np

if TYPE_CHECKING:
    from qcircuitsim.core.rng import RNGRegistry
    from qcircuitsim.state.state import SimulationState


class Gate(ABC):
    """Abstract gate.

    Attributes
    ----------
    support : int
        Number of sites one application acts on.
    label : str
        Short name used by the circuit renderer.
    stim_name : Optional[str]
        Stim instruction name, or None if the gate cannot be exported.
    """
    support: ClassVar[int] = 1
    label: ClassVar[str] = "?"
    stim_name: ClassVar[Optional[str]] = None

    @abstractmethod
    def apply_to(self, state: "SimulationState", sites: Tuple[int, ...]) -> Any:
        """Act on ``state`` at ``sites`` (exactly ``support`` indices).

        May return an outcome (measurements do); unitaries return None.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash(type(self))


class UnitaryGate(Gate):
    """Gate defined by a unitary matrix on its support.

    Rows and columns are ordered with the first site as the most
    significant digit.
    """

    @abstractmethod
    def matrix(self, state: "SimulationState") -> np.ndarray:
        """Matrix of shape ``(d**support, d**support)`` for this application."""

    def apply_to(self, state: "SimulationState", sites: Tuple[int, ...]) -> None:
        state.apply_operator(self.matrix(state), sites)


def require_qubits(gate: Gate, state: "SimulationState") -> None:
    if state.local_dim != 2:
        raise ValueError(
            f"{type(gate).__name__} acts on qubits, state has local_dim={state.local_dim}"
        )


def require_registry(gate: Gate, state: "SimulationState") -> "RNGRegistry":
    if state.rng is None:
        raise ValueError(
            f"{type(gate).__name__} needs random draws but the state has no RNGRegistry"
        )
    return state.rng

# src/qcircuitsim/gates/single_qubit.py
"""Single-qubit Pauli gates and projections."""
from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

import numpy as np

from qcircuitsim.gates.base import Gate, UnitaryGate, require_qubits

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState

_X = np.array([[0, 1], [1, 0]], dtype=complex)
_Y = np.array([[0, -1j], [1j, 0]], dtype=complex)
_Z = np.array([[1, 0], [0, -1]], dtype=complex)


class PauliX(UnitaryGate):
    label = "X"
    stim_name = "X"

    def matrix(self, state: "SimulationState") -> np.ndarray:
        require_qubits(self, state)
        return _X


class PauliY(UnitaryGate):
    label = "Y"
    stim_name = "Y"

    def matrix(self, state: "SimulationState") -> np.ndarray:
        require_qubits(self, state)
        return _Y


class PauliZ(UnitaryGate):
    label = "Z"
    stim_name = "Z"

    def matrix(self, state: "SimulationState") -> np.ndarray:
        require_qubits(self, state)
        return _Z


class Identity(UnitaryGate):
    """Identity on one site of any local dimension."""
    label = "I"
    stim_name = "I"

    def matrix(self, state: "SimulationState") -> np.ndarray:
        return np.eye(state.local_dim, dtype=complex)


class Projection(Gate):
    """Project one site onto level ``outcome`` and renormalise.

    Raises ``ValueError`` from the state if the projected norm is zero.
    """

    def __init__(self, outcome: int):
        outcome = int(outcome)
        if outcome < 0:
            raise ValueError(f"outcome must be non-negative, got {outcome}")
        self.outcome = outcome

    @property
    def label(self) -> str:  # type: ignore[override]
        return f"P{self.outcome}"

    def apply_to(self, state: "SimulationState", sites: Tuple[int, ...]) -> int:
        state.project({sites[0]: self.outcome})
        return self.outcome

    def __repr__(self) -> str:
        return f"Projection({self.outcome})"

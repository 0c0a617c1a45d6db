# src/qcircuitsim/observables/entanglement.py
"""
Bipartite entanglement entropy.

The chain is cut into sites ``[0, cut)`` and ``[cut, L)``. With Schmidt
probabilities ``p_k`` (squared singular values of the reshaped state,
normalised, those below ``threshold`` dropped):

- order 0: Hartley entropy ``log(rank)``
- order 1: von Neumann entropy ``-sum p log p``
- order n: Renyi entropy ``log(sum p**n) / (1 - n)``
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

from qcircuitsim.observables.base import Observable

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState


def schmidt_probabilities(state: "SimulationState", cut: int) -> np.ndarray:
    """Normalised Schmidt probabilities across the bond before site ``cut``."""
    if not 1 <= cut < state.L:
        raise ValueError(f"cut must satisfy 1 <= cut < L={state.L}, got {cut}")
    matrix = state.psi.reshape(state.local_dim ** cut, -1)
    singular = np.linalg.svd(matrix, compute_uv=False)
    p = singular ** 2
    return p / p.sum()


class EntanglementEntropy(Observable):
    """Entanglement entropy of order ``order`` across ``cut``."""

    def __init__(self, cut: int, order: int = 1, threshold: float = 1e-16):
        if int(cut) < 1:
            raise ValueError(f"cut must be >= 1, got {cut}")
        if int(order) < 0:
            raise ValueError(f"order must be >= 0, got {order}")
        if threshold <= 0:
            raise ValueError(f"threshold must be positive, got {threshold}")
        self.cut = int(cut)
        self.order = int(order)
        self.threshold = float(threshold)

    def compute(self, state: "SimulationState", i1: Optional[int] = None) -> float:
        p = schmidt_probabilities(state, self.cut)
        p = p[p > self.threshold]
        if self.order == 0:
            return float(np.log(len(p)))
        if self.order == 1:
            return float(-np.sum(p * np.log(p)))
        return float(np.log(np.sum(p ** self.order)) / (1 - self.order))

    def __repr__(self) -> str:
        return f"EntanglementEntropy(cut={self.cut}, order={self.order})"

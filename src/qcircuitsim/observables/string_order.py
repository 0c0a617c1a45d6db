# src/qcircuitsim/observables/string_order.py
"""String order parameter for spin-1 chains."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

from qcircuitsim.gates.spin import spin_matrices
from qcircuitsim.observables.base import Observable
from qcircuitsim.state.state import apply_operator_to

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState


class StringOrder(Observable):
    """``<Sz_i  prod_{i<k<j} exp(i pi Sz_k)  Sz_j>`` for sites ``i < j``.

    For the AKLT ground state the magnitude approaches 4/9.
    """

    def __init__(self, i: int, j: int):
        if i < 0:
            raise ValueError(f"i must be non-negative, got {i}")
        if j <= i:
            raise ValueError(f"j must be > i, got i={i}, j={j}")
        self.i = int(i)
        self.j = int(j)

    def compute(self, state: "SimulationState", i1: Optional[int] = None) -> float:
        if state.local_dim != 3:
            raise ValueError("StringOrder requires local_dim=3 (spin-1)")
        if self.j >= state.L:
            raise ValueError(
                f"StringOrder sites ({self.i}, {self.j}) exceed system size L={state.L}"
            )
        sz = spin_matrices()[2]
        string = np.diag(np.exp(1j * np.pi * np.diag(sz)))

        out = apply_operator_to(state.psi, sz, (self.i,))
        for k in range(self.i + 1, self.j):
            out = apply_operator_to(out, string, (k,))
        out = apply_operator_to(out, sz, (self.j,))
        return float(np.vdot(state.psi, out).real / state.norm() ** 2)

    def __repr__(self) -> str:
        return f"StringOrder({self.i}, {self.j})"

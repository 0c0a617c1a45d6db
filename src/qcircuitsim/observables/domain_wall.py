# src/qcircuitsim/observables/domain_wall.py
"""
Domain wall observable.

Scanning the chain cyclically from the sampling site ``i1``, let ``j`` be
the scan position (0-based) of the first site found in ``|1>``. The
domain wall of order ``n`` is

    DW_n = sum_j (L - j)**n * P(first 1 at scan position j)

so a ``1`` right at ``i1`` contributes ``L**n`` and the all-zero string
contributes nothing.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

from qcircuitsim.observables.base import Observable

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState


def domain_wall(state: "SimulationState", i1: int, order: int) -> float:
    """Domain wall of ``order`` sampled from site ``i1`` (qubits only)."""
    if state.local_dim != 2:
        raise ValueError("DomainWall is only defined for qubits")
    L = state.L
    if not 0 <= i1 < L:
        raise ValueError(f"i1 must be in [0, {L}), got {i1}")

    # axis j of `probs` is scan position j
    scan = [(i1 + j) % L for j in range(L)]
    probs = np.transpose(np.abs(state.psi) ** 2, scan)
    probs = probs / probs.sum()

    value = 0.0
    cur = probs
    for j in range(L):
        value += (L - j) ** order * float(cur[1].sum())
        cur = cur[0]
    return value


class DomainWall(Observable):
    """Domain wall observable of a given order.

    Parameters
    ----------
    order : int
        Exponent of the position weight, ``>= 1``.
    i1_fn : Optional[Callable[[SimulationState], int]]
        Fallback for the sampling site when :meth:`compute` gets no ``i1``.
    """

    def __init__(
        self,
        order: int,
        i1_fn: Optional[Callable[["SimulationState"], int]] = None,
    ):
        if int(order) < 1:
            raise ValueError(f"DomainWall order must be >= 1, got {order}")
        self.order = int(order)
        self.i1_fn = i1_fn

    def compute(self, state: "SimulationState", i1: Optional[int] = None) -> float:
        if i1 is None:
            if self.i1_fn is None:
                raise ValueError(
                    "DomainWall needs a sampling site: pass i1 or give an i1_fn"
                )
            i1 = self.i1_fn(state)
        return domain_wall(state, int(i1), self.order)

    def __repr__(self) -> str:
        return f"DomainWall(order={self.order})"

# src/qcircuitsim/gates/spin.py
"""
Spin-1 operators and two-site total-spin sector gates.

Local basis ordering is ``m = +1, 0, -1`` (levels 0, 1, 2). Two-site
matrices are 9x9 with the first site as the slow index.

Functions
---------
spin_matrices
    ``(Sx, Sy, Sz)`` for spin 1.
total_spin_projector
    Projector onto total spin ``S`` of two spin-1 sites.

Classes
-------
SpinSectorProjection
    Coherent projection with a given 9x9 projector, then renormalise.
SpinSectorMeasurement
    Born measurement of the total-spin sector, then collapse.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Tuple

import numpy as np

from qcircuitsim.gates.base import Gate, require_registry

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState

logger = logging.getLogger(__name__)

SPIN_SECTORS: Tuple[int, ...] = (0, 1, 2)


def spin_matrices() -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Spin-1 operators ``(Sx, Sy, Sz)``."""
    s = 1.0 / np.sqrt(2.0)
    sx = s * np.array([[0, 1, 0], [1, 0, 1], [0, 1, 0]], dtype=complex)
    sy = s * np.array([[0, -1j, 0], [1j, 0, -1j], [0, 1j, 0]], dtype=complex)
    sz = np.diag([1.0, 0.0, -1.0]).astype(complex)
    return sx, sy, sz


def total_spin_squared() -> np.ndarray:
    """``(S_1 + S_2)^2`` on two spin-1 sites; eigenvalues 0, 2, 6."""
    eye = np.eye(3)
    total = np.zeros((9, 9), dtype=complex)
    for op in spin_matrices():
        s_tot = np.kron(op, eye) + np.kron(eye, op)
        total += s_tot @ s_tot
    return total


def total_spin_projector(S: int) -> np.ndarray:
    """Projector onto total spin ``S`` (0, 1 or 2) of two spin-1 sites.

    Built as the Lagrange polynomial in ``S_tot^2`` that is 1 on the
    eigenvalue ``S(S+1)`` and 0 on the other two.
    """
    if S not in SPIN_SECTORS:
        raise ValueError(f"S must be 0, 1 or 2, got {S}")
    s2 = total_spin_squared()
    target = S * (S + 1)
    proj = np.eye(9, dtype=complex)
    for other in SPIN_SECTORS:
        if other == S:
            continue
        value = other * (other + 1)
        proj = proj @ (s2 - value * np.eye(9)) / (target - value)
    return proj.real


def _require_spin1(gate: Gate, state: "SimulationState") -> None:
    if state.local_dim != 3:
        raise ValueError(
            f"{type(gate).__name__} requires local_dim=3 (spin-1), got {state.local_dim}"
        )


class SpinSectorProjection(Gate):
    """Apply a 9x9 projector to two adjacent spin-1 sites, then renormalise."""
    support = 2
    label = "SSP"

    def __init__(self, projector: np.ndarray):
        projector = np.asarray(projector)
        if projector.shape != (9, 9):
            raise ValueError(
                f"SpinSectorProjection needs a 9x9 projector, got shape {projector.shape}"
            )
        self.projector = projector

    def apply_to(self, state: "SimulationState", sites: Tuple[int, ...]) -> None:
        _require_spin1(self, state)
        state.apply_operator(self.projector, sites)
        state.normalize()

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, SpinSectorProjection)
            and np.array_equal(self.projector, other.projector)
        )

    def __hash__(self) -> int:
        return hash((type(self), self.projector.tobytes()))


class SpinSectorMeasurement(Gate):
    """Born measurement of the total spin of two adjacent spin-1 sites.

    Only the listed ``sectors`` are possible outcomes: their Born weights
    ``<psi|P_S|psi>`` are renormalised to sum to one before sampling with
    one draw from the ``born`` stream.
    """
    support = 2
    label = "SSM"

    def __init__(self, sectors: Iterable[int] = SPIN_SECTORS):
        sectors = tuple(int(s) for s in sectors)
        if not sectors:
            raise ValueError("sectors must be non-empty")
        if any(s not in SPIN_SECTORS for s in sectors):
            raise ValueError(f"sectors must be a subset of {{0, 1, 2}}, got {sectors}")
        self.sectors = sectors

    def apply_to(self, state: "SimulationState", sites: Tuple[int, ...]) -> int:
        _require_spin1(self, state)
        projectors = [total_spin_projector(S) for S in self.sectors]
        weights = np.array([state.expectation(P, sites).real for P in projectors])
        total = weights.sum()
        if total <= 0.0:
            raise ValueError(
                f"State has no weight in spin sectors {self.sectors} at sites {sites}"
            )
        r = require_registry(self, state).draw("born")
        cumulative = np.cumsum(weights / total)
        index = int(np.searchsorted(cumulative, r, side="right"))
        index = min(index, len(self.sectors) - 1)
        sector = self.sectors[index]
        state.apply_operator(projectors[index], sites)
        state.normalize()
        state.measurements.append((tuple(sites), sector))
        logger.debug("Spin sector at %s: r=%.6f -> S=%d", sites, r, sector)
        return sector

    def __repr__(self) -> str:
        return f"SpinSectorMeasurement({list(self.sectors)})"

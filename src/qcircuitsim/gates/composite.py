# src/qcircuitsim/gates/composite.py
"""
Measurement-based gates.

Both gates sample a Born outcome from the ``born`` stream of the state's
registry (one uniform draw per application) and collapse the state.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Tuple

from qcircuitsim.gates.base import Gate, require_qubits, require_registry
from qcircuitsim.gates.single_qubit import PauliX

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState

logger = logging.getLogger(__name__)


class Measurement(Gate):
    """Projective single-site measurement in the computational (Z) basis.

    The outcome is the first level ``k`` with ``r < P(0) + ... + P(k)``,
    which for qubits is ``0 if r < P(0) else 1``. The state is left in the
    measured level.
    """
    label = "Mz"
    stim_name = "M"

    def __init__(self, axis: str = "Z"):
        if str(axis).upper() != "Z":
            raise ValueError(f"Only Z-basis measurement is supported, got {axis!r}")
        self.axis = "Z"

    def apply_to(self, state: "SimulationState", sites: Tuple[int, ...]) -> int:
        site = sites[0]
        r = require_registry(self, state).draw("born")
        outcome = state.local_dim - 1
        cumulative = 0.0
        for level in range(state.local_dim - 1):
            cumulative += state.probability(site, level)
            if r < cumulative:
                outcome = level
                break
        state.project({site: outcome})
        state.measurements.append(((site,), outcome))
        logger.debug("Measured site %d: r=%.6f -> %d", site, r, outcome)
        return outcome

    def __repr__(self) -> str:
        return f"Measurement({self.axis!r})"


class Reset(Gate):
    """Reset a qubit to ``|0>``: Z measurement, then X if the outcome was 1."""
    label = "Rst"
    stim_name = "R"

    def apply_to(self, state: "SimulationState", sites: Tuple[int, ...]) -> int:
        require_qubits(self, state)
        outcome = Measurement("Z").apply_to(state, sites)
        if outcome == 1:
            PauliX().apply_to(state, sites[:1])
        return outcome

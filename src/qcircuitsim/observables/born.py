# src/qcircuitsim/observables/born.py
"""Born probability of a single-site outcome."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from qcircuitsim.observables.base import Observable

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState


class BornProbability(Observable):
    """``P(site == outcome)`` in the computational basis."""

    def __init__(self, site: int, outcome: int):
        if site < 0 or outcome < 0:
            raise ValueError("site and outcome must be non-negative")
        self.site = int(site)
        self.outcome = int(outcome)

    def compute(self, state: "SimulationState", i1: Optional[int] = None) -> float:
        return state.probability(self.site, self.outcome)

    def __repr__(self) -> str:
        return f"BornProbability(site={self.site}, outcome={self.outcome})"

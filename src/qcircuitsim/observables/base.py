# src/qcircuitsim/observables/base.py
"""Observable base class."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState


class Observable(ABC):
    """A real number computed from a state.

    Observables are called as ``obs(state, i1=None)``. ``i1`` is the
    sampling site supplied by the driver; observables that do not depend
    on a sampling site ignore it.
    """

    def __call__(self, state: "SimulationState", i1: Optional[int] = None) -> float:
        return self.compute(state, i1=i1)

    @abstractmethod
    def compute(self, state: "SimulationState", i1: Optional[int] = None) -> float:
        ...

"""Dense state backend and initial states."""

from .state import SimulationState, apply_operator_to
from .initialization import InitialState, ProductState, RandomState

__all__ = [
    "SimulationState",
    "apply_operator_to",
    "InitialState",
    "ProductState",
    "RandomState",
]

"""Observables evaluated on a :class:`~qcircuitsim.state.SimulationState`."""

from .base import Observable
from .born import BornProbability
from .domain_wall import DomainWall, domain_wall
from .entanglement import EntanglementEntropy, schmidt_probabilities
from .string_order import StringOrder

__all__ = [
    "Observable",
    "BornProbability",
    "DomainWall",
    "domain_wall",
    "EntanglementEntropy",
    "schmidt_probabilities",
    "StringOrder",
]

"""Simulation drivers."""

from .driver import (
    RECORD_MODES,
    simulate,
    simulate_circuits,
    record_every,
    CircuitSimulation,
)

__all__ = [
    "RECORD_MODES",
    "simulate",
    "simulate_circuits",
    "record_every",
    "CircuitSimulation",
]

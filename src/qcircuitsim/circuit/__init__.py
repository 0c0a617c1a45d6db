"""Lazy circuits: build once, expand, execute, render or export."""

from .circuit import (
    CIRCUIT_STREAM,
    Circuit,
    CircuitBuilder,
    DeterministicOp,
    StochasticOp,
    ExpandedOp,
    expand_circuit,
)
from .execute import (
    RECORD_WHEN_MODES,
    RecordingContext,
    simulate_circuit,
    every_n_gates,
    every_n_steps,
)
from .ascii import render_circuit, print_circuit
from .export import to_stim

__all__ = [
    # Building
    "CIRCUIT_STREAM",
    "Circuit",
    "CircuitBuilder",
    "DeterministicOp",
    "StochasticOp",
    "ExpandedOp",
    "expand_circuit",
    # Execution
    "RECORD_WHEN_MODES",
    "RecordingContext",
    "simulate_circuit",
    "every_n_gates",
    "every_n_steps",
    # Output
    "render_circuit",
    "print_circuit",
    "to_stim",
]

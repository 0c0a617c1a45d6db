# src/qcircuitsim/circuit/export.py
"""Export of expanded Clifford trajectories to Stim."""
from __future__ import annotations

from typing import List, Sequence, Union

import stim

from qcircuitsim.circuit.circuit import Circuit, ExpandedOp, expand_circuit


def to_stim(
    expanded: Union[Circuit, Sequence[Sequence[ExpandedOp]]],
    seed: int = 0,
) -> stim.Circuit:
    """Convert an expanded trajectory into a ``stim.Circuit``.

    Each step's operations are appended in order with a ``TICK`` between
    steps. A :class:`Circuit` is expanded with ``seed`` first.

    Raises
    ------
    ValueError
        If an operation has no Stim equivalent (e.g. ``HaarRandom``).
    """
    if isinstance(expanded, Circuit):
        expanded = expand_circuit(expanded, seed=seed)
    steps: List[Sequence[ExpandedOp]] = list(expanded)

    circuit = stim.Circuit()
    for index, step_ops in enumerate(steps):
        for op in step_ops:
            name = op.gate.stim_name
            if name is None:
                raise ValueError(
                    f"{type(op.gate).__name__} has no Stim equivalent; only "
                    "Clifford trajectories can be exported"
                )
            circuit.append(name, list(op.sites))
        if index < len(steps) - 1:
            circuit.append("TICK")
    return circuit

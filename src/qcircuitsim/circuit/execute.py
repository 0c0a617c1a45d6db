# src/qcircuitsim/circuit/execute.py
"""
Execution of lazy circuits on a state.

Randomness consumption matches :func:`expand_circuit`: one ``ctrl`` draw
per stochastic operation, cumulative selection with strict ``<``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from qcircuitsim.circuit.circuit import Circuit
from qcircuitsim.gates.base import Gate
from qcircuitsim.state.state import SimulationState

logger = logging.getLogger(__name__)

RECORD_WHEN_MODES = ("every_step", "every_gate", "final_only")


@dataclass(frozen=True)
class RecordingContext:
    """Passed to recording predicates after each executed gate.

    Attributes
    ----------
    step_idx : int
        Circuit repetition index, ``1 .. n_circuits``.
    gate_idx : int
        Cumulative count of executed gates; never resets.
    gate : Gate
        The gate just applied.
    is_step_boundary : bool
        True for the last operation of the last step of a repetition.
    """
    step_idx: int
    gate_idx: int
    gate: Gate
    is_step_boundary: bool


RecordPredicate = Callable[[RecordingContext], bool]


def every_n_gates(n: int) -> RecordPredicate:
    """Record repetitions that contain an ``n``-th executed gate."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return lambda ctx: ctx.gate_idx % n == 0


def every_n_steps(n: int) -> RecordPredicate:
    """Record at the boundary of every ``n``-th circuit repetition."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return lambda ctx: ctx.step_idx % n == 0 and ctx.is_step_boundary


def simulate_circuit(
    circuit: Circuit,
    state: SimulationState,
    n_circuits: int = 1,
    record_initial: bool = False,
    record_every: int = 1,
    record_when: Union[str, RecordPredicate] = "every_step",
) -> Dict[str, List[float]]:
    """Run ``circuit`` ``n_circuits`` times on ``state``.

    Parameters
    ----------
    circuit : Circuit
        Template circuit; it is not modified.
    state : SimulationState
        Initialised state with an RNG registry providing ``ctrl``.
    n_circuits : int
        Repetitions. Geometry positions carry over between repetitions.
    record_initial : bool
        Record once before the first repetition.
    record_every : int
        With ``"every_step"``, record after repetition ``c`` when
        ``(c - 1) % record_every == 0`` and after the last one.
    record_when : str or Callable[[RecordingContext], bool]
        ``"every_step"`` (once per repetition), ``"every_gate"``,
        ``"final_only"``, or a predicate evaluated after every executed
        gate. A repetition is recorded once, at its end, if the predicate
        returned True for any of its gates.

    Returns
    -------
    Dict[str, List[float]]
        ``state.observables``.
    """
    if int(n_circuits) < 1:
        raise ValueError(f"n_circuits must be >= 1, got {n_circuits}")
    if int(record_every) < 1:
        raise ValueError(f"record_every must be >= 1, got {record_every}")
    if not callable(record_when) and record_when not in RECORD_WHEN_MODES:
        raise ValueError(
            f"Unknown record_when {record_when!r}; valid: {', '.join(RECORD_WHEN_MODES)}"
        )
    if state.L != circuit.L or state.bc is not circuit.bc:
        raise ValueError(
            f"Circuit (L={circuit.L}, bc={circuit.bc.value}) does not match "
            f"state (L={state.L}, bc={state.bc.value})"
        )
    if state.rng is None:
        raise ValueError("simulate_circuit needs a state with an RNGRegistry")

    registry = state.rng
    registry.freeze()
    operations = circuit.copy_operations()
    last_op = len(operations) - 1
    logger.info(
        "Running circuit L=%d n_steps=%d for %d repetitions",
        circuit.L, circuit.n_steps, n_circuits,
    )

    if record_initial:
        state.record()

    gate_idx = 0
    for c in range(1, int(n_circuits) + 1):
        predicate_fired = False
        for step in range(1, circuit.n_steps + 1):
            for op_idx, op in enumerate(operations):
                gate = op.run(state, registry, None)
                if gate is None:
                    continue
                gate_idx += 1
                if record_when == "every_gate":
                    state.record()
                elif callable(record_when):
                    ctx = RecordingContext(
                        step_idx=c,
                        gate_idx=gate_idx,
                        gate=gate,
                        is_step_boundary=(step == circuit.n_steps and op_idx == last_op),
                    )
                    if record_when(ctx):
                        predicate_fired = True

        if record_when == "every_step":
            if (c - 1) % record_every == 0 or c == n_circuits:
                state.record()
        elif record_when == "final_only" and c == n_circuits:
            state.record()
        elif callable(record_when) and predicate_fired:
            state.record()

    return state.observables

# src/qcircuitsim/simulation/driver.py
"""
Simulation drivers.

Three ways to run the same trajectory:

- :func:`simulate`: a fixed number of steps, calling
  ``circuit_step(state, t)`` for ``t = 1 .. steps``.
- :func:`simulate_circuits`: circuits of ``steps_per_circuit`` steps with
  an ``on_circuit(state, n)`` callback after each circuit.
- :class:`CircuitSimulation`: an iterator yielding the state after each
  circuit.

Each driver creates its own :class:`SimulationState`, freezes the RNG
registry before the first step and never shares state across runs.

Usage
-----
>>> rng = RNGRegistry.ct_compat(circuit=42, measurement=123)
>>> left = StaircaseLeft(8)
>>> results = simulate_circuits(
...     L=8, bc="periodic", init=ProductState(x0=Fraction(1, 2**8)),
...     circuit_step=lambda s: apply(s, Reset(), left),
...     circuits=4, observables={"DW1": DomainWall(order=1)}, rng=rng,
...     on_circuit=record_every(2),
...     i1_fn=lambda s: (left.position + 1) % 8,
... )
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Union

from qcircuitsim.core.config import BoundaryCondition
from qcircuitsim.core.rng import RNGRegistry
from qcircuitsim.observables.base import Observable
from qcircuitsim.state.initialization import InitialState
from qcircuitsim.state.state import SimulationState

logger = logging.getLogger(__name__)

RECORD_MODES = ("every", "final", "custom")

StepFn = Callable[[SimulationState, int], None]
CircuitStepFn = Callable[[SimulationState], None]
OnCircuitFn = Callable[[SimulationState, int], None]


def _prepare_state(
    L: int,
    bc: Union[str, BoundaryCondition],
    init: InitialState,
    observables: Mapping[str, Observable],
    rng: RNGRegistry,
    local_dim: int = 2,
) -> SimulationState:
    state = SimulationState(L, bc, local_dim=local_dim, rng=rng)
    state.initialize(init)
    for name, obs in observables.items():
        state.track(name, obs)
    rng.freeze()
    return state


def simulate(
    L: int,
    bc: Union[str, BoundaryCondition],
    init: InitialState,
    circuit_step: StepFn,
    steps: int,
    observables: Mapping[str, Observable],
    rng: RNGRegistry,
    record_at: str = "every",
    record_fn: Optional[StepFn] = None,
    i1_fn: Optional[Callable[[SimulationState, int], int]] = None,
    local_dim: int = 2,
) -> Dict[str, List[float]]:
    """Run ``steps`` steps and return the recorded observables.

    Parameters
    ----------
    L, bc, local_dim
        System definition.
    init : InitialState
        Initial state.
    circuit_step : Callable[[SimulationState, int], None]
        Called once per step with ``t = 1 .. steps``.
    steps : int
        Number of steps.
    observables : Mapping[str, Observable]
        Observables to track, by name.
    rng : RNGRegistry
        Registry owned by this run.
    record_at : str
        ``"every"`` records at ``t = 0`` and after every step, ``"final"``
        once after the last step, ``"custom"`` calls ``record_fn(state, t)``
        after every step instead.
    record_fn : Optional[Callable[[SimulationState, int], None]]
        Required for ``record_at="custom"``.
    i1_fn : Optional[Callable[[SimulationState, int], int]]
        Sampling site for observables that need one, given ``(state, t)``.

    Returns
    -------
    Dict[str, List[float]]
        Recorded values per observable name.
    """
    if record_at not in RECORD_MODES:
        raise ValueError(f"record_at must be one of {RECORD_MODES}, got {record_at!r}")
    if record_at == "custom" and record_fn is None:
        raise ValueError("record_at='custom' requires record_fn")
    if int(steps) < 0:
        raise ValueError(f"steps must be non-negative, got {steps}")

    state = _prepare_state(L, bc, init, observables, rng, local_dim)
    logger.info("Simulating L=%d for %d steps (record_at=%s)", L, steps, record_at)

    def _record(t: int) -> None:
        state.record(i1=i1_fn(state, t) if i1_fn is not None else None)

    if record_at == "every":
        _record(0)
    for t in range(1, int(steps) + 1):
        circuit_step(state, t)
        if record_at == "every":
            _record(t)
        elif record_at == "custom":
            record_fn(state, t)
    if record_at == "final":
        _record(int(steps))
    return state.observables


def record_every(n: int) -> OnCircuitFn:
    """``on_circuit`` callback recording after every ``n``-th circuit."""
    if int(n) < 1:
        raise ValueError(f"n must be >= 1, got {n}")

    def on_circuit(state: SimulationState, circuit: int) -> None:
        if circuit % n == 0:
            state.record()

    return on_circuit


def simulate_circuits(
    L: int,
    bc: Union[str, BoundaryCondition],
    init: InitialState,
    circuit_step: CircuitStepFn,
    circuits: int,
    observables: Mapping[str, Observable],
    rng: RNGRegistry,
    steps_per_circuit: Optional[int] = None,
    on_circuit: Optional[OnCircuitFn] = None,
    i1_fn: Optional[Callable[[SimulationState], int]] = None,
    local_dim: int = 2,
) -> Dict[str, List[float]]:
    """Run ``circuits`` circuits of ``steps_per_circuit`` steps each.

    Records once before the first circuit, then calls
    ``on_circuit(state, n)`` after circuit ``n = 1 .. circuits``.
    ``steps_per_circuit`` defaults to ``L``. ``i1_fn(state)`` becomes the
    state's default sampling site for :meth:`SimulationState.record`.
    """
    steps_per_circuit = L if steps_per_circuit is None else int(steps_per_circuit)
    if steps_per_circuit < 1:
        raise ValueError(f"steps_per_circuit must be >= 1, got {steps_per_circuit}")
    if int(circuits) < 0:
        raise ValueError(f"circuits must be non-negative, got {circuits}")

    state = _prepare_state(L, bc, init, observables, rng, local_dim)
    state.i1_fn = i1_fn
    logger.info(
        "Simulating L=%d for %d circuits of %d steps", L, circuits, steps_per_circuit
    )

    state.record()
    for n in range(1, int(circuits) + 1):
        for _ in range(steps_per_circuit):
            circuit_step(state)
        if on_circuit is not None:
            on_circuit(state, n)
    return state.observables


class CircuitSimulation:
    """Lazy circuit-by-circuit simulation.

    Each ``next()`` runs one circuit (``steps_per_circuit`` calls of
    ``circuit_step``) and yields the state. The iterator is unbounded
    unless ``n_circuits`` is given; combine with :func:`itertools.islice`.

    Attributes
    ----------
    state : SimulationState
        The state being evolved.
    circuits_run : int
        Circuits completed so far.
    """

    def __init__(
        self,
        L: int,
        bc: Union[str, BoundaryCondition],
        init: InitialState,
        circuit_step: CircuitStepFn,
        observables: Mapping[str, Observable],
        rng: RNGRegistry,
        steps_per_circuit: Optional[int] = None,
        n_circuits: Optional[int] = None,
        i1_fn: Optional[Callable[[SimulationState], int]] = None,
        local_dim: int = 2,
    ):
        self.steps_per_circuit = L if steps_per_circuit is None else int(steps_per_circuit)
        if self.steps_per_circuit < 1:
            raise ValueError(
                f"steps_per_circuit must be >= 1, got {self.steps_per_circuit}"
            )
        self.circuit_step = circuit_step
        self.n_circuits = n_circuits
        self.state = _prepare_state(L, bc, init, observables, rng, local_dim)
        self.state.i1_fn = i1_fn
        self.circuits_run = 0

    def __iter__(self) -> Iterator[SimulationState]:
        return self

    def __next__(self) -> SimulationState:
        if self.n_circuits is not None and self.circuits_run >= self.n_circuits:
            raise StopIteration
        for _ in range(self.steps_per_circuit):
            self.circuit_step(self.state)
        self.circuits_run += 1
        logger.debug("Completed circuit %d", self.circuits_run)
        return self.state

    def get_observables(self) -> Dict[str, List[float]]:
        return self.state.observables

# src/qcircuitsim/models/ct_model.py
"""
Control/Bernoulli ("CT") circuit model.

On a periodic chain of ``L`` qubits two staircases start at site ``L-1``:
a backward ("left") one carrying resets and a forward ("right") one
carrying Haar random gates. Each step makes one ``ctrl`` draw:

- with probability ``p_ctrl``: ``Reset`` at the left staircase (control)
- otherwise: ``HaarRandom`` at the right staircase (Bernoulli), followed,
  when ``p_proj > 0``, by two ``proj`` draws that may each measure one
  site of the pair just scrambled.

A circuit is ``L`` steps. Domain walls are sampled at
``i1 = (left.position + 1) mod L`` once initially and after every
``record_every``-th circuit.

The same run can be written three ways (``style``): a plain loop, the
callback driver, or the iterator driver. All three give identical results
for identical seeds.
"""
from __future__ import annotations

import itertools
import logging
from fractions import Fraction
from typing import Callable, Dict, List, Tuple

from qcircuitsim.api.probabilistic import Action, Branch, apply_conditionally
from qcircuitsim.core.config import BoundaryCondition, CTModelConfig
from qcircuitsim.core.rng import RNGRegistry
from qcircuitsim.gates.composite import Measurement, Reset
from qcircuitsim.gates.two_qubit import HaarRandom
from qcircuitsim.geometry.staircase import StaircaseLeft, StaircasePair, StaircaseRight
from qcircuitsim.geometry.static import SingleSite
from qcircuitsim.observables.domain_wall import DomainWall
from qcircuitsim.simulation.driver import CircuitSimulation, record_every, simulate_circuits
from qcircuitsim.state.initialization import ProductState
from qcircuitsim.state.state import SimulationState

logger = logging.getLogger(__name__)

CT_STYLES = ("imperative", "callback", "iterator")


def _make_pair(L: int) -> StaircasePair:
    return StaircasePair(
        forward=StaircaseRight(L, start=L - 1),
        backward=StaircaseLeft(L, start=L - 1),
    )


def _make_step(
    config: CTModelConfig, pair: StaircasePair
) -> Callable[[SimulationState], Branch]:
    reset = Reset()
    scramble = Action(HaarRandom(), pair.forward)
    measure = Measurement("Z")
    L = config.L

    def step(state: SimulationState) -> Branch:
        branch = apply_conditionally(
            state, reset, pair.backward, config.p_ctrl, "ctrl", alternate=scramble
        )
        pair.verify()
        if branch is Branch.ALTERNATE and config.p_proj > 0:
            pos = pair.forward.position
            for site in ((pos - 1) % L, pos):
                apply_conditionally(state, measure, SingleSite(site), config.p_proj, "proj")
        return branch

    return step


def _observables(config: CTModelConfig) -> Dict[str, DomainWall]:
    return {f"DW{order}": DomainWall(order=order) for order in config.dw_orders}


def _initial_state(L: int) -> ProductState:
    return ProductState(x0=Fraction(1, 2 ** L))


def _run_imperative(config: CTModelConfig, rng: RNGRegistry) -> Dict[str, List[float]]:
    L = config.L
    pair = _make_pair(L)
    step = _make_step(config, pair)

    state = SimulationState(L, BoundaryCondition.PERIODIC, rng=rng)
    state.initialize(_initial_state(L))
    for name, obs in _observables(config).items():
        state.track(name, obs)
    rng.freeze()

    state.record(i1=pair.logical_site())
    for circuit in range(1, config.n_circuits + 1):
        for _ in range(L):
            step(state)
        if circuit % config.record_every == 0:
            state.record(i1=pair.logical_site())
    return state.observables


def _run_callback(config: CTModelConfig, rng: RNGRegistry) -> Dict[str, List[float]]:
    pair = _make_pair(config.L)
    return simulate_circuits(
        L=config.L,
        bc=BoundaryCondition.PERIODIC,
        init=_initial_state(config.L),
        circuit_step=_make_step(config, pair),
        circuits=config.n_circuits,
        observables=_observables(config),
        rng=rng,
        on_circuit=record_every(config.record_every),
        i1_fn=lambda state: pair.logical_site(),
    )


def _run_iterator(config: CTModelConfig, rng: RNGRegistry) -> Dict[str, List[float]]:
    pair = _make_pair(config.L)
    sim = CircuitSimulation(
        L=config.L,
        bc=BoundaryCondition.PERIODIC,
        init=_initial_state(config.L),
        circuit_step=_make_step(config, pair),
        observables=_observables(config),
        rng=rng,
        i1_fn=lambda state: pair.logical_site(),
    )
    sim.state.record()
    for n, state in enumerate(itertools.islice(sim, config.n_circuits), start=1):
        if n % config.record_every == 0:
            state.record()
    return sim.get_observables()


_RUNNERS: Dict[str, Callable[[CTModelConfig, RNGRegistry], Dict[str, List[float]]]] = {
    "imperative": _run_imperative,
    "callback": _run_callback,
    "iterator": _run_iterator,
}


def run_ct_model(config: CTModelConfig, style: str = "imperative") -> Dict[str, List[float]]:
    """Run the CT model and return recorded domain walls.

    Parameters
    ----------
    config : CTModelConfig
        Model parameters and seeds.
    style : str
        ``"imperative"``, ``"callback"`` or ``"iterator"``.

    Returns
    -------
    Dict[str, List[float]]
        ``"DW<order>"`` -> values; ``1 + n_circuits // record_every``
        entries each.
    """
    if style not in _RUNNERS:
        raise ValueError(f"style must be one of {CT_STYLES}, got {style!r}")
    rng = RNGRegistry.from_config(config.rng_config())
    logger.info(
        "CT model L=%d p_ctrl=%.3f p_proj=%.3f circuits=%d (%s)",
        config.L, config.p_ctrl, config.p_proj, config.n_circuits, style,
    )
    return _RUNNERS[style](config, rng)


def ct_trajectory(
    config: CTModelConfig, steps: int
) -> List[Tuple[Branch, int, int]]:
    """``(branch, right position, left position)`` after each of ``steps`` steps.

    No observables are recorded. Two calls with the same config give the
    same list.
    """
    rng = RNGRegistry.from_config(config.rng_config())
    pair = _make_pair(config.L)
    state = SimulationState(config.L, BoundaryCondition.PERIODIC, rng=rng)
    state.initialize(_initial_state(config.L))
    step = _make_step(config, pair)
    trajectory = []
    for _ in range(steps):
        branch = step(state)
        trajectory.append((branch, pair.forward.position, pair.backward.position))
    return trajectory

# src/qcircuitsim/circuit/circuit.py
"""
Lazy circuits.

A :class:`Circuit` records symbolic operations once and can be expanded or
executed many times. Each run works on its own copy of the operations, so
staircase geometries in the template never move.

Usage
-----
>>> with Circuit(L=4, bc="periodic", n_steps=4) as c:
...     c.apply_with_prob([
...         (0.5, Reset(), StaircaseLeft(4)),
...         (0.5, HaarRandom(), StaircaseRight(4)),
...     ])
>>> steps = expand_circuit(c.circuit, seed=0)
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from qcircuitsim.api.probabilistic import (
    PROBABILITY_SUM_TOL,
    ApplyFn,
    Outcome,
    apply,
    apply_choice,
)
from qcircuitsim.core.config import BoundaryCondition, check_probability
from qcircuitsim.core.errors import InvalidProbabilityError
from qcircuitsim.core.rng import RNGRegistry
from qcircuitsim.gates.base import Gate
from qcircuitsim.geometry.base import Geometry, Sites

# Only control decisions may be recorded in a lazy circuit.
CIRCUIT_STREAM = "ctrl"


@dataclass
class DeterministicOp:
    """Always apply ``gate`` at ``geometry``."""
    gate: Gate
    geometry: Geometry

    def run(self, state: Any, registry: RNGRegistry, apply_fn: Optional[ApplyFn]) -> Gate:
        apply(state, self.gate, self.geometry, apply_fn=apply_fn)
        return self.gate


@dataclass
class StochasticOp:
    """Apply at most one outcome, chosen with one draw from ``rng``."""
    outcomes: Tuple[Outcome, ...]
    rng: str = CIRCUIT_STREAM

    def run(
        self, state: Any, registry: RNGRegistry, apply_fn: Optional[ApplyFn]
    ) -> Optional[Gate]:
        index = apply_choice(
            state, self.outcomes, self.rng, registry=registry, apply_fn=apply_fn
        )
        return None if index is None else self.outcomes[index].gate


CircuitOp = Union[DeterministicOp, StochasticOp]


@dataclass(frozen=True)
class ExpandedOp:
    """A concrete gate application at fixed sites."""
    gate: Gate
    sites: Sites
    label: str


def _coerce_outcome(value: Any) -> Outcome:
    if isinstance(value, Mapping):
        return Outcome(value["probability"], value["gate"], value["geometry"])
    return Outcome.coerce(value)


class Circuit:
    """Symbolic circuit of ``n_steps`` steps on ``L`` sites.

    Every step runs all recorded operations in order.

    Parameters
    ----------
    L : int
        Number of sites.
    bc : str or BoundaryCondition
        Boundary condition.
    n_steps : int
        Steps per circuit run.
    """

    def __init__(
        self,
        L: int,
        bc: Union[str, BoundaryCondition] = BoundaryCondition.PERIODIC,
        n_steps: int = 1,
    ):
        if int(L) < 2:
            raise ValueError(f"L must be at least 2, got {L}")
        if int(n_steps) < 1:
            raise ValueError(f"n_steps must be >= 1, got {n_steps}")
        self.L = int(L)
        self.bc = BoundaryCondition.coerce(bc)
        self.n_steps = int(n_steps)
        self.operations: List[CircuitOp] = []

    @classmethod
    def build(
        cls,
        L: int,
        bc: Union[str, BoundaryCondition],
        n_steps: int,
        fn: Callable[["CircuitBuilder"], None],
    ) -> "Circuit":
        """Create a circuit and let ``fn(builder)`` record its operations."""
        circuit = cls(L, bc, n_steps)
        fn(CircuitBuilder(circuit))
        return circuit

    def __enter__(self) -> "CircuitBuilder":
        return CircuitBuilder(self)

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def copy_operations(self) -> List[CircuitOp]:
        """Deep copy of the operations; geometries shared between ops stay shared."""
        return copy.deepcopy(self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def __repr__(self) -> str:
        return (
            f"Circuit(L={self.L}, bc={self.bc.value}, n_steps={self.n_steps}, "
            f"operations={len(self.operations)})"
        )


class CircuitBuilder:
    """Records operations into a :class:`Circuit`."""

    def __init__(self, circuit: Circuit):
        self.circuit = circuit

    def apply(self, gate: Gate, geometry: Geometry) -> None:
        """Record a deterministic operation."""
        if not isinstance(gate, Gate) or not isinstance(geometry, Geometry):
            raise TypeError("apply expects a Gate and a Geometry")
        self.circuit.operations.append(DeterministicOp(gate, geometry))

    def apply_with_prob(
        self,
        outcomes: Sequence[Any],
        rng: str = CIRCUIT_STREAM,
    ) -> None:
        """Record a stochastic operation.

        ``outcomes`` are :class:`Outcome` objects, ``(probability, gate,
        geometry)`` tuples or mappings with those keys. Probabilities may
        sum to less than one; the remainder means "do nothing".
        """
        if rng != CIRCUIT_STREAM:
            raise ValueError(
                f"Lazy circuits only draw from the {CIRCUIT_STREAM!r} stream, got {rng!r}"
            )
        items = tuple(_coerce_outcome(o) for o in outcomes)
        if not items:
            raise ValueError("outcomes must be non-empty")
        total = sum(check_probability(o.probability) for o in items)
        if total > 1.0 + PROBABILITY_SUM_TOL:
            raise InvalidProbabilityError(f"outcome probabilities sum to {total} > 1")
        self.circuit.operations.append(StochasticOp(items, rng))


def expand_circuit(circuit: Circuit, seed: int = 0) -> List[List[ExpandedOp]]:
    """Concrete operations per step for one run of ``circuit``.

    Stochastic choices use a fresh ``ctrl`` stream seeded with ``seed``,
    one draw per stochastic operation, exactly as on a state whose
    ``ctrl`` stream has the same seed.
    """
    registry = RNGRegistry({CIRCUIT_STREAM: seed})
    operations = circuit.copy_operations()
    expanded: List[List[ExpandedOp]] = []

    for _ in range(circuit.n_steps):
        step_ops: List[ExpandedOp] = []

        def collect(_state: Any, gate: Gate, geometry: Geometry) -> None:
            for element in geometry.elements(circuit.L, circuit.bc):
                if gate.support > len(element):
                    raise ValueError(
                        f"{type(gate).__name__} acts on {gate.support} sites but "
                        f"{type(geometry).__name__} provides {len(element)}"
                    )
                step_ops.append(ExpandedOp(gate, element[:gate.support], gate.label))

        for op in operations:
            op.run(None, registry, collect)
        expanded.append(step_ops)
    return expanded

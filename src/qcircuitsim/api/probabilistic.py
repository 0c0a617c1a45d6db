# src/qcircuitsim/api/probabilistic.py
"""
Deterministic and probabilistic gate application.

Every probabilistic entry point here draws **exactly one** uniform value
from its named stream per call, before deciding anything. Two runs with
the same seeds and the same sequence of calls therefore consume their
streams identically; they can only differ through the comparison result.

When a branch fires, its gate is applied to its geometry and then that
geometry (and only that one) is advanced. Errors raised by the gate
application propagate unchanged and the geometry is not advanced.

Functions
---------
apply
    Unconditional application followed by ``geometry.advance()``.
apply_conditionally / apply_with_prob
    Either/or choice between a primary action and an optional alternate.
apply_choice
    One draw selecting among several outcomes (or none).
apply_categorical
    One draw selecting among outcomes whose probabilities sum to one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence, Tuple, Union

from qcircuitsim.core.config import check_probability
from qcircuitsim.core.errors import InvalidProbabilityError
from qcircuitsim.gates.base import Gate
from qcircuitsim.geometry.base import Geometry

if TYPE_CHECKING:
    from qcircuitsim.core.rng import RNGRegistry
    from qcircuitsim.state.state import SimulationState

logger = logging.getLogger(__name__)

ApplyFn = Callable[["SimulationState", Gate, Geometry], Any]

# Allowed float error on a sum of outcome probabilities.
PROBABILITY_SUM_TOL = 1e-10


class Branch(Enum):
    """Which arm of an either/or choice fired."""
    PRIMARY = "primary"
    ALTERNATE = "alternate"
    NONE = "none"


@dataclass(frozen=True)
class Action:
    """A (gate, geometry) pair applied together."""
    gate: Gate
    geometry: Geometry

    @classmethod
    def coerce(cls, value: Union["Action", Tuple[Gate, Geometry]]) -> "Action":
        """Accept an :class:`Action` or a ``(gate, geometry)`` tuple."""
        if isinstance(value, cls):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            return cls(*value)
        raise TypeError(
            f"Expected Action or (gate, geometry) tuple, got {type(value).__name__}"
        )

    def __post_init__(self) -> None:
        if not isinstance(self.gate, Gate):
            raise TypeError(f"Action gate must be a Gate, got {type(self.gate).__name__}")
        if not isinstance(self.geometry, Geometry):
            raise TypeError(
                f"Action geometry must be a Geometry, got {type(self.geometry).__name__}"
            )


@dataclass(frozen=True)
class Outcome:
    """One possible result of a multi-way choice."""
    probability: float
    gate: Gate
    geometry: Geometry

    @classmethod
    def coerce(
        cls, value: Union["Outcome", Tuple[float, Gate, Geometry]]
    ) -> "Outcome":
        if isinstance(value, cls):
            return value
        if isinstance(value, tuple) and len(value) == 3:
            return cls(*value)
        raise TypeError(
            f"Expected Outcome or (probability, gate, geometry), got {type(value).__name__}"
        )

    @property
    def action(self) -> Action:
        return Action(self.gate, self.geometry)


def _resolve_registry(
    state: "SimulationState", registry: Optional["RNGRegistry"]
) -> "RNGRegistry":
    if registry is not None:
        return registry
    if state.rng is None:
        raise ValueError(
            "No RNGRegistry: pass registry= or construct the state with rng="
        )
    return state.rng


def _fire(
    state: "SimulationState",
    gate: Gate,
    geometry: Geometry,
    apply_fn: Optional[ApplyFn],
) -> None:
    if apply_fn is None:
        state.apply(gate, geometry)
    else:
        apply_fn(state, gate, geometry)
    geometry.advance()


def apply(
    state: "SimulationState",
    gate: Gate,
    geometry: Geometry,
    *,
    apply_fn: Optional[ApplyFn] = None,
) -> None:
    """Apply ``gate`` at ``geometry`` on ``state``, then advance ``geometry``."""
    _fire(state, gate, geometry, apply_fn)


def apply_conditionally(
    state: "SimulationState",
    primary_gate: Gate,
    primary_geometry: Geometry,
    probability: float,
    stream_name: str = "ctrl",
    alternate: Union[None, Action, Tuple[Gate, Geometry]] = None,
    *,
    registry: Optional["RNGRegistry"] = None,
    apply_fn: Optional[ApplyFn] = None,
) -> Branch:
    """Either/or application driven by a single draw.

    One value ``r`` is drawn from ``stream_name`` on every call. If
    ``r < probability`` the primary action fires; otherwise the
    ``alternate`` fires if given, else nothing happens.

    Parameters
    ----------
    state : SimulationState
        State passed to the application primitive.
    primary_gate, primary_geometry
        Action taken when ``r < probability``.
    probability : float
        In ``[0, 1]``.
    stream_name : str
        Registry stream to draw from.
    alternate : Optional[Action]
        Action taken otherwise. A ``(gate, geometry)`` tuple is accepted.
    registry : Optional[RNGRegistry]
        Defaults to ``state.rng``.
    apply_fn : Optional[Callable]
        ``apply_fn(state, gate, geometry)``; defaults to ``state.apply``.

    Returns
    -------
    Branch
        The arm that fired.

    Raises
    ------
    InvalidProbabilityError
        ``probability`` outside ``[0, 1]``. Nothing is drawn.
    UnknownStreamError
        ``stream_name`` is not registered. Nothing is drawn.
    """
    probability = check_probability(probability)
    primary = Action(primary_gate, primary_geometry)
    alt = Action.coerce(alternate) if alternate is not None else None
    rng = _resolve_registry(state, registry)

    r = rng.draw(stream_name)

    if r < probability:
        _fire(state, primary.gate, primary.geometry, apply_fn)
        branch = Branch.PRIMARY
    elif alt is not None:
        _fire(state, alt.gate, alt.geometry, apply_fn)
        branch = Branch.ALTERNATE
    else:
        branch = Branch.NONE

    logger.debug(
        "%s draw r=%.6f vs p=%.6f -> %s", stream_name, r, probability, branch.value
    )
    return branch


apply_with_prob = apply_conditionally


def _validate_outcomes(outcomes: Sequence[Any]) -> Tuple[List[Outcome], float]:
    items = [Outcome.coerce(o) for o in outcomes]
    if not items:
        raise ValueError("outcomes must be non-empty")
    total = 0.0
    for i, item in enumerate(items):
        total += check_probability(item.probability, f"outcome {i} probability")
    return items, total


def _select(
    state: "SimulationState",
    items: List[Outcome],
    stream_name: str,
    registry: Optional["RNGRegistry"],
    apply_fn: Optional[ApplyFn],
    fallback_to_last: bool,
) -> Optional[int]:
    rng = _resolve_registry(state, registry)
    r = rng.draw(stream_name)

    chosen: Optional[int] = None
    cumulative = 0.0
    for i, item in enumerate(items):
        cumulative += item.probability
        if r < cumulative:
            chosen = i
            break
    if chosen is None and fallback_to_last:
        chosen = len(items) - 1

    if chosen is not None:
        _fire(state, items[chosen].gate, items[chosen].geometry, apply_fn)
    logger.debug("%s draw r=%.6f -> outcome %s", stream_name, r, chosen)
    return chosen


def apply_choice(
    state: "SimulationState",
    outcomes: Sequence[Union[Outcome, Tuple[float, Gate, Geometry]]],
    stream_name: str = "ctrl",
    *,
    registry: Optional["RNGRegistry"] = None,
    apply_fn: Optional[ApplyFn] = None,
) -> Optional[int]:
    """Apply at most one of ``outcomes`` using one draw.

    Outcome ``i`` fires when ``r`` falls in its slice of the cumulative
    probabilities (strict ``<``). Probabilities may sum to less than one;
    the remainder means "do nothing" and returns None.
    """
    items, total = _validate_outcomes(outcomes)
    if total > 1.0 + PROBABILITY_SUM_TOL:
        raise InvalidProbabilityError(f"outcome probabilities sum to {total} > 1")
    return _select(state, items, stream_name, registry, apply_fn, fallback_to_last=False)


def apply_categorical(
    state: "SimulationState",
    outcomes: Sequence[Union[Outcome, Tuple[float, Gate, Geometry]]],
    stream_name: str = "ctrl",
    *,
    registry: Optional["RNGRegistry"] = None,
    apply_fn: Optional[ApplyFn] = None,
) -> int:
    """Apply exactly one of ``outcomes``, whose probabilities sum to one.

    A draw beyond the float sum of the probabilities selects the last
    outcome.
    """
    items, total = _validate_outcomes(outcomes)
    if abs(total - 1.0) > PROBABILITY_SUM_TOL:
        raise InvalidProbabilityError(
            f"categorical probabilities must sum to 1, got {total}"
        )
    return _select(state, items, stream_name, registry, apply_fn, fallback_to_last=True)

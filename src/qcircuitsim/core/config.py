# src/qcircuitsim/core/config.py
"""
Declarative configuration types for simulations.

Classes
-------
BoundaryCondition
    Open or periodic chain boundary.
RNGConfig
    Seeds for the standard RNG streams.
SimulationConfig
    System size, boundary condition and local Hilbert space dimension.
CTModelConfig
    Parameters of the control/Bernoulli circuit model.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Tuple, Type, TypeVar, Union

from qcircuitsim.core.errors import InvalidProbabilityError

_C = TypeVar("_C")


class BoundaryCondition(Enum):
    """Boundary condition of the 1D chain."""
    OPEN = "open"
    PERIODIC = "periodic"

    @classmethod
    def coerce(cls, value: Union[str, "BoundaryCondition"]) -> "BoundaryCondition":
        """Accept either an enum member or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"bc must be 'open' or 'periodic', got {value!r}"
            ) from None


def check_probability(p: float, what: str = "probability") -> float:
    """Return ``p`` as float, raising if it is not in [0, 1]."""
    p = float(p)
    if not 0.0 <= p <= 1.0:  # also rejects NaN
        raise InvalidProbabilityError(f"{what} must be in [0, 1], got {p}")
    return p


class _DictMixin:
    """``to_dict`` / ``from_dict`` for flat config dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
            elif isinstance(value, tuple):
                data[key] = list(value)
        return data

    @classmethod
    def from_dict(cls: Type[_C], data: Dict[str, Any]) -> _C:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(
                f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}"
            )
        return cls(**data)


@dataclass
class RNGConfig(_DictMixin):
    """Seeds for the standard RNG streams.

    Attributes
    ----------
    ctrl, proj, haar, born : int
        Seeds of the control, projection, Haar and Born streams.
    state_init : int
        Seed of the initial-state stream.
    ct_compat : bool
        If True, ``ctrl``/``proj``/``haar`` share the ``ctrl`` seed's
        stream and ``born`` is the measurement stream; ``proj``, ``haar``
        and ``state_init`` are ignored.
    """
    ctrl: int = 0
    proj: int = 0
    haar: int = 0
    born: int = 0
    state_init: int = 0
    ct_compat: bool = False

    def __post_init__(self) -> None:
        for name in ("ctrl", "proj", "haar", "born", "state_init"):
            if int(getattr(self, name)) < 0:
                raise ValueError(f"{name} seed must be non-negative")


@dataclass
class SimulationConfig(_DictMixin):
    """System definition shared by states, circuits and drivers."""
    L: int
    bc: BoundaryCondition = BoundaryCondition.PERIODIC
    local_dim: int = 2

    def __post_init__(self) -> None:
        self.bc = BoundaryCondition.coerce(self.bc)
        if int(self.L) < 2:
            raise ValueError(f"L must be at least 2, got {self.L}")
        if int(self.local_dim) < 2:
            raise ValueError(f"local_dim must be at least 2, got {self.local_dim}")
        self.L = int(self.L)
        self.local_dim = int(self.local_dim)


@dataclass
class CTModelConfig(_DictMixin):
    """Parameters of the control/Bernoulli ("CT") circuit model.

    One *circuit* is ``L`` steps. At each step a single ``ctrl`` draw
    chooses between a reset at the left staircase (probability
    ``p_ctrl``) and a Haar random gate at the right staircase.

    Attributes
    ----------
    L : int
        Chain length (periodic boundary).
    p_ctrl : float
        Probability of the control (reset) branch.
    p_proj : float
        Probability of each projective check after a Bernoulli step.
    seed_circuit, seed_measurement : int
        Seeds of the circuit and measurement streams.
    n_circuits : int
        Number of circuits to run.
    record_every : int
        Record observables every this many circuits.
    dw_orders : Tuple[int, ...]
        Orders of the domain wall observables to record.
    ct_compat : bool
        Share one stream for ``ctrl``/``proj``/``haar``.
    """
    L: int
    p_ctrl: float
    p_proj: float = 0.0
    seed_circuit: int = 0
    seed_measurement: int = 0
    n_circuits: int = 1
    record_every: int = 1
    dw_orders: Tuple[int, ...] = field(default=(1, 2))
    ct_compat: bool = True

    def __post_init__(self) -> None:
        self.p_ctrl = check_probability(self.p_ctrl, "p_ctrl")
        self.p_proj = check_probability(self.p_proj, "p_proj")
        if int(self.L) < 2:
            raise ValueError(f"L must be at least 2, got {self.L}")
        if int(self.n_circuits) < 1:
            raise ValueError(f"n_circuits must be >= 1, got {self.n_circuits}")
        if int(self.record_every) < 1:
            raise ValueError(f"record_every must be >= 1, got {self.record_every}")
        self.dw_orders = tuple(int(o) for o in self.dw_orders)
        if not self.dw_orders or any(o < 1 for o in self.dw_orders):
            raise ValueError(f"dw_orders must be positive integers, got {self.dw_orders}")

    def rng_config(self) -> RNGConfig:
        """Seeds for the run's :class:`RNGRegistry`.

        Without ``ct_compat`` the projection and Haar streams are seeded at
        fixed offsets from ``seed_circuit`` so they stay independent.
        """
        return RNGConfig(
            ctrl=self.seed_circuit,
            proj=self.seed_circuit + 1,
            haar=self.seed_circuit + 2,
            born=self.seed_measurement,
            ct_compat=self.ct_compat,
        )

# src/qcircuitsim/state/state.py
"""
Dense state-vector backend.

:class:`SimulationState` stores the wavefunction of ``L`` sites with local
dimension ``d`` as an array of shape ``(d,) * L``; axis ``i`` is site ``i``.
It is the concrete ``apply(state, gate, geometry)`` primitive the
application engine delegates to, and it carries the tracked observables
and their recorded values.
"""
from __future__ import annotations

import logging
import warnings
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import numpy as np

from qcircuitsim.core.config import BoundaryCondition, SimulationConfig

if TYPE_CHECKING:
    from qcircuitsim.core.rng import RNGRegistry
    from qcircuitsim.gates.base import Gate
    from qcircuitsim.geometry.base import Geometry
    from qcircuitsim.observables.base import Observable
    from qcircuitsim.state.initialization import InitialState

logger = logging.getLogger(__name__)

# Norms below this are treated as an impossible projection.
ZERO_NORM = 1e-14

# Dense vectors with more amplitudes than this trigger a ResourceWarning.
DENSE_SIZE_WARNING = 2 ** 24


def apply_operator_to(
    psi: np.ndarray,
    matrix: np.ndarray,
    sites: Sequence[int],
) -> np.ndarray:
    """Return ``matrix`` applied to the axes ``sites`` of ``psi``.

    ``matrix`` is ``d**k x d**k`` with ``sites[0]`` the most significant
    digit of its row and column index.
    """
    k = len(sites)
    d = psi.shape[0]
    op = np.asarray(matrix).reshape((d,) * (2 * k))
    out = np.tensordot(op, psi, axes=(list(range(k, 2 * k)), list(sites)))
    return np.moveaxis(out, list(range(k)), list(sites))


class SimulationState:
    """Wavefunction of a 1D chain plus its recorded observables.

    Parameters
    ----------
    L : int
        Number of sites.
    bc : str or BoundaryCondition
        ``"periodic"`` (default) or ``"open"``.
    local_dim : int
        Local Hilbert space dimension (2 for qubits, 3 for spin 1).
    rng : Optional[RNGRegistry]
        Registry used by random gates, measurements and random initial
        states.

    Attributes
    ----------
    psi : np.ndarray
        Amplitudes, shape ``(local_dim,) * L``. Starts in ``|0...0>``.
    observables : Dict[str, List[float]]
        Recorded values per tracked observable name.
    measurements : List[Tuple[Tuple[int, ...], int]]
        ``(sites, outcome)`` for every measurement applied.
    i1_fn : Optional[Callable[[SimulationState], int]]
        Default sampling site for :meth:`record`.
    """

    def __init__(
        self,
        L: int,
        bc: Union[str, BoundaryCondition] = BoundaryCondition.PERIODIC,
        local_dim: int = 2,
        rng: Optional["RNGRegistry"] = None,
    ):
        config = SimulationConfig(L=L, bc=bc, local_dim=local_dim)
        self.L = config.L
        self.bc = config.bc
        self.local_dim = config.local_dim
        if self.local_dim ** self.L > DENSE_SIZE_WARNING:
            warnings.warn(
                f"Dense state with local_dim={self.local_dim}, L={self.L} holds "
                f"{self.local_dim ** self.L} amplitudes; expect high memory use.",
                ResourceWarning,
            )
        self.rng = rng
        self.psi = np.zeros((self.local_dim,) * self.L, dtype=complex)
        self.psi[(0,) * self.L] = 1.0
        self.tracked: Dict[str, "Observable"] = {}
        self.observables: Dict[str, List[float]] = {}
        self.measurements: List[Tuple[Tuple[int, ...], int]] = []
        self.i1_fn: Optional[Callable[["SimulationState"], int]] = None

    @classmethod
    def from_config(
        cls,
        config: SimulationConfig,
        rng: Optional["RNGRegistry"] = None,
    ) -> "SimulationState":
        return cls(config.L, config.bc, config.local_dim, rng=rng)

    def initialize(self, initial_state: "InitialState") -> "SimulationState":
        """Overwrite the amplitudes with ``initial_state``."""
        initial_state.prepare(self)
        logger.debug("Initialised L=%d state with %r", self.L, initial_state)
        return self

    # ── numerics ────────────────────────────────────────────────────────

    def _check_sites(self, sites: Sequence[int]) -> Tuple[int, ...]:
        sites = tuple(int(s) for s in sites)
        if len(set(sites)) != len(sites):
            raise ValueError(f"sites must be distinct, got {sites}")
        for s in sites:
            if not 0 <= s < self.L:
                raise ValueError(f"site {s} out of range for L={self.L}")
        return sites

    def apply_operator(self, matrix: np.ndarray, sites: Sequence[int]) -> None:
        """Apply a ``d**k x d**k`` operator in place (no renormalisation)."""
        sites = self._check_sites(sites)
        dim = self.local_dim ** len(sites)
        if np.shape(matrix) != (dim, dim):
            raise ValueError(
                f"operator on {len(sites)} site(s) must be {dim}x{dim}, "
                f"got {np.shape(matrix)}"
            )
        self.psi = apply_operator_to(self.psi, matrix, sites)

    def expectation(self, matrix: np.ndarray, sites: Sequence[int]) -> complex:
        """``<psi|O|psi> / <psi|psi>`` for an operator on ``sites``."""
        sites = self._check_sites(sites)
        out = apply_operator_to(self.psi, matrix, sites)
        return complex(np.vdot(self.psi, out) / self.norm() ** 2)

    def norm(self) -> float:
        return float(np.linalg.norm(self.psi))

    def normalize(self) -> None:
        """Rescale to unit norm. Raises ValueError for a zero vector."""
        n = self.norm()
        if n < ZERO_NORM:
            raise ValueError("Cannot normalise a state with zero norm")
        self.psi = self.psi / n

    def probability(self, site: int, level: int) -> float:
        """Born probability of finding ``site`` in ``level``."""
        (site,) = self._check_sites((site,))
        if not 0 <= level < self.local_dim:
            raise ValueError(f"level {level} out of range for local_dim={self.local_dim}")
        weights = np.abs(np.take(self.psi, level, axis=site)) ** 2
        return float(weights.sum() / self.norm() ** 2)

    def project(self, site_levels: Mapping[int, int]) -> None:
        """Project sites onto fixed levels and renormalise.

        Raises
        ------
        ValueError
            If the projected state has zero norm.
        """
        self._check_sites(list(site_levels))
        psi = self.psi.copy()
        for site, level in site_levels.items():
            if not 0 <= level < self.local_dim:
                raise ValueError(
                    f"level {level} out of range for local_dim={self.local_dim}"
                )
            keep = np.zeros(self.local_dim, dtype=bool)
            keep[level] = True
            index = [slice(None)] * self.L
            index[site] = ~keep
            psi[tuple(index)] = 0.0
        n = float(np.linalg.norm(psi))
        if n < ZERO_NORM:
            raise ValueError(f"Projection onto {dict(site_levels)} has zero norm")
        self.psi = psi / n

    def amplitudes(self) -> np.ndarray:
        """Flat amplitude vector; site 0 is the most significant digit."""
        return self.psi.reshape(-1).copy()

    def copy(self) -> "SimulationState":
        """Independent copy of the amplitudes; shares the RNG registry."""
        other = SimulationState(self.L, self.bc, self.local_dim, rng=self.rng)
        other.psi = self.psi.copy()
        return other

    # ── gate application ────────────────────────────────────────────────

    def apply(self, gate: "Gate", geometry: "Geometry") -> List[Any]:
        """Apply ``gate`` to every element of ``geometry``.

        The geometry is not advanced here; that is the caller's job.
        Returns the per-element results (measurement outcomes or None).
        """
        results = []
        for element in geometry.elements(self.L, self.bc):
            if gate.support > len(element):
                raise ValueError(
                    f"{type(gate).__name__} acts on {gate.support} sites but "
                    f"{type(geometry).__name__} provides {len(element)}"
                )
            results.append(gate.apply_to(self, element[:gate.support]))
        return results

    # ── observables ─────────────────────────────────────────────────────

    def track(self, name: str, observable: "Observable") -> None:
        """Register an observable to be evaluated by :meth:`record`."""
        if name in self.tracked:
            raise ValueError(f"Observable {name!r} is already tracked")
        self.tracked[name] = observable
        self.observables[name] = []

    def record(self, i1: Optional[int] = None) -> Dict[str, float]:
        """Evaluate every tracked observable and append its value.

        ``i1`` is the sampling site passed to observables that need one;
        when omitted, :attr:`i1_fn` (if set) supplies it.
        """
        if i1 is None and self.i1_fn is not None:
            i1 = self.i1_fn(self)
        values = {name: float(obs(self, i1=i1)) for name, obs in self.tracked.items()}
        for name, value in values.items():
            self.observables[name].append(value)
        return values

    def __repr__(self) -> str:
        return (
            f"SimulationState(L={self.L}, bc={self.bc.value}, "
            f"local_dim={self.local_dim})"
        )

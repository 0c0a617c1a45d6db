# src/qcircuitsim/state/initialization.py
"""Initial-state descriptors consumed by ``SimulationState.initialize``."""
from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import TYPE_CHECKING, Optional, Sequence, Tuple, Union

import numpy as np

if TYPE_CHECKING:
    from qcircuitsim.state.state import SimulationState


class InitialState(ABC):
    """Something that can overwrite a state's amplitudes."""

    @abstractmethod
    def prepare(self, state: "SimulationState") -> None:
        ...


class ProductState(InitialState):
    """Computational-basis product state.

    Give exactly one of:

    x0 : Fraction, int or str
        Rational in ``[0, 1)``. The first ``L`` binary digits of ``x0`` give
        the qubit levels, most significant digit on site 0. For example
        ``Fraction(1, 2**L)`` puts a 1 on site ``L-1`` only.
    levels : Sequence[int]
        Level of every site, for any local dimension.
    """

    def __init__(
        self,
        x0: Union[None, int, str, Fraction] = None,
        levels: Optional[Sequence[int]] = None,
    ):
        if (x0 is None) == (levels is None):
            raise ValueError("ProductState needs exactly one of x0 or levels")
        self.x0: Optional[Fraction] = None
        self.levels: Optional[Tuple[int, ...]] = None
        if x0 is not None:
            x0 = Fraction(x0)
            if not 0 <= x0 < 1:
                raise ValueError(f"x0 must be in [0, 1), got {x0}")
            self.x0 = x0
        else:
            self.levels = tuple(int(v) for v in levels)

    def levels_for(self, L: int, local_dim: int) -> Tuple[int, ...]:
        """Per-site levels this product state describes on ``L`` sites."""
        if self.x0 is not None:
            if local_dim != 2:
                raise ValueError("ProductState(x0=...) is only defined for qubits")
            value = int(self.x0 * 2 ** L)  # floor, since x0 >= 0
            return tuple((value >> (L - 1 - site)) & 1 for site in range(L))
        if len(self.levels) != L:
            raise ValueError(f"expected {L} levels, got {len(self.levels)}")
        if any(not 0 <= v < local_dim for v in self.levels):
            raise ValueError(f"levels must be in [0, {local_dim}), got {self.levels}")
        return self.levels

    def prepare(self, state: "SimulationState") -> None:
        levels = self.levels_for(state.L, state.local_dim)
        psi = np.zeros((state.local_dim,) * state.L, dtype=complex)
        psi[levels] = 1.0
        state.psi = psi

    def __repr__(self) -> str:
        if self.x0 is not None:
            return f"ProductState(x0={self.x0})"
        return f"ProductState(levels={list(self.levels)})"


class RandomState(InitialState):
    """Normalised complex Gaussian vector from the ``state_init`` stream.

    Real parts are drawn first, then imaginary parts.
    """

    def prepare(self, state: "SimulationState") -> None:
        if state.rng is None:
            raise ValueError("RandomState needs a state with an RNGRegistry")
        shape = (state.local_dim,) * state.L
        real = np.asarray(state.rng.normal("state_init", shape))
        imag = np.asarray(state.rng.normal("state_init", shape))
        state.psi = (real + 1j * imag).astype(complex)
        state.normalize()

    def __repr__(self) -> str:
        return "RandomState()"

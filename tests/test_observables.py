"""
Tests for observables.

Validates that:
1. The domain wall weighs the first 1 found from the sampling site.
2. Domain walls need a sampling site from the caller or from i1_fn.
3. Entanglement entropies of product and Bell states are 0 and log 2.
4. Born probabilities and spin-1 string order on product states.
"""
from fractions import Fraction

import numpy as np
import pytest

from qcircuitsim.observables import (
    BornProbability,
    DomainWall,
    EntanglementEntropy,
    StringOrder,
    domain_wall,
    schmidt_probabilities,
)
from qcircuitsim.state import ProductState, SimulationState


def _make_product(L: int, x0: Fraction) -> SimulationState:
    return SimulationState(L).initialize(ProductState(x0))


def _make_bell(L: int = 2) -> SimulationState:
    """(|0...0> + |1...1>)/sqrt(2)."""
    state = SimulationState(L)
    state.psi[(0,) * L] = 1 / np.sqrt(2)
    state.psi[(1,) * L] = 1 / np.sqrt(2)
    return state


# ============================================================================
# Domain wall
# ============================================================================

class TestDomainWall:
    """Position-weighted first-1 probability."""

    @pytest.mark.parametrize("order", [1, 2])
    def test_initial_ct_state(self, order):
        """x0 = 1/2^L sampled from site 0 finds the 1 last: DW = 1."""
        L = 6
        state = _make_product(L, Fraction(1, 2 ** L))
        assert DomainWall(order)(state, i1=0) == pytest.approx(1.0)

    def test_one_at_sampling_site(self):
        """A 1 at i1 contributes L**order."""
        L = 5
        state = _make_product(L, Fraction(1, 2 ** L))
        assert domain_wall(state, L - 1, 2) == pytest.approx(L ** 2)

    def test_wraps_around(self):
        """Scanning from site 3 of L=4 wraps to site 0 next."""
        state = _make_product(4, Fraction(1, 2))  # 1 on site 0
        assert domain_wall(state, 3, 1) == pytest.approx(3.0)

    def test_all_zero_state(self):
        """No 1 anywhere gives zero."""
        assert domain_wall(SimulationState(4), 0, 1) == 0.0

    def test_superposition_is_weighted(self):
        """Equal superposition of two product states averages their walls."""
        L = 3
        state = SimulationState(L)
        state.psi[:] = 0
        state.psi[0, 0, 1] = 1 / np.sqrt(2)  # first 1 at scan position 2
        state.psi[1, 0, 0] = 1 / np.sqrt(2)  # first 1 at scan position 0
        assert domain_wall(state, 0, 1) == pytest.approx(0.5 * 1 + 0.5 * 3)

    def test_missing_i1(self):
        """Without i1 and without i1_fn the observable refuses to guess."""
        with pytest.raises(ValueError):
            DomainWall(1)(SimulationState(3))

    def test_i1_fn_fallback(self):
        """i1_fn supplies the sampling site when none is given."""
        state = _make_product(4, Fraction(1, 16))
        obs = DomainWall(1, i1_fn=lambda s: s.L - 1)
        assert obs(state) == pytest.approx(4.0)

    def test_bad_order(self):
        """Order must be at least 1."""
        with pytest.raises(ValueError):
            DomainWall(0)

    def test_record_uses_state_i1_fn(self):
        """state.record falls back to state.i1_fn."""
        state = _make_product(4, Fraction(1, 16))
        state.track("DW1", DomainWall(1))
        state.i1_fn = lambda s: 0
        state.record()
        assert state.observables["DW1"] == [pytest.approx(1.0)]


# ============================================================================
# Entanglement
# ============================================================================

class TestEntanglement:
    """Schmidt spectrum based entropies."""

    @pytest.mark.parametrize("order", [0, 1, 2, 3])
    def test_product_state_zero(self, order):
        """Product states carry no entanglement."""
        state = _make_product(4, Fraction(5, 16))
        assert EntanglementEntropy(2, order=order)(state) == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("order", [0, 1, 2])
    def test_bell_pair_log2(self, order):
        """A Bell pair has entropy log 2 at every order."""
        assert EntanglementEntropy(1, order=order)(_make_bell()) == pytest.approx(np.log(2))

    def test_ghz_any_cut(self):
        """GHZ states have log 2 across every cut."""
        state = _make_bell(4)
        for cut in (1, 2, 3):
            assert EntanglementEntropy(cut)(state) == pytest.approx(np.log(2))

    def test_schmidt_probabilities_sum_to_one(self):
        """Schmidt probabilities are normalised."""
        p = schmidt_probabilities(_make_bell(3), 1)
        assert p.sum() == pytest.approx(1.0)

    def test_cut_out_of_range(self):
        """The cut must split the chain into two non-empty halves."""
        with pytest.raises(ValueError):
            EntanglementEntropy(3)(SimulationState(3))
        with pytest.raises(ValueError):
            EntanglementEntropy(0)


# ============================================================================
# Born probability and string order
# ============================================================================

class TestLocalObservables:
    """Single-site and spin-1 observables."""

    def test_born_probability(self):
        """P(site 0 == 1) on a Bell pair is one half."""
        assert BornProbability(0, 1)(_make_bell()) == pytest.approx(0.5)
        assert BornProbability(1, 0)(_make_product(2, Fraction(1, 4))) == pytest.approx(0.0)

    @pytest.mark.parametrize("levels,expected", [
        ([0, 0], 1.0),
        ([0, 2], -1.0),
        ([0, 0, 0], -1.0),
        ([0, 1, 0], 1.0),
        ([2, 1, 1, 0], -1.0),
    ])
    def test_string_order_product(self, levels, expected):
        """Sz_i * string * Sz_j on spin-1 product states (level 0 is m=+1)."""
        state = SimulationState(len(levels), local_dim=3).initialize(ProductState(levels=levels))
        assert StringOrder(0, len(levels) - 1)(state) == pytest.approx(expected)

    def test_string_order_requires_spin1(self):
        """Qubit states are rejected."""
        with pytest.raises(ValueError):
            StringOrder(0, 1)(SimulationState(2))

    def test_string_order_site_order(self):
        """j must be to the right of i."""
        with pytest.raises(ValueError):
            StringOrder(2, 1)

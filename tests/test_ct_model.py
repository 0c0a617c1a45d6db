"""
Tests for the control/Bernoulli (CT) model.

Validates that:
1. The imperative, callback and iterator styles give identical results.
2. Records are taken initially and after every record_every-th circuit.
3. Limit cases p_ctrl = 0 and p_ctrl = 1 move the expected staircase.
4. Configuration is validated and round-trips through plain dicts.
"""
import numpy as np
import pytest

from qcircuitsim.api import Branch
from qcircuitsim.core import (
    CTModelConfig,
    InvalidProbabilityError,
    RNGConfig,
    SimulationConfig,
)
from qcircuitsim.models import CT_STYLES, ct_trajectory, run_ct_model


def _make_config(**overrides) -> CTModelConfig:
    params = dict(
        L=6, p_ctrl=0.4, p_proj=0.0, seed_circuit=42, seed_measurement=123,
        n_circuits=3, record_every=1,
    )
    params.update(overrides)
    return CTModelConfig(**params)


# ============================================================================
# Styles and recording
# ============================================================================

class TestRunCTModel:
    """End-to-end runs of the CT model."""

    @pytest.mark.parametrize("p_proj,ct_compat", [(0.0, True), (0.3, True), (0.3, False)])
    def test_styles_agree(self, p_proj, ct_compat):
        """All three driver styles produce the same domain walls."""
        config = _make_config(p_proj=p_proj, ct_compat=ct_compat)
        results = [run_ct_model(config, style) for style in CT_STYLES]
        for other in results[1:]:
            assert other.keys() == results[0].keys()
            for name in results[0]:
                np.testing.assert_allclose(other[name], results[0][name])

    @pytest.mark.parametrize("n_circuits,every", [(3, 1), (6, 4), (5, 2)])
    def test_record_count(self, n_circuits, every):
        """1 + n_circuits // record_every records per observable."""
        config = _make_config(n_circuits=n_circuits, record_every=every)
        result = run_ct_model(config)
        assert set(result) == {"DW1", "DW2"}
        for values in result.values():
            assert len(values) == 1 + n_circuits // every

    def test_initial_domain_wall(self):
        """The initial state with i1 = 0 has DW = 1 for every order."""
        result = run_ct_model(_make_config(dw_orders=(1, 2, 3)))
        for order in (1, 2, 3):
            assert result[f"DW{order}"][0] == pytest.approx(1.0)

    def test_always_control_clears_chain(self):
        """With p_ctrl = 1 every site is reset within the first circuit."""
        result = run_ct_model(_make_config(p_ctrl=1.0, n_circuits=2))
        assert result["DW1"] == [pytest.approx(1.0), 0.0, 0.0]

    def test_values_bounded(self):
        """Domain walls of order n lie in [0, L**n]."""
        config = _make_config(L=5, p_proj=0.5, n_circuits=4)
        result = run_ct_model(config)
        for order in config.dw_orders:
            values = np.asarray(result[f"DW{order}"])
            assert np.all(values >= -1e-12)
            assert np.all(values <= config.L ** order + 1e-9)

    def test_reproducible(self):
        """Same seeds, same results."""
        config = _make_config(p_proj=0.2)
        assert run_ct_model(config) == run_ct_model(config)

    def test_bad_style(self):
        """Unknown styles are rejected."""
        with pytest.raises(ValueError):
            run_ct_model(_make_config(), style="functional")


# ============================================================================
# Trajectories
# ============================================================================

class TestTrajectory:
    """Branch and cursor history."""

    def test_never_control(self):
        """p_ctrl = 0: only the right staircase moves, starting from L-1."""
        trajectory = ct_trajectory(_make_config(L=4, p_ctrl=0.0), steps=4)
        assert [t[0] for t in trajectory] == [Branch.ALTERNATE] * 4
        assert [t[1] for t in trajectory] == [0, 1, 2, 3]
        assert all(t[2] == 3 for t in trajectory)

    def test_always_control(self):
        """p_ctrl = 1: only the left staircase moves, wrapping at 0."""
        trajectory = ct_trajectory(_make_config(L=4, p_ctrl=1.0), steps=4)
        assert [t[0] for t in trajectory] == [Branch.PRIMARY] * 4
        assert [t[2] for t in trajectory] == [2, 1, 0, 3]
        assert all(t[1] == 3 for t in trajectory)

    def test_trajectory_reproducible(self):
        """Two calls with one config give identical trajectories."""
        config = _make_config(p_proj=0.5)
        assert ct_trajectory(config, 30) == ct_trajectory(config, 30)

    def test_one_cursor_per_step(self):
        """Each step moves exactly one of the two staircases."""
        config = _make_config(L=5)
        previous = (4, 4)
        for branch, right, left in ct_trajectory(config, 40):
            moved_right = right != previous[0]
            moved_left = left != previous[1]
            assert moved_right != moved_left
            assert moved_right == (branch is Branch.ALTERNATE)
            previous = (right, left)


# ============================================================================
# Configuration
# ============================================================================

class TestConfig:
    """Config validation and serialisation."""

    @pytest.mark.parametrize("field,value", [("p_ctrl", 1.5), ("p_proj", -0.1)])
    def test_bad_probability(self, field, value):
        """Probabilities are checked on construction."""
        with pytest.raises(InvalidProbabilityError):
            _make_config(**{field: value})

    @pytest.mark.parametrize("field,value", [
        ("L", 1), ("n_circuits", 0), ("record_every", 0), ("dw_orders", (0,)),
    ])
    def test_bad_values(self, field, value):
        """Sizes and periods must be positive."""
        with pytest.raises(ValueError):
            _make_config(**{field: value})

    def test_dict_round_trip(self):
        """to_dict output rebuilds an equal config."""
        config = _make_config(dw_orders=(1, 3))
        data = config.to_dict()
        assert data["dw_orders"] == [1, 3]
        assert CTModelConfig.from_dict(data) == config

    def test_unknown_keys(self):
        """from_dict rejects keys it does not know."""
        with pytest.raises(ValueError):
            SimulationConfig.from_dict({"L": 4, "size": 4})

    def test_boundary_coerced(self):
        """Boundary conditions accept strings and serialise to them."""
        config = SimulationConfig(L=4, bc="OPEN")
        assert config.to_dict()["bc"] == "open"

    def test_rng_offsets(self):
        """Independent proj and haar seeds sit at fixed offsets."""
        rng = _make_config(seed_circuit=10, ct_compat=False).rng_config()
        assert (rng.ctrl, rng.proj, rng.haar) == (10, 11, 12)
        assert not rng.ct_compat
        with pytest.raises(ValueError):
            RNGConfig(ctrl=-1)

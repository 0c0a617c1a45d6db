"""
Tests for lazy circuits.

Validates that:
1. The builder rejects malformed operations.
2. Expansion is reproducible per seed and never moves template geometries.
3. Execution consumes the ctrl stream exactly like expansion.
4. simulate_circuit records according to record_when / record_every.
5. ASCII rendering and Stim export of simple trajectories.
"""
import io

import pytest

from qcircuitsim.circuit import (
    Circuit,
    ExpandedOp,
    every_n_gates,
    every_n_steps,
    expand_circuit,
    print_circuit,
    render_circuit,
    simulate_circuit,
    to_stim,
)
from qcircuitsim.core import InvalidProbabilityError, RNGRegistry
from qcircuitsim.gates import CZ, HaarRandom, Identity, PauliX, PauliZ
from qcircuitsim.geometry import AdjacentPair, SingleSite, StaircaseLeft, StaircaseRight
from qcircuitsim.observables import BornProbability
from qcircuitsim.state import SimulationState


def _make_staircase_circuit(L: int = 4, n_steps: int = 4) -> Circuit:
    """X walking right across the chain, one site per step."""
    with Circuit(L=L, bc="periodic", n_steps=n_steps) as c:
        c.apply(PauliX(), StaircaseRight(L))
    return c.circuit


def _make_coin_circuit(L: int = 4, n_steps: int = 6) -> Circuit:
    """Each step flips site 0 with probability 1/2."""
    with Circuit(L=L, bc="periodic", n_steps=n_steps) as c:
        c.apply_with_prob([
            (0.5, PauliX(), SingleSite(0)),
            (0.5, Identity(), SingleSite(0)),
        ])
    return c.circuit


def _make_state(L: int = 4, seed: int = 0) -> SimulationState:
    state = SimulationState(L, rng=RNGRegistry({"ctrl": seed}))
    state.track("p1", BornProbability(0, 1))
    return state


# ============================================================================
# Building
# ============================================================================

class TestBuilder:
    """Recording operations."""

    def test_records_operations(self):
        """Both operation kinds are kept in order."""
        with Circuit(L=4, n_steps=2) as c:
            c.apply(PauliX(), SingleSite(0))
            c.apply_with_prob([{"probability": 0.3, "gate": PauliZ(), "geometry": SingleSite(1)}])
        assert len(c.circuit) == 2

    def test_build_classmethod(self):
        """Circuit.build passes a builder to the callback."""
        circuit = Circuit.build(3, "open", 2, lambda b: b.apply(PauliX(), SingleSite(0)))
        assert len(circuit) == 1
        assert circuit.n_steps == 2

    def test_only_ctrl_stream(self):
        """Lazy circuits draw only from ctrl."""
        with Circuit(L=4) as c:
            with pytest.raises(ValueError):
                c.apply_with_prob([(0.5, PauliX(), SingleSite(0))], rng="born")

    def test_probabilities_above_one(self):
        """Outcome probabilities may not sum past one."""
        with Circuit(L=4) as c:
            with pytest.raises(InvalidProbabilityError):
                c.apply_with_prob([
                    (0.7, PauliX(), SingleSite(0)),
                    (0.7, PauliZ(), SingleSite(0)),
                ])

    def test_empty_outcomes(self):
        """At least one outcome is required."""
        with Circuit(L=4) as c:
            with pytest.raises(ValueError):
                c.apply_with_prob([])

    def test_apply_type_checked(self):
        """apply takes a Gate and a Geometry."""
        with Circuit(L=4) as c:
            with pytest.raises(TypeError):
                c.apply("X", SingleSite(0))

    def test_bad_dimensions(self):
        """L and n_steps are validated."""
        with pytest.raises(ValueError):
            Circuit(L=1)
        with pytest.raises(ValueError):
            Circuit(L=4, n_steps=0)


# ============================================================================
# Expansion
# ============================================================================

class TestExpansion:
    """expand_circuit semantics."""

    def test_staircase_expansion(self):
        """The staircase moves one site per step within one expansion."""
        steps = expand_circuit(_make_staircase_circuit())
        assert [[op.sites for op in step] for step in steps] == [[(0,)], [(1,)], [(2,)], [(3,)]]
        assert all(op.label == "X" for step in steps for op in step)

    def test_template_not_mutated(self):
        """Expanding twice gives the same result; the template cursor stays put."""
        circuit = _make_staircase_circuit()
        first = expand_circuit(circuit)
        second = expand_circuit(circuit)
        assert first == second
        assert circuit.operations[0].geometry.position == 0

    def test_same_seed_same_expansion(self):
        """Stochastic expansion is a function of the seed."""
        circuit = _make_coin_circuit(n_steps=20)
        assert expand_circuit(circuit, seed=4) == expand_circuit(circuit, seed=4)

    def test_remainder_gives_empty_step(self):
        """A choice that selects nothing leaves the step empty."""
        with Circuit(L=2, n_steps=1) as c:
            c.apply_with_prob([(0.0, PauliX(), SingleSite(0))])
        assert expand_circuit(c.circuit) == [[]]

    def test_two_site_expansion(self):
        """Two-site geometries expand to ordered site pairs."""
        with Circuit(L=3, n_steps=3) as c:
            c.apply(CZ(), StaircaseLeft(3))
        steps = expand_circuit(c.circuit)
        assert [step[0].sites for step in steps] == [(2, 0), (1, 2), (0, 1)]

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_execution_matches_expansion(self, seed):
        """Executing with ctrl seed s applies exactly the expanded gates."""
        circuit = _make_coin_circuit(n_steps=9)
        flips = sum(
            isinstance(op.gate, PauliX) for step in expand_circuit(circuit, seed=seed) for op in step
        )
        state = _make_state(seed=seed)
        result = simulate_circuit(circuit, state, record_when="final_only")
        assert result["p1"] == [pytest.approx(float(flips % 2))]


# ============================================================================
# Execution and recording
# ============================================================================

class TestSimulateCircuit:
    """Recording schedules."""

    def test_every_step_values(self):
        """After each repetition the staircase has flipped every site once."""
        result = simulate_circuit(_make_staircase_circuit(), _make_state(), n_circuits=3)
        assert result["p1"] == [pytest.approx(1.0), pytest.approx(0.0), pytest.approx(1.0)]

    def test_record_initial(self):
        """record_initial adds one record before the first repetition."""
        result = simulate_circuit(
            _make_staircase_circuit(), _make_state(), n_circuits=2, record_initial=True
        )
        assert len(result["p1"]) == 3
        assert result["p1"][0] == pytest.approx(0.0)

    def test_record_every(self):
        """With record_every=2 repetitions 1, 3 and 5 are recorded."""
        result = simulate_circuit(
            _make_staircase_circuit(), _make_state(), n_circuits=5, record_every=2
        )
        assert len(result["p1"]) == 3

    def test_record_every_keeps_last(self):
        """The last repetition is always recorded."""
        result = simulate_circuit(
            _make_staircase_circuit(), _make_state(), n_circuits=5, record_every=3
        )
        assert len(result["p1"]) == 3  # repetitions 1, 4 and 5

    @pytest.mark.parametrize("mode,expected", [
        ("every_gate", 12),
        ("final_only", 1),
        (every_n_gates(1), 3),
        (every_n_gates(3), 3),
        (every_n_gates(5), 2),
        (every_n_steps(2), 1),
    ])
    def test_record_when(self, mode, expected):
        """Gate-level, final and predicate-driven schedules."""
        result = simulate_circuit(
            _make_staircase_circuit(), _make_state(), n_circuits=3, record_when=mode
        )
        assert len(result["p1"]) == expected

    def test_predicate_records_once_at_repetition_end(self):
        """A predicate that fires on every gate still gives one record per
        repetition, taken after its last gate."""
        result = simulate_circuit(
            _make_staircase_circuit(), _make_state(), n_circuits=3,
            record_when=every_n_gates(1),
        )
        assert result["p1"] == [pytest.approx(1.0), pytest.approx(0.0), pytest.approx(1.0)]

    def test_template_cursor_unchanged(self):
        """Running a circuit does not move the template geometries."""
        circuit = _make_staircase_circuit()
        simulate_circuit(circuit, _make_state(), n_circuits=2)
        assert circuit.operations[0].geometry.position == 0

    def test_mismatched_state(self):
        """Circuit and state must agree on L and bc."""
        with pytest.raises(ValueError):
            simulate_circuit(_make_staircase_circuit(L=4), _make_state(L=5))

    def test_state_without_registry(self):
        """Execution needs a registry."""
        with pytest.raises(ValueError):
            simulate_circuit(_make_staircase_circuit(), SimulationState(4))

    def test_unknown_record_mode(self):
        """Unknown record_when strings are rejected."""
        with pytest.raises(ValueError):
            simulate_circuit(_make_staircase_circuit(), _make_state(), record_when="sometimes")

    def test_predicate_validation(self):
        """Predicate factories need a positive period."""
        with pytest.raises(ValueError):
            every_n_gates(0)
        with pytest.raises(ValueError):
            every_n_steps(0)


# ============================================================================
# Rendering and export
# ============================================================================

class TestOutput:
    """ASCII rendering and Stim export."""

    def test_render_ascii(self):
        """Labels sit in fixed-width columns, one row per step."""
        text = render_circuit(_make_staircase_circuit(L=3, n_steps=2), unicode=False)
        assert text.splitlines() == [
            "Circuit (L=3, bc=periodic, seed=0)",
            "",
            "      q0 q1 q2",
            "  1: |X|------",
            "  2: ---|X|---",
        ]

    def test_render_sub_rows(self):
        """Steps with several operations get lettered sub-rows."""
        with Circuit(L=2, n_steps=1) as c:
            c.apply(PauliX(), SingleSite(0))
            c.apply(CZ(), AdjacentPair(0))
        lines = render_circuit(c.circuit, unicode=False).splitlines()
        assert lines[3].strip().startswith("1a:")
        assert lines[4].strip().startswith("1b:")
        assert "CZ" in lines[4]

    def test_print_circuit_to_file(self):
        """print_circuit writes the rendering to the given file."""
        buffer = io.StringIO()
        circuit = _make_staircase_circuit()
        print_circuit(circuit, file=buffer)
        assert buffer.getvalue() == render_circuit(circuit)

    def test_to_stim_clifford(self):
        """Clifford trajectories export with TICKs between steps."""
        with Circuit(L=2, n_steps=2) as c:
            c.apply(PauliX(), SingleSite(0))
            c.apply(CZ(), AdjacentPair(0))
        stim_circuit = to_stim(c.circuit)
        names = [instruction.name for instruction in stim_circuit]
        assert names == ["X", "CZ", "TICK", "X", "CZ"]
        assert stim_circuit.num_qubits == 2

    def test_to_stim_from_expansion(self):
        """Pre-expanded trajectories are accepted."""
        expanded = [[ExpandedOp(PauliZ(), (1,), "Z")]]
        stim_circuit = to_stim(expanded)
        (instruction,) = list(stim_circuit)
        assert instruction.name == "Z"
        assert [t.value for t in instruction.targets_copy()] == [1]

    def test_to_stim_rejects_haar(self):
        """Haar gates have no Stim equivalent."""
        with Circuit(L=2, n_steps=1) as c:
            c.apply(HaarRandom(), AdjacentPair(0))
        with pytest.raises(ValueError):
            to_stim(c.circuit)

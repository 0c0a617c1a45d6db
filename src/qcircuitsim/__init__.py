"""qcircuitsim: reproducible stochastic quantum circuit simulation.

Random circuits on a 1D chain where, at every step, one random draw picks
which (gate, geometry) action to apply, and self-advancing staircase
geometries move the point of application around the ring.

Package layout:
    qcircuitsim/
    ├── core/         - errors, named RNG streams, configuration
    ├── geometry/     - static geometries and staircase cursors
    ├── gates/        - gate descriptors (Pauli, CZ, Haar, Reset, spin-1)
    ├── state/        - dense state vector and initial states
    ├── api/          - apply / apply_conditionally / apply_choice
    ├── observables/  - domain wall, entanglement, Born, string order
    ├── simulation/   - simulate, simulate_circuits, CircuitSimulation
    ├── circuit/      - lazy circuits, rendering and Stim export
    └── models/       - the control/Bernoulli (CT) model

Reproducibility contract: every probabilistic application draws exactly
one value from its named stream, before branching.
"""

__version__ = "0.1.0"

from .core import (
    UnknownStreamError,
    InvalidProbabilityError,
    RegistryFrozenError,
    StreamExhaustedError,
    PairingError,
    RandomStream,
    GeneratorStream,
    SequenceStream,
    RNGRegistry,
    BoundaryCondition,
    RNGConfig,
    SimulationConfig,
    CTModelConfig,
)
from .geometry import (
    Geometry,
    SingleSite,
    AdjacentPair,
    Bricklayer,
    AllSites,
    Direction,
    Staircase,
    StaircaseRight,
    StaircaseLeft,
    StaircasePair,
)
from .gates import (
    Gate,
    UnitaryGate,
    PauliX,
    PauliY,
    PauliZ,
    Identity,
    Projection,
    CZ,
    HaarRandom,
    Measurement,
    Reset,
    SpinSectorProjection,
    SpinSectorMeasurement,
    total_spin_projector,
)
from .state import SimulationState, ProductState, RandomState
from .api import (
    Action,
    Branch,
    Outcome,
    apply,
    apply_conditionally,
    apply_with_prob,
    apply_choice,
    apply_categorical,
)
from .observables import (
    Observable,
    BornProbability,
    DomainWall,
    EntanglementEntropy,
    StringOrder,
)
from .simulation import simulate, simulate_circuits, record_every, CircuitSimulation
from .circuit import (
    Circuit,
    CircuitBuilder,
    ExpandedOp,
    expand_circuit,
    RecordingContext,
    simulate_circuit,
    every_n_gates,
    every_n_steps,
    render_circuit,
    print_circuit,
    to_stim,
)
from .models import run_ct_model, ct_trajectory

__all__ = [
    "__version__",
    # Core
    "UnknownStreamError",
    "InvalidProbabilityError",
    "RegistryFrozenError",
    "StreamExhaustedError",
    "PairingError",
    "RandomStream",
    "GeneratorStream",
    "SequenceStream",
    "RNGRegistry",
    "BoundaryCondition",
    "RNGConfig",
    "SimulationConfig",
    "CTModelConfig",
    # Geometry
    "Geometry",
    "SingleSite",
    "AdjacentPair",
    "Bricklayer",
    "AllSites",
    "Direction",
    "Staircase",
    "StaircaseRight",
    "StaircaseLeft",
    "StaircasePair",
    # Gates
    "Gate",
    "UnitaryGate",
    "PauliX",
    "PauliY",
    "PauliZ",
    "Identity",
    "Projection",
    "CZ",
    "HaarRandom",
    "Measurement",
    "Reset",
    "SpinSectorProjection",
    "SpinSectorMeasurement",
    "total_spin_projector",
    # State
    "SimulationState",
    "ProductState",
    "RandomState",
    # Application API
    "Action",
    "Branch",
    "Outcome",
    "apply",
    "apply_conditionally",
    "apply_with_prob",
    "apply_choice",
    "apply_categorical",
    # Observables
    "Observable",
    "BornProbability",
    "DomainWall",
    "EntanglementEntropy",
    "StringOrder",
    # Drivers
    "simulate",
    "simulate_circuits",
    "record_every",
    "CircuitSimulation",
    # Lazy circuits
    "Circuit",
    "CircuitBuilder",
    "ExpandedOp",
    "expand_circuit",
    "RecordingContext",
    "simulate_circuit",
    "every_n_gates",
    "every_n_steps",
    "render_circuit",
    "print_circuit",
    "to_stim",
    # Models
    "run_ct_model",
    "ct_trajectory",
]

"""Core types: errors, RNG streams and configuration."""

from .errors import (
    UnknownStreamError,
    InvalidProbabilityError,
    RegistryFrozenError,
    StreamExhaustedError,
    PairingError,
)
from .rng import (
    STANDARD_STREAMS,
    RandomStream,
    GeneratorStream,
    SequenceStream,
    RNGRegistry,
)
from .config import (
    BoundaryCondition,
    RNGConfig,
    SimulationConfig,
    CTModelConfig,
    check_probability,
)

__all__ = [
    # Errors
    "UnknownStreamError",
    "InvalidProbabilityError",
    "RegistryFrozenError",
    "StreamExhaustedError",
    "PairingError",
    # RNG
    "STANDARD_STREAMS",
    "RandomStream",
    "GeneratorStream",
    "SequenceStream",
    "RNGRegistry",
    # Config
    "BoundaryCondition",
    "RNGConfig",
    "SimulationConfig",
    "CTModelConfig",
    "check_probability",
]

"""Gates: immutable operation descriptors applied through ``Gate.apply_to``."""

from .base import Gate, UnitaryGate
from .single_qubit import PauliX, PauliY, PauliZ, Identity, Projection
from .two_qubit import CZ, HaarRandom, haar_unitary
from .composite import Measurement, Reset
from .spin import (
    SPIN_SECTORS,
    spin_matrices,
    total_spin_projector,
    SpinSectorProjection,
    SpinSectorMeasurement,
)

__all__ = [
    # Base
    "Gate",
    "UnitaryGate",
    # Single qubit
    "PauliX",
    "PauliY",
    "PauliZ",
    "Identity",
    "Projection",
    # Two qubit
    "CZ",
    "HaarRandom",
    "haar_unitary",
    # Measurement based
    "Measurement",
    "Reset",
    # Spin-1
    "SPIN_SECTORS",
    "spin_matrices",
    "total_spin_projector",
    "SpinSectorProjection",
    "SpinSectorMeasurement",
]

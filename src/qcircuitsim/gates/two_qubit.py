# src/qcircuitsim/gates/two_qubit.py
"""Two-site gates: controlled-Z and Haar random unitaries."""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from qcircuitsim.gates.base import UnitaryGate, require_qubits, require_registry

if TYPE_CHECKING:
    from qcircuitsim.core.rng import RandomStream
    from qcircuitsim.state.state import SimulationState


class CZ(UnitaryGate):
    """Controlled-Z; symmetric in its two qubits."""
    support = 2
    label = "CZ"
    stim_name = "CZ"

    def matrix(self, state: "SimulationState") -> np.ndarray:
        require_qubits(self, state)
        return np.diag([1, 1, 1, -1]).astype(complex)


def haar_unitary(n: int, stream: "RandomStream") -> np.ndarray:
    """Haar-distributed ``n x n`` unitary drawn from ``stream``.

    The real part of the Gaussian matrix is drawn first, then the
    imaginary part. After ``Z = QR`` each column of ``Q`` is scaled by
    the phase of the matching diagonal entry of ``R``.
    """
    z = np.asarray(stream.normal((n, n))) + 1j * np.asarray(stream.normal((n, n)))
    q, r = np.linalg.qr(z)
    diag = np.diag(r)
    return q * (diag / np.abs(diag))


class HaarRandom(UnitaryGate):
    """Two-site Haar random unitary, fresh on every application.

    Draws ``2 * d**4`` normals from the ``haar`` stream of the state's
    registry.
    """
    support = 2
    label = "Haar"

    def matrix(self, state: "SimulationState") -> np.ndarray:
        registry = require_registry(self, state)
        n = state.local_dim ** 2
        return haar_unitary(n, registry.get_stream("haar"))

# src/qcircuitsim/core/errors.py
"""
Exception types raised by the simulation core.

Every error is surfaced to the caller unmodified; nothing in the core
retries or clamps.

Classes
-------
UnknownStreamError
    A stream name was looked up that was never registered.
InvalidProbabilityError
    A probability (or a set of outcome probabilities) is out of range.
RegistryFrozenError
    A stream was registered after the registry was put in use.
StreamExhaustedError
    A replayed stream has no recorded values left.
PairingError
    A forward/backward staircase pair drifted out of its invariant.
"""
from __future__ import annotations


class UnknownStreamError(KeyError):
    """Raised when an RNG stream name is not present in the registry."""

    def __init__(self, name: str, known=()):
        self.name = name
        self.known = tuple(sorted(known))
        super().__init__(name)

    def __str__(self) -> str:
        if self.known:
            return f"Unknown RNG stream {self.name!r}; registered: {', '.join(self.known)}"
        return f"Unknown RNG stream {self.name!r}"


class InvalidProbabilityError(ValueError):
    """Raised for probabilities outside [0, 1] or outcome sums above 1."""


class RegistryFrozenError(RuntimeError):
    """Raised when registering a stream after simulation steps have begun."""


class StreamExhaustedError(RuntimeError):
    """Raised when a replayed stream runs out of recorded values."""


class PairingError(RuntimeError):
    """Raised when a paired forward/backward staircase invariant is violated."""

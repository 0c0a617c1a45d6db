# src/qcircuitsim/geometry/staircase.py
"""
Staircase cursors: geometries that move themselves after each use.

A staircase walks a ring of ``ring_size`` sites in a fixed direction.
It targets the pair ``(position, position + 1 mod L)`` (single-site gates
act on ``position``) and, when the application engine has used it, steps
by ``+1`` (forward) or ``-1`` (backward) with wraparound.

With periodic boundaries the cursor cycles over all ``L`` positions.
With open boundaries it cycles over the ``L - 1`` positions that have a
right neighbour, ``0 .. L-2``.

Paired cursors
--------------
Two staircases of opposite direction over the same ring are often used as
the two arms of one either/or decision (a reset moving left, a scrambling
gate moving right). They are never synchronised implicitly. Because each
engine call advances at most one of them, by one step, their separation
grows by exactly one per fired call::

    (forward.position - backward.position) mod P
        == (initial separation + fired calls) mod P

where ``P`` is the cursor period. :class:`StaircasePair` checks this.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple, Union

from qcircuitsim.core.config import BoundaryCondition
from qcircuitsim.core.errors import PairingError
from qcircuitsim.geometry.base import Geometry, Sites

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Step direction of a staircase."""
    FORWARD = 1
    BACKWARD = -1


class Staircase(Geometry):
    """Stateful cursor over a ring of sites.

    Parameters
    ----------
    ring_size : int
        Number of sites ``L`` in the ring.
    direction : Direction or str
        ``"forward"`` (+1) or ``"backward"`` (-1). Fixed for the lifetime
        of the cursor.
    start : int
        Initial position, ``0 <= start < period``.
    bc : str or BoundaryCondition
        Boundary condition deciding the cursor period (``L`` periodic,
        ``L - 1`` open).

    Attributes
    ----------
    advances : int
        Number of times :meth:`advance` has been called.
    """

    def __init__(
        self,
        ring_size: int,
        direction: Union[str, Direction],
        start: int = 0,
        bc: Union[str, BoundaryCondition] = BoundaryCondition.PERIODIC,
    ):
        ring_size = int(ring_size)
        self._bc = BoundaryCondition.coerce(bc)
        minimum = 2 if self._bc is BoundaryCondition.OPEN else 1
        if ring_size < minimum:
            raise ValueError(
                f"ring_size must be at least {minimum} for {self._bc.value} "
                f"boundaries, got {ring_size}"
            )
        if isinstance(direction, str):
            try:
                direction = Direction[direction.upper()]
            except KeyError:
                raise ValueError(
                    f"direction must be 'forward' or 'backward', got {direction!r}"
                ) from None
        self._ring_size = ring_size
        self._direction = Direction(direction)
        period = self.period
        if not 0 <= int(start) < period:
            raise ValueError(f"start must be in [0, {period}), got {start}")
        self._start = int(start)
        self._position = int(start)
        self.advances = 0

    # ── read-only attributes ────────────────────────────────────────────

    @property
    def ring_size(self) -> int:
        return self._ring_size

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def bc(self) -> BoundaryCondition:
        return self._bc

    @property
    def start(self) -> int:
        return self._start

    @property
    def period(self) -> int:
        """Number of distinct positions the cursor cycles through."""
        if self._bc is BoundaryCondition.OPEN:
            return self._ring_size - 1
        return self._ring_size

    @property
    def position(self) -> int:
        return self._position

    def current_site(self) -> int:
        """Current target site (0-based)."""
        return self._position

    # ── geometry protocol ───────────────────────────────────────────────

    def elements(self, L: int, bc: Union[str, BoundaryCondition]) -> List[Sites]:
        if L != self._ring_size:
            raise ValueError(
                f"{type(self).__name__} built for L={self._ring_size}, used with L={L}"
            )
        if BoundaryCondition.coerce(bc) is not self._bc:
            raise ValueError(
                f"{type(self).__name__} built for {self._bc.value} boundaries, "
                f"used with {BoundaryCondition.coerce(bc).value}"
            )
        pos = self._position
        return [(pos, (pos + 1) % L)]

    def advance(self) -> None:
        """Step once in the cursor's direction, wrapping at the ring edges."""
        old = self._position
        self._position = (old + self._direction.value) % self.period
        self.advances += 1
        logger.debug(
            "%s advanced %d -> %d", type(self).__name__, old, self._position
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(ring_size={self._ring_size}, "
            f"direction={self._direction.name.lower()}, "
            f"position={self._position}, bc={self._bc.value})"
        )


class StaircaseRight(Staircase):
    """Forward (+1) staircase, starting at site 0 by default."""

    def __init__(
        self,
        ring_size: int,
        start: int = 0,
        bc: Union[str, BoundaryCondition] = BoundaryCondition.PERIODIC,
    ):
        super().__init__(ring_size, Direction.FORWARD, start=start, bc=bc)


class StaircaseLeft(Staircase):
    """Backward (-1) staircase, starting at the last position by default."""

    def __init__(
        self,
        ring_size: int,
        start: Optional[int] = None,
        bc: Union[str, BoundaryCondition] = BoundaryCondition.PERIODIC,
    ):
        if start is None:
            open_bc = BoundaryCondition.coerce(bc) is BoundaryCondition.OPEN
            start = int(ring_size) - (2 if open_bc else 1)
        super().__init__(ring_size, Direction.BACKWARD, start=start, bc=bc)


class StaircasePair:
    """A forward and a backward staircase used as the two arms of one choice.

    The pair holds no position of its own. It records the cursors' initial
    separation and checks, on :meth:`verify`, that they still satisfy

    ``(forward.position - backward.position) mod P == (s0 + fired) mod P``

    where ``fired`` counts advances of either cursor.

    Parameters
    ----------
    forward : Staircase
        Cursor stepping ``+1``.
    backward : Staircase
        Cursor stepping ``-1`` over the same ring.
    """

    def __init__(self, forward: Staircase, backward: Staircase):
        if forward.direction is not Direction.FORWARD:
            raise ValueError("forward cursor must have direction FORWARD")
        if backward.direction is not Direction.BACKWARD:
            raise ValueError("backward cursor must have direction BACKWARD")
        if forward.ring_size != backward.ring_size or forward.bc is not backward.bc:
            raise ValueError(
                "paired cursors must share ring size and boundary condition"
            )
        self.forward = forward
        self.backward = backward
        self._initial_separation = self.separation
        self._seen: Tuple[int, int] = (forward.advances, backward.advances)
        self.fired = 0

    @property
    def period(self) -> int:
        return self.forward.period

    @property
    def separation(self) -> int:
        """``(forward.position - backward.position) mod P``."""
        return (self.forward.position - self.backward.position) % self.period

    def expected_separation(self) -> int:
        return (self._initial_separation + self.fired) % self.period

    def verify(self) -> int:
        """Check the pairing invariant; return the number of fired calls.

        Raises
        ------
        PairingError
            If both cursors advanced since the previous check, either
            advanced more than once, or the separation no longer matches.
        """
        moved_f = self.forward.advances - self._seen[0]
        moved_b = self.backward.advances - self._seen[1]
        if moved_f + moved_b > 1:
            raise PairingError(
                f"Paired cursors advanced {moved_f} (forward) and {moved_b} "
                "(backward) times since the last check; at most one step allowed"
            )
        self.fired += moved_f + moved_b
        self._seen = (self.forward.advances, self.backward.advances)
        if self.separation != self.expected_separation():
            raise PairingError(
                f"Cursor separation {self.separation} != expected "
                f"{self.expected_separation()} after {self.fired} fired calls"
            )
        return self.fired

    def logical_site(self) -> int:
        """Site observables are sampled at: one right of the backward cursor."""
        return (self.backward.position + 1) % self.forward.ring_size

    def __repr__(self) -> str:
        return f"StaircasePair(forward={self.forward!r}, backward={self.backward!r})"

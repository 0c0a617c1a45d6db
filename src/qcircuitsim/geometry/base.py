# src/qcircuitsim/geometry/base.py
"""
Geometry base class.

A geometry says *where* a gate acts. It expands to one or more
*elements* (tuples of 0-based site indices), one gate application per
element, and may carry state that moves each time it is used.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple, Union

from qcircuitsim.core.config import BoundaryCondition

Sites = Tuple[int, ...]


class Geometry(ABC):
    """Abstract description of the site(s) a gate acts on."""

    @abstractmethod
    def elements(self, L: int, bc: Union[str, BoundaryCondition]) -> List[Sites]:
        """Site tuples for each gate application on a chain of ``L`` sites."""

    @property
    def is_compound(self) -> bool:
        """True if the geometry expands to more than one application."""
        return False

    def advance(self) -> None:
        """Move to the next position after use. Static geometries do nothing."""
        return None


def check_site(site: int, L: int) -> int:
    """Validate a 0-based site index against chain length ``L``."""
    if not 0 <= site < L:
        raise ValueError(f"site {site} out of range for L={L}")
    return site

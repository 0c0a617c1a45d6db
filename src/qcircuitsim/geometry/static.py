# src/qcircuitsim/geometry/static.py
"""
Static geometries: sites are fixed at construction time.

Classes
-------
SingleSite
    One physical site.
AdjacentPair
    Sites ``(first, first + 1)``, wrapping to ``(L - 1, 0)`` on a ring.
Bricklayer
    A full layer of nearest- or next-nearest-neighbour pairs.
AllSites
    Every site, one application each.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from qcircuitsim.core.config import BoundaryCondition
from qcircuitsim.geometry.base import Geometry, Sites, check_site


@dataclass(frozen=True)
class SingleSite(Geometry):
    """A single physical site."""
    site: int

    def elements(self, L: int, bc: Union[str, BoundaryCondition]) -> List[Sites]:
        return [(check_site(self.site, L),)]


@dataclass(frozen=True)
class AdjacentPair(Geometry):
    """Nearest-neighbour pair starting at ``first``."""
    first: int

    def elements(self, L: int, bc: Union[str, BoundaryCondition]) -> List[Sites]:
        bc = BoundaryCondition.coerce(bc)
        check_site(self.first, L)
        if self.first == L - 1:
            if bc is BoundaryCondition.OPEN:
                raise ValueError(
                    f"AdjacentPair({self.first}) has no right neighbour with open boundaries"
                )
            return [(L - 1, 0)]
        return [(self.first, self.first + 1)]


BRICKLAYER_PARITIES = (
    "odd",
    "even",
    "nnn_odd_1",
    "nnn_odd_2",
    "nnn_even_1",
    "nnn_even_2",
)


@dataclass(frozen=True)
class Bricklayer(Geometry):
    """Layer of disjoint pairs covering the chain.

    Nearest-neighbour parities (0-based sites):

    - ``odd``  -> (0,1), (2,3), (4,5), ...
    - ``even`` -> (1,2), (3,4), ... plus (L-1, 0) with periodic boundaries

    Next-nearest-neighbour parities (four sublayers, stride 4):

    - ``nnn_odd_1``  -> (0,2), (4,6), ...
    - ``nnn_odd_2``  -> (2,4), (6,8), ... plus (L-2, 0) on a ring
    - ``nnn_even_1`` -> (1,3), (5,7), ...
    - ``nnn_even_2`` -> (3,5), (7,9), ... plus (L-1, 1) on a ring
    """
    parity: str

    def __post_init__(self) -> None:
        if self.parity not in BRICKLAYER_PARITIES:
            raise ValueError(
                f"Bricklayer parity must be one of {', '.join(BRICKLAYER_PARITIES)}, "
                f"got {self.parity!r}"
            )

    @property
    def is_compound(self) -> bool:
        return True

    def elements(self, L: int, bc: Union[str, BoundaryCondition]) -> List[Sites]:
        periodic = BoundaryCondition.coerce(bc) is BoundaryCondition.PERIODIC
        parity = self.parity
        if parity == "odd":
            return [(i, i + 1) for i in range(0, L - 1, 2)]
        if parity == "even":
            pairs = [(i, i + 1) for i in range(1, L - 1, 2)]
            if periodic:
                pairs.append((L - 1, 0))
            return pairs

        # next-nearest neighbours
        offset = {"nnn_odd_1": 0, "nnn_even_1": 1, "nnn_odd_2": 2, "nnn_even_2": 3}[parity]
        pairs = [(i, i + 2) for i in range(offset, L - 2, 4)]
        if periodic and L >= 4:
            if parity == "nnn_odd_2":
                pairs.append((L - 2, 0))
            elif parity == "nnn_even_2":
                pairs.append((L - 1, 1))
        return pairs


@dataclass(frozen=True)
class AllSites(Geometry):
    """Every site of the chain, one single-site application each."""

    @property
    def is_compound(self) -> bool:
        return True

    def elements(self, L: int, bc: Union[str, BoundaryCondition]) -> List[Sites]:
        return [(site,) for site in range(L)]

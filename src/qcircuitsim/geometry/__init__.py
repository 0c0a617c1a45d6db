"""Geometries: where gates act, including self-advancing staircases."""

from .base import Geometry, Sites, check_site
from .static import (
    BRICKLAYER_PARITIES,
    SingleSite,
    AdjacentPair,
    Bricklayer,
    AllSites,
)
from .staircase import (
    Direction,
    Staircase,
    StaircaseRight,
    StaircaseLeft,
    StaircasePair,
)

__all__ = [
    # Base
    "Geometry",
    "Sites",
    "check_site",
    # Static
    "BRICKLAYER_PARITIES",
    "SingleSite",
    "AdjacentPair",
    "Bricklayer",
    "AllSites",
    # Staircases
    "Direction",
    "Staircase",
    "StaircaseRight",
    "StaircaseLeft",
    "StaircasePair",
]

"""Gate application API: deterministic and probabilistic."""

from .probabilistic import (
    Action,
    Branch,
    Outcome,
    apply,
    apply_conditionally,
    apply_with_prob,
    apply_choice,
    apply_categorical,
)

__all__ = [
    "Action",
    "Branch",
    "Outcome",
    "apply",
    "apply_conditionally",
    "apply_with_prob",
    "apply_choice",
    "apply_categorical",
]

"""Complete circuit models built on the application engine."""

from .ct_model import CT_STYLES, run_ct_model, ct_trajectory

__all__ = [
    "CT_STYLES",
    "run_ct_model",
    "ct_trajectory",
]

r"""Equation-of-state derivative callbacks for the radial profile integrators."""

from .base import DerivativeEOS
from .families import PolytropicEOS, PiecewisePolytropicEOS, TabulatedEOS

__all__ = [
    "DerivativeEOS",
    "PolytropicEOS",
    "PiecewisePolytropicEOS",
    "TabulatedEOS",
]

r"""Readers and writers for stellar profiles."""

from .readers import StellarProfile, read_kepler, read_mesa
from .writers import write_bonnor_ebert, write_profile

__all__ = [
    "StellarProfile",
    "read_kepler",
    "read_mesa",
    "write_bonnor_ebert",
    "write_profile",
]

"""Configuration module for radialProfiles runs."""

from .parser import load_config
from .schema import (
    ProfileConfig,
    UnitsConfig,
    UniformConfig,
    EvrardConfig,
    PolytropeConfig,
    PiecewisePolytropeConfig,
    BonnorEbertConfig,
)

__all__ = [
    "load_config",
    "ProfileConfig",
    "UnitsConfig",
    "UniformConfig",
    "EvrardConfig",
    "PolytropeConfig",
    "PiecewisePolytropeConfig",
    "BonnorEbertConfig",
]

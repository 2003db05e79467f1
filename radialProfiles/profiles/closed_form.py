r"""
Closed-form density profiles.

Both profiles sample ``ng`` radii :math:`r_i = i\,R/n_g`, :math:`i = 1..n_g`;
they need no integration.
"""

import jax.numpy as jnp

from radialProfiles import utils
from radialProfiles.profiles.data_classes import RadialProfile


def _grid(ng: int, radius: float):
    if ng < 1:
        raise ValueError(f"Need at least one sample, got ng={ng}")
    if radius <= 0.0:
        raise ValueError(f"Radius must be positive, got {radius}")
    dr = radius / ng
    return jnp.arange(1, ng + 1, dtype=jnp.float64) * dr


def uniform_profile(ng: int, mass: float, radius: float) -> RadialProfile:
    r"""
    Uniform-density sphere, :math:`\rho = 3M / (4\pi R^3)`.

    Args:
        ng (int): Number of samples.
        mass (float): Total mass [code units].
        radius (float): Sphere radius [code units].

    Returns:
        RadialProfile: Radii and the constant density.
    """
    r = _grid(ng, radius)
    density = 3.0 * mass / (utils.fourpi * radius**3)
    return RadialProfile(r=r, rho=jnp.full_like(r, density))


def evrard_profile(ng: int, mass: float, radius: float) -> RadialProfile:
    r"""
    Evrard collapse profile, :math:`\rho(r) = M / (2\pi R^2 r)`.

    The enclosed mass of this profile grows as :math:`M (r/R)^2`.

    Args:
        ng (int): Number of samples.
        mass (float): Total mass [code units].
        radius (float): Sphere radius [code units].

    Returns:
        RadialProfile: Radii and densities.
    """
    r = _grid(ng, radius)
    rho = mass / (2.0 * utils.pi * radius * radius * r)
    return RadialProfile(r=r, rho=rho)

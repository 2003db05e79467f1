r"""
Enclosed mass of a tabulated density profile.

The mass is accumulated shell by shell with a midpoint rule. Sample :math:`i`
owns the shell between the midpoints to its neighbours,

.. math::
    M_i = M_{i-1} + 4\pi r_i^2 \rho_i \left(r_{i+1/2} - r_{i-1/2}\right),

the innermost sample is a uniform sphere out to :math:`r_{1/2}`, and the
outermost shell ends at the last radius itself.
"""

import jax.numpy as jnp
from jaxtyping import Array, Float

from radialProfiles import utils


def calc_mass_enc(
    r: Float[Array, "npts"], rho: Float[Array, "npts"]
) -> Float[Array, "npts"]:
    r"""
    Enclosed mass at every radius of a profile.

    Args:
        r (Array): Radii, increasing [code units].
        rho (Array): Densities at those radii [code units].

    Returns:
        Array: Enclosed mass :math:`M(<r_i)` [code units].

    Raises:
        ValueError: If fewer than two samples are given or the shapes differ.
    """
    r = jnp.asarray(r, dtype=jnp.float64)
    rho = jnp.asarray(rho, dtype=jnp.float64)
    if r.shape != rho.shape or r.ndim != 1:
        raise ValueError(
            f"Radius and density must be matching 1-D tables, got {r.shape} and {rho.shape}"
        )
    if r.shape[0] < 2:
        raise ValueError("Need at least two samples to integrate the enclosed mass")

    mid = 0.5 * (r[1:] + r[:-1])
    outer = jnp.concatenate([mid[1:], r[-1:]])

    core = mid[0] ** 3 * rho[0] / 3.0
    shells = rho[1:] * r[1:] ** 2 * (outer - mid)
    dm = jnp.concatenate([jnp.array([core]), shells])

    return jnp.cumsum(dm) * utils.fourpi


def calc_total_mass(r, rho) -> float:
    """Total mass of a profile, the last entry of :func:`calc_mass_enc`."""
    return float(calc_mass_enc(r, rho)[-1])

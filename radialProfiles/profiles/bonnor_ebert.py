r"""
Bonnor-Ebert spheres.

The isothermal sphere obeys, in dimensionless form with
:math:`\rho = \rho_c e^{\phi}`,

.. math::
    \frac{d^2\phi}{d\xi^2} + \frac{2}{\xi}\frac{d\phi}{d\xi} = -e^{\phi},

the Lane-Emden equation for :math:`\gamma = 1`. It has a single solution
shape, so it is integrated once out to :math:`5.01 \times 6.45` (just past
five critical radii) and rescaled to physical units with

.. math::
    r_0 = \frac{c_s}{\sqrt{4\pi\rho_c}},\quad r = r_0 \xi,\quad
    M = \rho_c r_0^3 m(\xi),

where :math:`c_s` is the isothermal sound speed and :math:`G = 1`.
"""

import os
from typing import Optional

import jax.numpy as jnp
import numpy as np

from radialProfiles import utils
from radialProfiles.io.writers import write_bonnor_ebert
from radialProfiles.logging_config import get_logger
from radialProfiles.profiles.data_classes import (
    BonnorEbertParameters,
    BonnorEbertSphere,
    DensityAndMass,
    DensityAndNormalisedRadius,
    DensityAndRadius,
    NormalisedAndPhysicalRadius,
    NormalisedRadiusAndMass,
    RadialProfile,
    RadiusAndMass,
)
from radialProfiles.profiles.exceptions import PhysicalValidityError

logger = get_logger("radialprofiles.bonnor_ebert")

XI_CRITICAL = 6.45  # Normalised radius of the critical sphere
XI_SPAN = 5.01 * XI_CRITICAL
CRITICAL_CONTRAST = 14.1  # Minimum central-to-edge density ratio for collapse
DEFAULT_NORMALISED_RADIUS = 7.45
PROFILE_FILENAME = "BonnorEbert.txt"


def integrate_isothermal(npts: int):
    r"""
    Dimensionless isothermal sphere on ``npts`` samples of :math:`\xi`.

    The explicit two-step scheme starts from :math:`\phi(0) = 0` with the
    slope seeded as :math:`-e^{0}\Delta\xi` and accumulates the enclosed mass
    :math:`m = \sum 4\pi\xi^2 e^\phi \Delta\xi` as it goes.

    Returns:
        tuple: :math:`\xi`, :math:`m(\xi)` and :math:`\rho/\rho_c`, each of
        length ``npts``.
    """
    if npts < 2:
        raise ValueError(f"Need at least two samples, got npts={npts}")

    dxi = XI_SPAN / npts
    xi_tab = np.zeros(npts)
    m_tab = np.zeros(npts)
    rho_tab = np.zeros(npts)
    rho_tab[0] = 1.0

    phi = 0.0
    func = 0.0
    containedmass = 0.0
    dfunc = -np.exp(phi) * dxi
    for j in range(1, npts):
        xi = j * dxi
        func += dfunc
        phi += func * dxi
        dfunc = (-np.exp(phi) - 2.0 * func / xi) * dxi
        rho = np.exp(phi)
        containedmass += utils.fourpi * xi * xi * rho * dxi
        xi_tab[j] = xi
        m_tab[j] = containedmass
        rho_tab[j] = rho

    return xi_tab, m_tab, rho_tab


def _last_below(values, limit) -> int:
    # 1-based count of the samples up to the last one strictly below limit
    below = np.nonzero(np.asarray(values) < limit)[0]
    return int(below[-1]) + 1 if below.size else 1


def check_density_contrast(
    central_density: float, edge_density: float, override: bool = False
) -> float:
    r"""
    Check that a Bonnor-Ebert sphere is unstable to collapse.

    Spheres with :math:`\rho_c / \rho_\mathrm{edge} < 14.1` are stable.

    Args:
        central_density (float): Central density.
        edge_density (float): Density at the edge of the sphere.
        override (bool, optional): Only warn instead of failing.

    Returns:
        float: The density contrast.

    Raises:
        PhysicalValidityError: If the contrast is too low and not overridden.
    """
    contrast = central_density / edge_density
    if contrast < CRITICAL_CONTRAST:
        message = (
            f"The density ratio between the central and edge densities ({contrast:.4f}) "
            f"is below {CRITICAL_CONTRAST} and the sphere will not collapse."
        )
        if not override:
            logger.error(message)
            raise PhysicalValidityError(message, contrast=contrast)
        logger.warning(message + " Continuing because the check is overridden.")
    return contrast


def bonnor_ebert_profile(
    parameters: BonnorEbertParameters,
    sound_speed: float,
    npts: int = 10000,
    gmw: float = 2.381,
    units: Optional[utils.CodeUnits] = None,
    override_critical: bool = False,
    write_profile: bool = True,
    outdir: str = ".",
) -> BonnorEbertSphere:
    r"""
    Bonnor-Ebert sphere matching one of six pairs of physical inputs.

    The variant of ``parameters`` selects which quantities are fixed:

    - ``DensityAndRadius``: :math:`\rho_c` and :math:`R`;
    - ``DensityAndNormalisedRadius``: :math:`\rho_c` and :math:`\xi_\mathrm{BE}`;
    - ``DensityAndMass``: :math:`\rho_c` and :math:`M`;
    - ``NormalisedAndPhysicalRadius``: :math:`\xi_\mathrm{BE}`, :math:`R` and
      an overdensity factor multiplying the density;
    - ``NormalisedRadiusAndMass``: :math:`\xi_\mathrm{BE}`, :math:`M` and an
      overdensity factor (mass :math:`= f M_\mathrm{BE}`);
    - ``RadiusAndMass``: :math:`R` and :math:`M`, the overdensity factor
      follows.

    The edge is the last sample inside the requested radius or mass. After
    the validity check the profile out to the edge is written to
    ``BonnorEbert.txt`` in ``outdir``.

    Args:
        parameters: One of the Bonnor-Ebert parameter variants [code units].
        sound_speed (float): Isothermal sound speed [code units].
        npts (int, optional): Number of samples over the full span.
        gmw (float, optional): Mean molecular weight, for reporting only.
        units (CodeUnits, optional): Code units, for reporting only.
        override_critical (bool, optional): Keep stable spheres.
        write_profile (bool, optional): Write ``BonnorEbert.txt``.
        outdir (str, optional): Directory of the written profile.

    Returns:
        BonnorEbertSphere: Scaled tables and the sphere properties.

    Raises:
        PhysicalValidityError: If the sphere is too shallow to collapse.
    """
    if units is None:
        units = utils.CodeUnits()
    if sound_speed <= 0.0:
        raise ValueError(f"Sound speed must be positive, got {sound_speed}")

    xi_tab, m_tab, rho_tab = integrate_isothermal(npts)
    cs = sound_speed
    n_edge = npts
    overdensity = getattr(parameters, "overdensity", 1.0)

    if isinstance(parameters, (DensityAndRadius, DensityAndNormalisedRadius, DensityAndMass)):
        central_density = parameters.central_density
    elif isinstance(parameters, NormalisedAndPhysicalRadius):
        central_density = (cs * parameters.normalised_radius / parameters.radius) ** 2 / utils.fourpi
    elif isinstance(parameters, RadiusAndMass):
        central_density = (cs * DEFAULT_NORMALISED_RADIUS / parameters.radius) ** 2 / utils.fourpi
    elif isinstance(parameters, NormalisedRadiusAndMass):
        n_edge = _last_below(xi_tab, parameters.normalised_radius)
        central_density = (
            cs**3 * m_tab[n_edge - 1] * overdensity / parameters.mass
        ) ** 2 / utils.fourpi**3
    else:
        raise TypeError(f"Unknown Bonnor-Ebert parameterisation: {type(parameters).__name__}")

    if central_density <= 0.0:
        raise ValueError(f"Central density must be positive, got {central_density}")
    r0 = cs / np.sqrt(utils.fourpi * central_density)

    r = jnp.asarray(xi_tab) * r0
    mass = jnp.asarray(m_tab) * central_density * r0**3
    rho = jnp.asarray(rho_tab) * central_density

    if isinstance(parameters, DensityAndNormalisedRadius):
        n_edge = _last_below(xi_tab, parameters.normalised_radius)
    elif isinstance(parameters, (DensityAndRadius, NormalisedAndPhysicalRadius, RadiusAndMass)):
        n_edge = _last_below(r, parameters.radius)
    elif isinstance(parameters, DensityAndMass):
        n_edge = _last_below(mass, parameters.mass)

    if isinstance(parameters, NormalisedAndPhysicalRadius):
        central_density = central_density * overdensity
        mass = mass * overdensity
        rho = rho * overdensity
    elif isinstance(parameters, (NormalisedRadiusAndMass, RadiusAndMass)):
        if isinstance(parameters, RadiusAndMass):
            overdensity = float(parameters.mass / mass[n_edge - 1])
        central_density = central_density / np.sqrt(overdensity)
        mass = mass * overdensity
        rho = rho / np.sqrt(overdensity)

    edge = n_edge - 1
    sphere = BonnorEbertSphere(
        profile=RadialProfile(r=r, rho=rho, mass=mass),
        n_edge=n_edge,
        central_density=float(central_density),
        edge_density=float(rho[edge]),
        radius=float(r[edge]),
        normalised_radius=float(r[edge] / r0),
        mass=float(mass[edge]),
        overdensity=float(overdensity),
    )
    _log_properties(sphere, gmw, units)

    check_density_contrast(sphere.central_density, sphere.edge_density, override_critical)

    if write_profile:
        write_bonnor_ebert(
            os.path.join(outdir, PROFILE_FILENAME),
            r[:n_edge],
            mass[:n_edge],
            rho[:n_edge],
        )
    return sphere


def _log_properties(sphere: BonnorEbertSphere, gmw: float, units: utils.CodeUnits):
    rho_cgs = sphere.central_density * units.unit_density
    radius_cm = sphere.radius * units.udist
    mass_msun = sphere.mass * units.umass / utils.solarm
    # Temperature of a sphere of this mass and radius in equilibrium
    temperature = sphere.mass * units.umass * utils.pc / (radius_cm * utils.solarm * 2.02)

    logger.info("------ BE sphere properties --------")
    logger.info(f" Central density (code units) = {sphere.central_density:.6e}")
    logger.info(f" Central density (g/cm^3)     = {rho_cgs:.6e}")
    logger.info(f" Central density (1/cm^3)     = {rho_cgs / (gmw * utils.mass_proton_cgs):.6e}")
    logger.info(f" Radius (dimensionless) = {sphere.normalised_radius:.6f}")
    logger.info(f" Radius (code)          = {sphere.radius:.6e}")
    logger.info(f" Radius (cm)            = {radius_cm:.6e}")
    logger.info(f" Radius (au)            = {radius_cm / utils.au:.6e}")
    logger.info(f" Radius (pc)            = {radius_cm / utils.pc:.6e}")
    logger.info(f" Total mass (Msun)      = {mass_msun:.6e}")
    logger.info(f" Overdensity factor     = {sphere.overdensity:.6f}")
    logger.info(f" rho_c/rho_outer             = {sphere.density_contrast:.6f}")
    logger.info(f" Equilibrium temperature (K) = {temperature:.6e}")

r"""
Polytropic density profiles from the Lane-Emden equation.

With :math:`v = \xi\theta` the Lane-Emden equation for index
:math:`n = 1/(\gamma - 1)` becomes

.. math::
    \frac{d^2 v}{d\xi^2} = -\xi \left(\frac{v}{\xi}\right)^n,

which is integrated outwards with the central-difference recursion

.. math::
    v_{i+1} = 2 v_i - v_{i-1} - \Delta\xi^2\, \xi_i (v_i/\xi_i)^n,

seeded by the series :math:`v_0 = 0`, :math:`v_1 = \Delta\xi(1 - \Delta\xi^2/6)`
so that the coordinate singularity at the centre is never evaluated.
The profile ends at the last sample before :math:`v` turns negative.

Because the polytropic equation is self-similar, a single unit-density
solution is rescaled analytically to any mass and polytropic constant
(assumes :math:`G = 1`).
"""

from typing import Optional

import numpy as np

from radialProfiles import utils
from radialProfiles.logging_config import get_logger
from radialProfiles.profiles.data_classes import (
    IntegrationStatus,
    PolytropeResult,
    RadialProfile,
    ShootingResult,
)
from radialProfiles.profiles.exceptions import IntegrationOverrunError, ProfileError
from radialProfiles.profiles.mass import calc_mass_enc, calc_total_mass

logger = get_logger("radialprofiles")

DEFAULT_DR = 1.0e-3
MAX_STEP_DOUBLINGS = 32
GAMMA_UNBOUND = 1.2  # n = 5 and softer have infinite radius


def _shoot_lane_emden(n, dr, xi, v) -> ShootingResult:
    capacity = len(xi)
    xi[:] = 0.0
    v[:] = 0.0
    v[1] = dr * (1.0 - dr * dr / 6.0)
    if v[1] < 0.0:
        return ShootingResult(
            r=xi[:1].copy(),
            rho=np.ones(1),
            npts=1,
            status=IntegrationStatus.STEP_TOO_LARGE,
            dr=dr,
        )

    i = 1
    while v[i] >= 0.0:
        if i + 1 >= capacity:
            return ShootingResult(
                r=xi[: i + 1].copy(),
                rho=np.zeros(i + 1),
                npts=i + 1,
                status=IntegrationStatus.OVERRUN,
                dr=dr,
            )
        xi[i] = i * dr
        rhs = -xi[i] * (v[i] / xi[i]) ** n
        v[i + 1] = 2.0 * v[i] - v[i - 1] + dr * dr * rhs
        i += 1

    # v[i] < 0 lies past the surface
    npts = i
    theta = np.ones(npts)
    theta[1:] = (v[1:npts] / xi[1:npts]) ** n
    return ShootingResult(
        r=xi[:npts].copy(),
        rho=theta,
        npts=npts,
        status=IntegrationStatus.COMPLETED,
        dr=dr,
    )


def integrate_lane_emden(
    gamma: float,
    capacity: int,
    dr: float = DEFAULT_DR,
    max_step_doublings: int = MAX_STEP_DOUBLINGS,
) -> ShootingResult:
    r"""
    Unit-density polytrope in dimensionless radius :math:`\xi`.

    Both tables are reserved at ``capacity`` samples before integrating. When
    the surface is not reached inside them, the step is doubled and the
    integration restarted from the centre.

    Args:
        gamma (float): Adiabatic index, :math:`6/5 < \gamma < 2`.
        capacity (int): Number of table slots available.
        dr (float, optional): Initial step in :math:`\xi`. Defaults to 1e-3.
        max_step_doublings (int, optional): Restarts allowed before giving up.

    Returns:
        ShootingResult: :math:`\xi` and :math:`\theta^n` (density over central
        density) out to the surface, with status ``COMPLETED``.

    Raises:
        IntegrationOverrunError: If the surface is still not reached after
            ``max_step_doublings`` restarts.
        ProfileError: If the step grows past :math:`\sqrt{6}`, where the
            series seed is already negative.
        ValueError: If :math:`\gamma` is outside :math:`(6/5, 2)`.
    """
    if not 1.0 < gamma < 2.0:
        raise ValueError(f"Adiabatic index must lie in (1, 2), got {gamma}")
    if gamma <= GAMMA_UNBOUND:
        raise ValueError(
            f"gamma = {gamma} <= 6/5 (n >= 5) polytropes have no finite surface"
        )
    if capacity < 3:
        raise ValueError(f"Need a capacity of at least 3 samples, got {capacity}")

    n = 1.0 / (gamma - 1.0)
    xi = np.zeros(capacity)
    v = np.zeros(capacity)

    for doublings in range(max_step_doublings + 1):
        shot = _shoot_lane_emden(n, dr, xi, v)
        if shot.status is IntegrationStatus.COMPLETED:
            return shot
        if shot.status is IntegrationStatus.STEP_TOO_LARGE:
            raise ProfileError(
                f"Lane-Emden step dr={dr:.3e} exceeds sqrt(6); the series seed "
                "lies beyond the surface"
            )
        logger.debug(
            f"Lane-Emden table of {capacity} samples too short at dr={dr:.3e}; doubling step"
        )
        dr *= 2.0

    raise IntegrationOverrunError(
        f"Lane-Emden integration did not reach the surface within {capacity} "
        f"samples after {max_step_doublings} step doublings",
        dr=dr,
        doublings=max_step_doublings,
    )


def _scaling(gamma, polyk, mass, unit_mass):
    fac = gamma * polyk / (utils.fourpi * (gamma - 1.0))
    rho_c = ((mass / unit_mass) / fac**1.5) ** (2.0 / (3.0 * gamma - 4.0))
    rfac = np.sqrt(fac * rho_c ** (gamma - 2.0))
    return rho_c, rfac


def polytrope_profile(
    gamma: float,
    polyk: float,
    mass: float,
    capacity: int = 4000,
    radius: Optional[float] = None,
    set_polyk: bool = False,
) -> PolytropeResult:
    r"""
    Polytrope :math:`P = K\rho^\gamma` of a given mass.

    The unit-density Lane-Emden solution of mass :math:`M_f` is rescaled with

    .. math::
        \rho_c = \left(\frac{M/M_f}{f^{3/2}}\right)^{2/(3\gamma - 4)},\quad
        r = \xi \sqrt{f \rho_c^{\gamma - 2}},\quad
        f = \frac{\gamma K}{4\pi(\gamma - 1)}.

    When ``set_polyk`` is true and ``radius`` is given, :math:`K` is first
    corrected by the ratio of the requested radius to the radius the
    rescaled profile reaches, and the rescaling is repeated once with the
    corrected constant.

    Args:
        gamma (float): Adiabatic index, :math:`6/5 < \gamma < 2`,
            :math:`\gamma \neq 4/3`.
        polyk (float): Polytropic constant :math:`K` [code units].
        mass (float): Target mass [code units].
        capacity (int, optional): Table capacity. Defaults to 4000.
        radius (float, optional): Target stellar radius for ``set_polyk``.
        set_polyk (bool, optional): Correct :math:`K` towards ``radius``.

    Returns:
        PolytropeResult: Scaled profile (with enclosed mass), central density,
        stellar radius and the polytropic constant actually used.
    """
    if np.isclose(3.0 * gamma - 4.0, 0.0):
        raise ValueError("gamma = 4/3 polytropes have a mass independent of density")
    if mass <= 0.0:
        raise ValueError(f"Mass must be positive, got {mass}")

    shot = integrate_lane_emden(gamma, capacity)
    if shot.npts < 3:
        raise ProfileError(
            f"Lane-Emden profile collapsed to {shot.npts} samples at dr={shot.dr:.3e}"
        )

    unit_mass = calc_total_mass(shot.r, shot.rho)
    rho_c, rfac = _scaling(gamma, polyk, mass, unit_mass)
    xi_surface = shot.r[-1]

    if set_polyk and radius is not None:
        polyk = polyk * radius / (xi_surface * rfac)
        rho_c, rfac = _scaling(gamma, polyk, mass, unit_mass)
        logger.info(f"Polytropic constant reset to {polyk:.6e} for radius {radius:.6e}")

    r = shot.r * rfac
    rho = shot.rho * rho_c
    profile = RadialProfile(r=r, rho=rho, mass=np.asarray(calc_mass_enc(r, rho)))

    logger.info(
        f"Polytrope gamma={gamma:.4f}: {shot.npts} samples, rho_c={rho_c:.6e}, "
        f"R={xi_surface * rfac:.6e}"
    )
    return PolytropeResult(
        profile=profile, rho_c=float(rho_c), radius=float(xi_surface * rfac), polyk=polyk
    )

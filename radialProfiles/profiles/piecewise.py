r"""
Density profiles for an arbitrary equation of state.

Hydrostatic equilibrium with :math:`G = 1`,

.. math::
    \frac{1}{r^2}\frac{d}{dr}\left(\frac{r^2}{\rho}\frac{dP}{d\rho}\frac{d\rho}{dr}\right)
    = -4\pi\rho,

is stepped outwards from a given central density with a fixed radial step.
Expanding the derivative of :math:`dP/d\rho` needs its value at the previous
step, so the stepper carries exactly one step of that history.

The central density is then adjusted by a shooting loop until the enclosed
mass of the profile matches a target.
"""

import math
from typing import Callable

import numpy as np

from radialProfiles import utils
from radialProfiles.logging_config import get_logger
from radialProfiles.profiles.data_classes import (
    CalibrationResult,
    IntegrationStatus,
    RadialProfile,
    ShootingResult,
)
from radialProfiles.profiles.exceptions import CalibrationError, IntegrationOverrunError
from radialProfiles.profiles.mass import calc_mass_enc, calc_total_mass

logger = get_logger("radialprofiles")

MAX_ITERATIONS = 1000
MASS_TOLERANCE = np.finfo(float).eps * 1.0e4
MAX_STEP_DOUBLINGS = 32
INITIAL_SPAN = 30.0  # initial step is INITIAL_SPAN / capacity


def integrate_eos_profile(
    rho_c: float,
    eos: Callable[[float], float],
    dr: float,
    r: np.ndarray,
    rho: np.ndarray,
) -> ShootingResult:
    r"""
    Integrate one profile from the centre outwards.

    The tables ``r`` and ``rho`` are caller-owned and overwritten in place; no
    sample is written past their length. The first sample whose density would
    be negative is the surface and is clamped to zero.

    Args:
        rho_c (float): Central density [code units].
        eos (callable): :math:`dP/d\rho` as a function of density.
        dr (float): Radial step [code units].
        r (ndarray): Radius buffer.
        rho (ndarray): Density buffer, same length as ``r``.

    Returns:
        ShootingResult: Copies of the used prefix. ``status`` is ``OVERRUN``
        if the buffers filled before the surface.
    """
    capacity = len(r)
    r[:] = 0.0
    rho[:] = 0.0
    rho[0] = rho_c

    drhodr = 0.0
    dPdrho_prev = 0.0
    status = IntegrationStatus.COMPLETED

    i = 0
    while True:
        i += 1
        rho[i] = rho[i - 1] + dr * drhodr
        r[i] = r[i - 1] + dr
        if rho[i] <= 0.0:
            break
        dPdrho = eos(rho[i])
        if i == 1:
            drhodr = drhodr - utils.fourpi * rho[i - 1] ** 2 * dr / dPdrho
        else:
            drhodr = drhodr + dr * (
                drhodr**2 / rho[i - 1]
                - utils.fourpi * rho[i] ** 2 / dPdrho
                - (dPdrho - dPdrho_prev) / (dr * dPdrho) * drhodr
                - 2.0 * drhodr / r[i]
            )
        dPdrho_prev = dPdrho
        if i >= capacity - 1:
            status = IntegrationStatus.OVERRUN
            break

    npts = i + 1
    rho[i] = 0.0
    return ShootingResult(
        r=r[:npts].copy(), rho=rho[:npts].copy(), npts=npts, status=status, dr=dr
    )


def calibrate_central_density(
    target_mass: float,
    eos: Callable[[float], float],
    capacity: int,
    rho_c: float = 1.0,
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = MASS_TOLERANCE,
    max_step_doublings: int = MAX_STEP_DOUBLINGS,
) -> CalibrationResult:
    r"""
    Find the central density whose profile encloses ``target_mass``.

    The update of the central density depends on the iteration:

    - 0: scale the guess by :math:`(M_\mathrm{target}/M)^{1/3}`;
    - 1: step by 10 % of the central density towards the target;
    - 2+: keep the same step until the sign of :math:`M_\mathrm{target} - M`
      flips, then bisect: halve the step every iteration and reverse it
      whenever the sign flips again.

    Every iteration integrates a full profile. When the stepper runs out of
    table space the radial step is doubled and the same central density is
    integrated again; such retries do not count as iterations.

    Args:
        target_mass (float): Mass the profile must enclose [code units].
        eos (callable): :math:`dP/d\rho` as a function of density.
        capacity (int): Number of table slots reserved for the profile.
        rho_c (float, optional): Initial central density. Defaults to 1.
        max_iterations (int, optional): Update budget. Defaults to 1000.
        tolerance (float, optional): Relative mass tolerance. Defaults to
            ``1e4`` times the float64 machine epsilon.
        max_step_doublings (int, optional): Overrun retries allowed.

    Returns:
        CalibrationResult: Converged profile, central density, number of
        updates and the radial step used.

    Raises:
        CalibrationError: If the mass has not converged after
            ``max_iterations`` updates.
        IntegrationOverrunError: If the profile overruns the tables more
            than ``max_step_doublings`` times.
    """
    if target_mass <= 0.0:
        raise ValueError(f"Target mass must be positive, got {target_mass}")
    if capacity < 3:
        raise ValueError(f"Need a capacity of at least 3 samples, got {capacity}")

    r = np.zeros(capacity)
    rho = np.zeros(capacity)
    dr = INITIAL_SPAN / capacity

    iteration = 0
    doublings = 0
    drho = 0.0
    lastsign = 1.0
    bisect = False

    while True:
        shot = integrate_eos_profile(rho_c, eos, dr, r, rho)
        if shot.status is IntegrationStatus.OVERRUN:
            doublings += 1
            if doublings > max_step_doublings:
                raise IntegrationOverrunError(
                    f"Profile did not reach the surface within {capacity} samples "
                    f"after {max_step_doublings} step doublings",
                    dr=dr,
                    doublings=max_step_doublings,
                )
            dr = 2.0 * dr
            logger.debug(f"Profile overran {capacity} samples; retrying with dr={dr:.4e}")
            continue

        mass = calc_total_mass(shot.r, shot.rho)
        logger.debug(f"Iteration {iteration}: rho_c={rho_c:.12e}, M={mass:.12e}")

        if abs(target_mass - mass) < tolerance * abs(target_mass):
            logger.info(
                f"Central density {rho_c:.10e} converged after {iteration} iterations "
                f"({shot.npts} samples, dr={dr:.4e})"
            )
            profile = RadialProfile(
                r=shot.r, rho=shot.rho, mass=np.asarray(calc_mass_enc(shot.r, shot.rho))
            )
            return CalibrationResult(
                profile=profile, rho_c=rho_c, iterations=iteration, dr=dr
            )

        if iteration >= max_iterations:
            raise CalibrationError(
                f"Central density did not converge in {max_iterations} iterations "
                f"(rho_c={rho_c:.6e}, M={mass:.6e}, target={target_mass:.6e})",
                rho_c=rho_c,
                mass=mass,
                iterations=iteration,
            )

        sign = math.copysign(1.0, target_mass - mass)
        if iteration == 0:
            rho_c = rho_c * (target_mass / mass) ** (1.0 / 3.0)
        elif iteration == 1:
            drho = 0.1 * rho_c * lastsign
        elif bisect:
            drho = 0.5 * drho * lastsign * sign
        elif sign != lastsign:
            bisect = True
            drho = -0.5 * drho

        rho_c = rho_c + drho
        lastsign = sign
        iteration += 1


def piecewise_polytrope_profile(
    mass: float,
    eos: Callable[[float], float],
    capacity: int = 4000,
    **kwargs,
) -> CalibrationResult:
    r"""
    Profile of a star of given mass for an equation of state without a
    closed-form solution, e.g. a piecewise polytrope.

    Thin wrapper around :func:`calibrate_central_density`; keyword arguments
    are passed through.
    """
    logger.info(f"Calibrating central density for M={mass:.6e} on {capacity} samples")
    return calibrate_central_density(mass, eos, capacity, **kwargs)

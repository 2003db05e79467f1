"""
Containers for radial profiles and integrator results.

Uses NamedTuple for immutability, following the EOS/TOV containers of the
structure solvers. Arrays are float64 and hold only the used prefix of the
buffers the integrators were given.
"""

from enum import Enum
from typing import NamedTuple, Optional, Union

from jaxtyping import Array, Float


class IntegrationStatus(Enum):
    """Outcome of a single shot of a radial stepper."""

    COMPLETED = "completed"  # density reached zero inside the buffer
    OVERRUN = "overrun"  # buffer exhausted before the surface
    STEP_TOO_LARGE = "step_too_large"  # series seed already past the surface


class RadialProfile(NamedTuple):
    """
    Density profile sampled on an increasing radius grid.

    Optional columns are either None or arrays of the same length as ``r``.
    """

    r: Float[Array, "npts"]  # Radius [code units]
    rho: Float[Array, "npts"]  # Density [code units]
    mass: Optional[Float[Array, "npts"]] = None  # Enclosed mass
    pressure: Optional[Float[Array, "npts"]] = None
    temperature: Optional[Float[Array, "npts"]] = None
    energy: Optional[Float[Array, "npts"]] = None  # Specific internal energy
    xfrac: Optional[Float[Array, "npts"]] = None  # Hydrogen mass fraction
    yfrac: Optional[Float[Array, "npts"]] = None  # Helium mass fraction

    @property
    def npts(self) -> int:
        return len(self.r)


class ShootingResult(NamedTuple):
    """Output of one stepper invocation."""

    r: Float[Array, "npts"]
    rho: Float[Array, "npts"]
    npts: int
    status: IntegrationStatus
    dr: float  # Step size used for this shot


class CalibrationResult(NamedTuple):
    """Converged profile of the central-density search."""

    profile: RadialProfile
    rho_c: float  # Central density that produced ``profile``
    iterations: int  # Calibration updates performed
    dr: float  # Step size after any overrun doublings


class PolytropeResult(NamedTuple):
    """Rescaled polytrope together with its derived scalars."""

    profile: RadialProfile
    rho_c: float  # Central density [code units]
    radius: float  # Stellar radius [code units]
    polyk: float  # Polytropic constant, corrected when requested


# Bonnor-Ebert parameterisations: each variant carries only its own inputs.
# Densities, radii and masses are in code units.


class DensityAndRadius(NamedTuple):
    central_density: float
    radius: float


class DensityAndNormalisedRadius(NamedTuple):
    central_density: float
    normalised_radius: float


class DensityAndMass(NamedTuple):
    central_density: float
    mass: float


class NormalisedAndPhysicalRadius(NamedTuple):
    normalised_radius: float
    radius: float
    overdensity: float = 1.0


class NormalisedRadiusAndMass(NamedTuple):
    normalised_radius: float
    mass: float
    overdensity: float = 1.0


class RadiusAndMass(NamedTuple):
    radius: float
    mass: float


BonnorEbertParameters = Union[
    DensityAndRadius,
    DensityAndNormalisedRadius,
    DensityAndMass,
    NormalisedAndPhysicalRadius,
    NormalisedRadiusAndMass,
    RadiusAndMass,
]


class BonnorEbertSphere(NamedTuple):
    """
    Scaled Bonnor-Ebert sphere.

    The tables cover the full dimensionless span; ``n_edge`` is the number of
    samples out to the edge of the sphere.
    """

    profile: RadialProfile  # r, rho and enclosed mass over the full span
    n_edge: int
    central_density: float
    edge_density: float
    radius: float
    normalised_radius: float
    mass: float
    overdensity: float

    @property
    def density_contrast(self) -> float:
        return self.central_density / self.edge_density

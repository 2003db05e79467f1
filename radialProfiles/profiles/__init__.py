"""
Radial density profiles of self-gravitating spheres.

This module contains the profile generators and the integrators behind them:
- closed forms (uniform sphere, Evrard collapse)
- polytropes from the Lane-Emden equation
- arbitrary equations of state with a central-density calibration loop
- Bonnor-Ebert isothermal spheres

All generators return plain radius/density tables in code units (G = 1).
"""

from radialProfiles.profiles.data_classes import (
    BonnorEbertParameters,
    BonnorEbertSphere,
    CalibrationResult,
    DensityAndMass,
    DensityAndNormalisedRadius,
    DensityAndRadius,
    IntegrationStatus,
    NormalisedAndPhysicalRadius,
    NormalisedRadiusAndMass,
    PolytropeResult,
    RadialProfile,
    RadiusAndMass,
    ShootingResult,
)
from radialProfiles.profiles.exceptions import (
    CalibrationError,
    IntegrationOverrunError,
    PhysicalValidityError,
    ProfileError,
)
from radialProfiles.profiles.mass import calc_mass_enc, calc_total_mass
from radialProfiles.profiles.closed_form import evrard_profile, uniform_profile
from radialProfiles.profiles.lane_emden import integrate_lane_emden, polytrope_profile
from radialProfiles.profiles.piecewise import (
    calibrate_central_density,
    integrate_eos_profile,
    piecewise_polytrope_profile,
)
from radialProfiles.profiles.bonnor_ebert import (
    bonnor_ebert_profile,
    check_density_contrast,
    integrate_isothermal,
)

__all__ = [
    "BonnorEbertParameters",
    "BonnorEbertSphere",
    "CalibrationResult",
    "DensityAndMass",
    "DensityAndNormalisedRadius",
    "DensityAndRadius",
    "IntegrationStatus",
    "NormalisedAndPhysicalRadius",
    "NormalisedRadiusAndMass",
    "PolytropeResult",
    "RadialProfile",
    "RadiusAndMass",
    "ShootingResult",
    "CalibrationError",
    "IntegrationOverrunError",
    "PhysicalValidityError",
    "ProfileError",
    "calc_mass_enc",
    "calc_total_mass",
    "evrard_profile",
    "uniform_profile",
    "integrate_lane_emden",
    "polytrope_profile",
    "calibrate_central_density",
    "integrate_eos_profile",
    "piecewise_polytrope_profile",
    "bonnor_ebert_profile",
    "check_density_contrast",
    "integrate_isothermal",
]

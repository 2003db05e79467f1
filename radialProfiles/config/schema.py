r"""Pydantic models for profile configuration validation.

A configuration selects one profile generator through the ``type`` field of
``profile``; Bonnor-Ebert spheres further select their parameter pair through
``parameters.mode``.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from radialProfiles import utils
from radialProfiles.profiles import data_classes


class UnitsConfig(BaseModel):
    """Code units (G = 1).

    Attributes
    ----------
    udist : float
        Distance unit [cm]
    umass : float
        Mass unit [g]
    """

    udist: float = Field(default=utils.au, gt=0.0)
    umass: float = Field(default=utils.solarm, gt=0.0)

    def to_code_units(self) -> utils.CodeUnits:
        return utils.CodeUnits(udist=self.udist, umass=self.umass)


class UniformConfig(BaseModel):
    """Uniform-density sphere."""

    type: Literal["uniform"]
    mass: float = Field(gt=0.0)
    radius: float = Field(gt=0.0)
    npts: int = Field(default=1000, ge=1)


class EvrardConfig(BaseModel):
    """Evrard collapse profile, rho ~ 1/r."""

    type: Literal["evrard"]
    mass: float = Field(gt=0.0)
    radius: float = Field(gt=0.0)
    npts: int = Field(default=1000, ge=1)


class PolytropeConfig(BaseModel):
    """Polytrope P = K rho^gamma.

    Attributes
    ----------
    gamma : float
        Adiabatic index, 6/5 < gamma < 2 and gamma != 4/3
    polyk : float
        Polytropic constant [code units]
    mass : float
        Stellar mass [code units]
    radius : float, optional
        Target stellar radius, only used with set_polyk
    set_polyk : bool
        Correct polyk so that the star has the requested radius
    npts : int
        Table capacity
    """

    type: Literal["polytrope"]
    gamma: float = Field(gt=1.2, lt=2.0)
    polyk: float = Field(gt=0.0)
    mass: float = Field(gt=0.0)
    radius: Optional[float] = Field(default=None, gt=0.0)
    set_polyk: bool = False
    npts: int = Field(default=4000, ge=3)

    @field_validator("gamma")
    @classmethod
    def validate_gamma(cls, v: float) -> float:
        """gamma = 4/3 has no unique mass-density relation."""
        if abs(3.0 * v - 4.0) < 1e-12:
            raise ValueError("gamma = 4/3 polytropes cannot be rescaled to a given mass")
        return v

    @model_validator(mode="after")
    def validate_set_polyk(self) -> "PolytropeConfig":
        if self.set_polyk and self.radius is None:
            raise ValueError("set_polyk requires a target radius")
        return self


class PiecewisePolytropeConfig(BaseModel):
    """Piecewise polytrope solved by central-density calibration.

    Attributes
    ----------
    mass : float
        Stellar mass [code units]
    polyk : float
        Polytropic constant of the lowest-density piece [code units]
    gammas : list of float
        Adiabatic indices, lowest density first
    densities : list of float
        Dividing densities [code units], one fewer than gammas
    npts : int
        Table capacity
    max_iterations : int
        Calibration iteration budget
    """

    type: Literal["piecewise_polytrope"]
    mass: float = Field(gt=0.0)
    polyk: float = Field(gt=0.0)
    gammas: List[float] = Field(min_length=1)
    densities: List[float] = Field(default_factory=list)
    npts: int = Field(default=4000, ge=3)
    max_iterations: int = Field(default=1000, ge=1)

    @model_validator(mode="after")
    def validate_pieces(self) -> "PiecewisePolytropeConfig":
        if len(self.densities) != len(self.gammas) - 1:
            raise ValueError(
                f"{len(self.gammas)} pieces need {len(self.gammas) - 1} dividing densities, "
                f"got {len(self.densities)}"
            )
        return self


# Bonnor-Ebert parameter pairs


class DensityAndRadiusConfig(BaseModel):
    mode: Literal["density_radius"]
    central_density: float = Field(gt=0.0, description="Central density [g/cm^3]")
    radius: float = Field(gt=0.0, description="Physical radius [code units]")


class DensityAndNormalisedRadiusConfig(BaseModel):
    mode: Literal["density_normalised_radius"]
    central_density: float = Field(gt=0.0, description="Central density [g/cm^3]")
    normalised_radius: float = Field(gt=0.0)


class DensityAndMassConfig(BaseModel):
    mode: Literal["density_mass"]
    central_density: float = Field(gt=0.0, description="Central density [g/cm^3]")
    mass: float = Field(gt=0.0, description="Physical mass [code units]")


class NormalisedAndPhysicalRadiusConfig(BaseModel):
    mode: Literal["normalised_physical_radius"]
    normalised_radius: float = Field(gt=0.0)
    radius: float = Field(gt=0.0)
    overdensity: float = Field(default=1.0, gt=0.0)


class NormalisedRadiusAndMassConfig(BaseModel):
    mode: Literal["normalised_radius_mass"]
    normalised_radius: float = Field(gt=0.0)
    mass: float = Field(gt=0.0)
    overdensity: float = Field(default=1.0, gt=0.0)


class RadiusAndMassConfig(BaseModel):
    mode: Literal["radius_mass"]
    radius: float = Field(gt=0.0)
    mass: float = Field(gt=0.0)


BonnorEbertParametersConfig = Annotated[
    Union[
        DensityAndRadiusConfig,
        DensityAndNormalisedRadiusConfig,
        DensityAndMassConfig,
        NormalisedAndPhysicalRadiusConfig,
        NormalisedRadiusAndMassConfig,
        RadiusAndMassConfig,
    ],
    Field(discriminator="mode"),
]

_BE_VARIANTS = {
    "density_radius": data_classes.DensityAndRadius,
    "density_normalised_radius": data_classes.DensityAndNormalisedRadius,
    "density_mass": data_classes.DensityAndMass,
    "normalised_physical_radius": data_classes.NormalisedAndPhysicalRadius,
    "normalised_radius_mass": data_classes.NormalisedRadiusAndMass,
    "radius_mass": data_classes.RadiusAndMass,
}


class BonnorEbertConfig(BaseModel):
    """Bonnor-Ebert sphere.

    Attributes
    ----------
    parameters : BonnorEbertParametersConfig
        The pair of independent quantities, selected by ``mode``
    sound_speed : float, optional
        Isothermal sound speed [cm/s]
    temperature : float, optional
        Gas temperature [K], used when sound_speed is not given
    gmw : float
        Mean molecular weight
    npts : int
        Number of samples over the dimensionless span
    override_critical : bool
        Keep spheres whose density contrast is too low to collapse
    write_profile : bool
        Write BonnorEbert.txt next to the output file
    """

    type: Literal["bonnor_ebert"]
    parameters: BonnorEbertParametersConfig
    sound_speed: Optional[float] = Field(default=None, gt=0.0)
    temperature: Optional[float] = Field(default=None, gt=0.0)
    gmw: float = Field(default=2.381, gt=0.0)
    npts: int = Field(default=10000, ge=2)
    override_critical: bool = False
    write_profile: bool = True

    @model_validator(mode="after")
    def validate_sound_speed(self) -> "BonnorEbertConfig":
        if self.sound_speed is None and self.temperature is None:
            raise ValueError("Bonnor-Ebert sphere needs either sound_speed or temperature")
        return self

    def sound_speed_cgs(self) -> float:
        if self.sound_speed is not None:
            return self.sound_speed
        return utils.isothermal_sound_speed(self.temperature, self.gmw)

    def to_parameters(self, units: utils.CodeUnits) -> data_classes.BonnorEbertParameters:
        """Convert to the core parameter variant, densities in code units."""
        values = self.parameters.model_dump(exclude={"mode"})
        if "central_density" in values:
            values["central_density"] = values["central_density"] / units.unit_density
        return _BE_VARIANTS[self.parameters.mode](**values)


ProfileTypeConfig = Annotated[
    Union[
        UniformConfig,
        EvrardConfig,
        PolytropeConfig,
        PiecewisePolytropeConfig,
        BonnorEbertConfig,
    ],
    Field(discriminator="type"),
]


class ProfileConfig(BaseModel):
    """Top-level configuration of a profile run.

    Attributes
    ----------
    profile : ProfileTypeConfig
        Generator and its parameters, selected by ``type``
    units : UnitsConfig
        Code units
    output : str
        Path of the ``.npz`` file receiving r, rho and the enclosed mass
    validate_only : bool
        Stop after validating the configuration
    log_level : str
        Logging level name
    log_file : str, optional
        File receiving a copy of the log of the run
    """

    profile: ProfileTypeConfig
    units: UnitsConfig = Field(default_factory=UnitsConfig)
    output: str = "profile.npz"
    validate_only: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Optional[str] = None

    @field_validator("output")
    @classmethod
    def validate_output_extension(cls, v: str) -> str:
        if not v.endswith(".npz"):
            raise ValueError(f"Output file must have .npz extension, got: {v}")
        return v

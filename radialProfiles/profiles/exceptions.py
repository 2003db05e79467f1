"""Failures raised by the profile integrators and generators."""


class ProfileError(RuntimeError):
    """Base class for failures while building a density profile."""


class IntegrationOverrunError(ProfileError):
    """The stepper kept running out of table space after every step doubling."""

    def __init__(self, message: str, dr: float, doublings: int):
        super().__init__(message)
        self.dr = dr
        self.doublings = doublings


class CalibrationError(ProfileError):
    """The central-density search did not reach the target mass."""

    def __init__(self, message: str, rho_c: float, mass: float, iterations: int):
        super().__init__(message)
        self.rho_c = rho_c
        self.mass = mass
        self.iterations = iterations


class PhysicalValidityError(ProfileError):
    """A Bonnor-Ebert sphere is not dense enough at the centre to collapse."""

    def __init__(self, message: str, contrast: float):
        super().__init__(message)
        self.contrast = contrast

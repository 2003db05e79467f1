r"""
Physical constants and code-unit conversions.

All constants are in cgs units. Profiles are computed in code units where the
gravitational constant is one; :class:`CodeUnits` converts between the two.
"""

from typing import NamedTuple

import numpy as np

#################################
### PHYSICAL CONSTANTS (CGS) ###
#################################

pi = np.pi
fourpi = 4.0 * np.pi

G = 6.672041e-8  # Gravitational constant [cm^3 g^-1 s^-2]
solarm = 1.9891e33  # Solar mass [g]
solarr = 6.959500e10  # Solar radius [cm]
au = 1.496e13  # Astronomical unit [cm]
pc = 3.086e18  # Parsec [cm]
mass_proton_cgs = 1.67262158e-24  # Proton mass [g]
kboltz = 1.38066e-16  # Boltzmann constant [erg/K]

# Defaults used when a profile file carries no composition
X_default = 0.74
Z_default = 0.02


class CodeUnits(NamedTuple):
    r"""
    Code units with :math:`G = 1`.

    The time unit follows from the distance and mass units,
    :math:`u_t = \sqrt{u_d^3 / (G u_m)}`.
    """

    udist: float = au  # Distance unit [cm]
    umass: float = solarm  # Mass unit [g]

    @property
    def utime(self) -> float:
        return float(np.sqrt(self.udist**3 / (G * self.umass)))

    @property
    def unit_density(self) -> float:
        return self.umass / self.udist**3

    @property
    def unit_velocity(self) -> float:
        return self.udist / self.utime

    @property
    def unit_pressure(self) -> float:
        return self.umass / (self.udist * self.utime**2)

    @property
    def unit_ergg(self) -> float:
        """Specific energy unit [erg/g]."""
        return self.unit_velocity**2


def isothermal_sound_speed(temperature: float, gmw: float) -> float:
    r"""
    Isothermal sound speed :math:`c_s = \sqrt{k_B T / (\mu m_p)}` in cm/s.
    """
    return float(np.sqrt(kboltz * temperature / (gmw * mass_proton_cgs)))

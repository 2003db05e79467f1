r"""Concrete equations of state for the arbitrary-EOS profile integrator."""

from typing import Sequence

import numpy as np

from .base import DerivativeEOS


class PolytropicEOS(DerivativeEOS):
    r"""
    Single polytrope :math:`P = K \rho^\gamma`.

    Args:
        polyk (float): Polytropic constant :math:`K` [code units].
        gamma (float): Adiabatic index :math:`\gamma`.
    """

    def __init__(self, polyk: float, gamma: float):
        if polyk <= 0.0:
            raise ValueError(f"Polytropic constant must be positive, got {polyk}")
        self.polyk = polyk
        self.gamma = gamma

    def __call__(self, rho):
        return self.polyk * self.gamma * rho ** (self.gamma - 1.0)

    def pressure(self, rho):
        return self.polyk * rho**self.gamma


class PiecewisePolytropicEOS(DerivativeEOS):
    r"""
    Piecewise polytrope with continuous pressure.

    Between the dividing densities :math:`\rho_i` the pressure follows
    :math:`P = K_i \rho^{\Gamma_i}`. Only :math:`K_0` is free; the remaining
    constants follow from continuity of pressure at each dividing density:

    .. math::
        K_i = K_{i-1} \rho_i^{\Gamma_{i-1} - \Gamma_i}

    Args:
        polyk (float): Constant :math:`K_0` of the lowest-density piece.
        gammas (Sequence[float]): Adiabatic indices, lowest density first.
        densities (Sequence[float]): Dividing densities, increasing; one fewer
            than ``gammas``.
    """

    def __init__(
        self, polyk: float, gammas: Sequence[float], densities: Sequence[float]
    ):
        gammas = np.asarray(gammas, dtype=float)
        densities = np.asarray(densities, dtype=float)
        if len(densities) != len(gammas) - 1:
            raise ValueError(
                f"Need {len(gammas) - 1} dividing densities for {len(gammas)} "
                f"pieces, got {len(densities)}"
            )
        if np.any(np.diff(densities) <= 0.0) or np.any(densities <= 0.0):
            raise ValueError("Dividing densities must be positive and increasing")
        if polyk <= 0.0:
            raise ValueError(f"Polytropic constant must be positive, got {polyk}")

        polyks = [polyk]
        for i, rho_div in enumerate(densities):
            polyks.append(polyks[-1] * rho_div ** (gammas[i] - gammas[i + 1]))

        self.gammas = gammas
        self.densities = densities
        self.polyks = np.array(polyks)

    def _piece(self, rho):
        return np.searchsorted(self.densities, rho, side="right")

    def __call__(self, rho):
        i = self._piece(rho)
        gamma = self.gammas[i]
        return self.polyks[i] * gamma * rho ** (gamma - 1.0)

    def pressure(self, rho):
        i = self._piece(rho)
        return self.polyks[i] * rho ** self.gammas[i]


class TabulatedEOS(DerivativeEOS):
    r"""
    Equation of state given as a table of :math:`P(\rho)`.

    The derivative :math:`dP/d\rho` is taken by finite differences on the
    table and interpolated in log space, so both columns must be positive.
    Outside the table the end values are held constant.

    Args:
        rho (array): Densities, increasing [code units].
        pressure (array): Pressures at those densities [code units].
    """

    def __init__(self, rho, pressure):
        rho = np.asarray(rho, dtype=float)
        pressure = np.asarray(pressure, dtype=float)
        if rho.shape != pressure.shape or rho.ndim != 1 or len(rho) < 2:
            raise ValueError("Need matching one-dimensional tables of length >= 2")
        if np.any(rho <= 0.0) or np.any(pressure <= 0.0):
            raise ValueError("Tabulated density and pressure must be positive")
        if np.any(np.diff(rho) <= 0.0):
            raise ValueError("Tabulated density must be strictly increasing")

        self.rho = rho
        self.p = pressure
        self._logrho = np.log(rho)
        self._logp = np.log(pressure)
        self._logdpdrho = np.log(np.abs(np.gradient(pressure, rho)))

    def __call__(self, rho):
        return np.exp(np.interp(np.log(rho), self._logrho, self._logdpdrho))

    def pressure(self, rho):
        return np.exp(np.interp(np.log(rho), self._logrho, self._logp))

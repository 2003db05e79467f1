r"""Base class for equation-of-state derivative callbacks."""

from abc import ABC, abstractmethod


class DerivativeEOS(ABC):
    r"""
    Stateless callable returning the pressure derivative :math:`dP/d\rho`.

    The radial integrators only ever call ``eos(rho)`` with a scalar density;
    they never inspect the object, so any plain function with the same
    signature can be passed in its place.
    """

    @abstractmethod
    def __call__(self, rho: float) -> float:
        r"""
        Evaluate :math:`dP/d\rho` at density ``rho`` [code units].
        """

    @abstractmethod
    def pressure(self, rho: float) -> float:
        r"""
        Evaluate the pressure :math:`P(\rho)` [code units].
        """

"""Test configuration for the radialProfiles test suite."""

import pytest
import numpy as np

from radialProfiles import eos, utils


@pytest.fixture
def polytropic_eos():
    """gamma = 5/3 polytrope of radius ~1 and mass ~0.77 at unit central density."""
    return eos.PolytropicEOS(polyk=0.4, gamma=5.0 / 3.0)


@pytest.fixture
def code_units():
    """Code units of au and solar masses."""
    return utils.CodeUnits(udist=utils.au, umass=utils.solarm)


@pytest.fixture
def be_sound_speed(code_units):
    """Isothermal sound speed of 10 K molecular gas in code units."""
    cs = utils.isothermal_sound_speed(10.0, 2.381)
    return cs / code_units.unit_velocity


@pytest.fixture
def stepped_profile():
    """Irregular radius grid with a decreasing density."""
    r = np.concatenate([[0.0], np.cumsum(np.linspace(0.05, 0.15, 20))])
    rho = np.exp(-r)
    return r, rho

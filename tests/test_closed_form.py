"""Unit tests for the closed-form profiles."""

import pytest
import numpy as np
from hypothesis import given, settings, strategies as st

from radialProfiles.profiles import calc_total_mass, evrard_profile, uniform_profile


class TestUniformProfile:
    """Test the uniform-density sphere."""

    @settings(deadline=None, max_examples=25)
    @given(
        st.integers(min_value=1, max_value=500),
        st.floats(min_value=1e-3, max_value=1e3),
        st.floats(min_value=1e-2, max_value=1e2),
    )
    def test_constant_density(self, ng, mass, radius):
        """Every sample carries exactly 3M / (4 pi R^3)."""
        profile = uniform_profile(ng, mass, radius)
        density = 3.0 * mass / (4.0 * np.pi * radius**3)
        assert np.all(np.asarray(profile.rho) == density)

    def test_radius_grid(self):
        profile = uniform_profile(100, 1.0, 2.0)
        r = np.asarray(profile.r)
        assert profile.npts == 100
        np.testing.assert_allclose(r, np.arange(1, 101) * 0.02, rtol=1e-14)
        assert r[-1] == pytest.approx(2.0, rel=1e-14)

    def test_enclosed_mass(self):
        profile = uniform_profile(1000, 2.5, 1.5)
        assert calc_total_mass(profile.r, profile.rho) == pytest.approx(2.5, rel=1e-3)

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            uniform_profile(0, 1.0, 1.0)
        with pytest.raises(ValueError):
            uniform_profile(10, 1.0, -1.0)


class TestEvrardProfile:
    """Test the Evrard collapse profile."""

    @settings(deadline=None, max_examples=25)
    @given(
        st.integers(min_value=1, max_value=500),
        st.floats(min_value=1e-3, max_value=1e3),
        st.floats(min_value=1e-2, max_value=1e2),
    )
    def test_density(self, ng, mass, radius):
        """Sample i has density M / (2 pi R^2 i dr)."""
        profile = evrard_profile(ng, mass, radius)
        dr = radius / ng
        i = np.arange(1, ng + 1)
        expected = mass / (2.0 * np.pi * radius**2 * i * dr)
        np.testing.assert_allclose(np.asarray(profile.rho), expected, rtol=1e-13)

    def test_density_falls_as_inverse_radius(self):
        profile = evrard_profile(200, 1.0, 1.0)
        product = np.asarray(profile.rho) * np.asarray(profile.r)
        np.testing.assert_allclose(product, product[0], rtol=1e-13)

    def test_enclosed_mass(self):
        profile = evrard_profile(1000, 3.0, 2.0)
        assert calc_total_mass(profile.r, profile.rho) == pytest.approx(3.0, rel=1e-3)

"""Unit tests for the Lane-Emden stepper and the polytrope generator."""

import pytest
import numpy as np
from hypothesis import given, settings, strategies as st

from radialProfiles.profiles import (
    IntegrationOverrunError,
    IntegrationStatus,
    ProfileError,
    calc_total_mass,
    integrate_lane_emden,
    polytrope_profile,
)

# First zeros of the Lane-Emden functions
XI1_N15 = 3.65375
XI1_N2 = 4.35287


class TestIntegrateLaneEmden:
    """Test the dimensionless stepper."""

    def test_centre_and_surface(self):
        shot = integrate_lane_emden(5.0 / 3.0, 4000)
        assert shot.status is IntegrationStatus.COMPLETED
        assert shot.dr == pytest.approx(1e-3)
        assert shot.r[0] == 0.0
        assert shot.rho[0] == 1.0
        assert shot.npts == len(shot.r) == len(shot.rho)
        # The last sample lies just inside the first zero of theta
        assert shot.r[-1] < XI1_N15
        assert shot.r[-1] == pytest.approx(XI1_N15, abs=2e-3)

    def test_density_decreases_outwards(self):
        shot = integrate_lane_emden(5.0 / 3.0, 4000)
        assert np.all(np.diff(shot.rho) <= 0.0)
        assert np.all(shot.rho >= 0.0)
        assert np.all(np.diff(shot.r) > 0.0)

    def test_series_seed(self):
        """Second sample follows theta ~ 1 - xi^2/6 near the centre."""
        shot = integrate_lane_emden(1.5, 6000)
        xi = shot.r[1]
        theta = shot.rho[1] ** 0.5  # n = 2
        assert theta == pytest.approx(1.0 - xi**2 / 6.0, abs=1e-10)

    def test_step_doubles_when_table_too_short(self):
        """n = 2 needs ~4350 samples at dr = 1e-3, so 4000 forces one doubling."""
        shot = integrate_lane_emden(1.5, 4000)
        assert shot.status is IntegrationStatus.COMPLETED
        assert shot.dr == pytest.approx(2e-3)
        assert shot.r[-1] == pytest.approx(XI1_N2, abs=5e-3)

    def test_repeated_doubling(self):
        shot = integrate_lane_emden(5.0 / 3.0, 100)
        assert shot.dr == pytest.approx(0.064)
        assert shot.npts < 100

    def test_doubling_cap(self):
        with pytest.raises(IntegrationOverrunError) as excinfo:
            integrate_lane_emden(5.0 / 3.0, 100, max_step_doublings=0)
        assert excinfo.value.doublings == 0

    @pytest.mark.parametrize("gamma", [1.0, 2.0, 0.5, 2.5])
    def test_invalid_gamma(self, gamma):
        with pytest.raises(ValueError, match="Adiabatic index"):
            integrate_lane_emden(gamma, 1000)

    @pytest.mark.parametrize("gamma", [1.05, 1.1, 1.15, 1.2])
    def test_unbounded_polytrope_rejected(self, gamma):
        """n >= 5 spheres never reach zero density."""
        with pytest.raises(ValueError, match="no finite surface"):
            integrate_lane_emden(gamma, 4000)

    def test_step_beyond_series_seed(self):
        """A step past sqrt(6) makes the seed negative; no one-sample result comes back."""
        with pytest.raises(ProfileError, match=r"sqrt\(6\)"):
            integrate_lane_emden(5.0 / 3.0, 100, dr=2.5)


class TestPolytropeProfile:
    """Test the rescaled polytrope."""

    def test_end_to_end(self):
        """gamma = 5/3, M = 1 on a 4000-sample table."""
        result = polytrope_profile(5.0 / 3.0, 0.424304, 1.0, capacity=4000)
        profile = result.profile
        rho = np.asarray(profile.rho)

        assert np.all(np.diff(rho) <= 0.0)
        assert rho[0] == pytest.approx(result.rho_c)
        assert rho[-1] < 1e-4 * rho[0]
        assert abs(calc_total_mass(profile.r, profile.rho) - 1.0) < 1e-10
        assert float(profile.mass[-1]) == pytest.approx(1.0, abs=1e-10)
        assert result.radius == pytest.approx(float(profile.r[-1]))

    @settings(deadline=None, max_examples=20)
    @given(
        st.floats(min_value=1.4, max_value=1.95),
        st.floats(min_value=0.1, max_value=10.0),
        st.floats(min_value=0.1, max_value=2.0),
    )
    def test_mass_recovered(self, gamma, mass, polyk):
        result = polytrope_profile(gamma, polyk, mass, capacity=2000)
        recovered = calc_total_mass(result.profile.r, result.profile.rho)
        assert recovered == pytest.approx(mass, rel=1e-10)

    def test_radius_scales_with_polyk(self):
        """At fixed mass a gamma = 5/3 polytrope has R proportional to K."""
        r1 = polytrope_profile(5.0 / 3.0, 0.2, 1.0).radius
        r2 = polytrope_profile(5.0 / 3.0, 0.4, 1.0).radius
        assert r2 / r1 == pytest.approx(2.0, rel=1e-10)

    def test_set_polyk_matches_radius(self):
        target = 2.5
        result = polytrope_profile(5.0 / 3.0, 0.424304, 1.0, radius=target, set_polyk=True)
        assert result.radius == pytest.approx(target, rel=1e-10)
        assert result.polyk != pytest.approx(0.424304)
        assert float(result.profile.mass[-1]) == pytest.approx(1.0, rel=1e-10)

    def test_radius_ignored_without_set_polyk(self):
        plain = polytrope_profile(5.0 / 3.0, 0.424304, 1.0)
        result = polytrope_profile(5.0 / 3.0, 0.424304, 1.0, radius=2.5)
        assert result.polyk == 0.424304
        assert result.radius == pytest.approx(plain.radius)

    @pytest.mark.parametrize("gamma", [1.25, 1.3, 1.35, 1.99])
    def test_mass_recovered_near_limits(self, gamma):
        result = polytrope_profile(gamma, 1.0, 1.0, capacity=4000)
        assert result.profile.npts >= 3
        assert calc_total_mass(result.profile.r, result.profile.rho) == pytest.approx(
            1.0, rel=1e-10
        )

    def test_unbounded_polytrope_rejected(self):
        with pytest.raises(ValueError, match="no finite surface"):
            polytrope_profile(1.2, 1.0, 1.0)

    def test_gamma_four_thirds_rejected(self):
        with pytest.raises(ValueError, match="4/3"):
            polytrope_profile(4.0 / 3.0, 1.0, 1.0)

    def test_non_positive_mass_rejected(self):
        with pytest.raises(ValueError):
            polytrope_profile(5.0 / 3.0, 1.0, 0.0)

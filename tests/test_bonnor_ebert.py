"""Unit tests for Bonnor-Ebert spheres."""

import pytest
import numpy as np

from radialProfiles.io.writers import BONNOR_EBERT_HEADER
from radialProfiles.profiles import (
    DensityAndMass,
    DensityAndNormalisedRadius,
    DensityAndRadius,
    NormalisedAndPhysicalRadius,
    NormalisedRadiusAndMass,
    PhysicalValidityError,
    RadiusAndMass,
    bonnor_ebert_profile,
    check_density_contrast,
    integrate_isothermal,
)
from radialProfiles.profiles.bonnor_ebert import PROFILE_FILENAME, XI_SPAN

NPTS = 10000
DXI = XI_SPAN / NPTS


class TestIntegrateIsothermal:
    """Test the dimensionless isothermal sphere."""

    def test_shape(self):
        xi, m, rho = integrate_isothermal(NPTS)
        assert len(xi) == len(m) == len(rho) == NPTS
        assert xi[0] == 0.0 and m[0] == 0.0 and rho[0] == 1.0
        assert xi[-1] == pytest.approx(XI_SPAN - DXI)

    def test_monotonic(self):
        xi, m, rho = integrate_isothermal(NPTS)
        assert np.all(np.diff(xi) > 0.0)
        assert np.all(np.diff(m) > 0.0)
        assert np.all(np.diff(rho) < 0.0)

    def test_critical_contrast(self):
        """The critical sphere at xi = 6.45 has a density contrast of ~14.1."""
        xi, _, rho = integrate_isothermal(NPTS)
        j = np.searchsorted(xi, 6.45)
        assert 1.0 / rho[j] == pytest.approx(14.1, abs=1.0)

    def test_too_few_samples(self):
        with pytest.raises(ValueError):
            integrate_isothermal(1)


class TestDensityContrast:
    """Test the collapse criterion."""

    def test_threshold_passes(self):
        assert check_density_contrast(14.1, 1.0) == pytest.approx(14.1)

    def test_below_threshold(self):
        with pytest.raises(PhysicalValidityError) as excinfo:
            check_density_contrast(14.0999, 1.0)
        assert excinfo.value.contrast == pytest.approx(14.0999)

    def test_override(self):
        assert check_density_contrast(5.0, 1.0, override=True) == pytest.approx(5.0)


class TestBonnorEbertProfile:
    """Test the six parameterisations end to end."""

    def test_normalised_radius_and_mass(self, be_sound_speed, tmp_path):
        sphere = bonnor_ebert_profile(
            NormalisedRadiusAndMass(normalised_radius=7.45, mass=1.0),
            be_sound_speed,
            npts=NPTS,
            outdir=str(tmp_path),
        )
        assert sphere.mass == pytest.approx(1.0, rel=1e-10)
        assert 7.45 - DXI <= sphere.normalised_radius < 7.45
        assert sphere.density_contrast > 14.1
        assert sphere.overdensity == 1.0

        lines = (tmp_path / PROFILE_FILENAME).read_text().splitlines()
        assert lines[0] == BONNOR_EBERT_HEADER
        assert len(lines) == sphere.n_edge + 1

        data = np.loadtxt(tmp_path / PROFILE_FILENAME, skiprows=1)
        assert data.shape == (sphere.n_edge, 3)
        assert data[-1, 0] == pytest.approx(sphere.radius, rel=1e-9)
        assert data[-1, 1] == pytest.approx(1.0, rel=1e-9)
        assert data[0, 2] == pytest.approx(sphere.central_density, rel=1e-9)

    def test_density_and_radius(self, be_sound_speed):
        r0 = be_sound_speed / np.sqrt(4.0 * np.pi)
        sphere = bonnor_ebert_profile(
            DensityAndRadius(central_density=1.0, radius=7.0 * r0),
            be_sound_speed,
            write_profile=False,
        )
        assert sphere.central_density == 1.0
        assert sphere.radius < 7.0 * r0
        assert sphere.normalised_radius == pytest.approx(7.0, abs=DXI)

    def test_density_and_normalised_radius(self, be_sound_speed):
        sphere = bonnor_ebert_profile(
            DensityAndNormalisedRadius(central_density=1.0, normalised_radius=7.0),
            be_sound_speed,
            write_profile=False,
        )
        assert 7.0 - DXI <= sphere.normalised_radius < 7.0
        assert float(sphere.profile.rho[0]) == 1.0

    def test_density_and_mass(self, be_sound_speed):
        reference = bonnor_ebert_profile(
            DensityAndNormalisedRadius(central_density=1.0, normalised_radius=7.0),
            be_sound_speed,
            write_profile=False,
        )
        target = 1.0001 * reference.mass
        sphere = bonnor_ebert_profile(
            DensityAndMass(central_density=1.0, mass=target),
            be_sound_speed,
            write_profile=False,
        )
        assert sphere.mass < target
        assert sphere.n_edge == reference.n_edge

    def test_normalised_and_physical_radius(self, be_sound_speed):
        radius = 0.05
        plain = bonnor_ebert_profile(
            NormalisedAndPhysicalRadius(normalised_radius=7.0, radius=radius),
            be_sound_speed,
            write_profile=False,
        )
        dense = bonnor_ebert_profile(
            NormalisedAndPhysicalRadius(normalised_radius=7.0, radius=radius, overdensity=2.0),
            be_sound_speed,
            write_profile=False,
        )
        expected_rho_c = (be_sound_speed * 7.0 / radius) ** 2 / (4.0 * np.pi)
        assert plain.central_density == pytest.approx(expected_rho_c, rel=1e-12)
        assert plain.normalised_radius == pytest.approx(7.0, abs=DXI)
        assert dense.central_density == pytest.approx(2.0 * expected_rho_c, rel=1e-12)
        assert dense.mass == pytest.approx(2.0 * plain.mass, rel=1e-12)
        assert dense.density_contrast == pytest.approx(plain.density_contrast, rel=1e-12)

    def test_radius_and_mass(self, be_sound_speed):
        sphere = bonnor_ebert_profile(
            RadiusAndMass(radius=0.05, mass=2.0), be_sound_speed, write_profile=False
        )
        assert sphere.mass == pytest.approx(2.0, rel=1e-10)
        assert sphere.radius < 0.05
        assert sphere.normalised_radius == pytest.approx(7.45, abs=DXI)
        assert sphere.overdensity > 0.0

    def test_overdensity_scales_mass(self, be_sound_speed):
        sphere = bonnor_ebert_profile(
            NormalisedRadiusAndMass(normalised_radius=7.45, mass=1.0, overdensity=1.5),
            be_sound_speed,
            write_profile=False,
        )
        assert sphere.mass == pytest.approx(1.0, rel=1e-10)
        assert sphere.overdensity == 1.5

    def test_stable_sphere_rejected(self, be_sound_speed, tmp_path):
        with pytest.raises(PhysicalValidityError):
            bonnor_ebert_profile(
                NormalisedRadiusAndMass(normalised_radius=5.0, mass=1.0),
                be_sound_speed,
                outdir=str(tmp_path),
            )
        assert not (tmp_path / PROFILE_FILENAME).exists()

    def test_stable_sphere_override(self, be_sound_speed, tmp_path):
        sphere = bonnor_ebert_profile(
            NormalisedRadiusAndMass(normalised_radius=5.0, mass=1.0),
            be_sound_speed,
            override_critical=True,
            outdir=str(tmp_path),
        )
        assert sphere.density_contrast < 14.1
        assert (tmp_path / PROFILE_FILENAME).exists()

    def test_invalid_sound_speed(self):
        with pytest.raises(ValueError):
            bonnor_ebert_profile(NormalisedRadiusAndMass(7.45, 1.0), 0.0, write_profile=False)

r"""
Build a radial density profile from a YAML configuration.

Usage::

    run_radial_profile config.yaml

The profile and its enclosed mass are saved with ``numpy.savez`` to the
``output`` path of the configuration.
"""

import logging
import os
import sys

import numpy as np

from radialProfiles import eos as eos_models
from radialProfiles.config import load_config
from radialProfiles.config.schema import ProfileConfig
from radialProfiles.logging_config import (
    add_file_handler,
    get_logger,
    remove_handler,
    set_log_level,
)
from radialProfiles.profiles import (
    RadialProfile,
    bonnor_ebert_profile,
    calc_mass_enc,
    evrard_profile,
    piecewise_polytrope_profile,
    polytrope_profile,
    uniform_profile,
)

logger = get_logger("radialprofiles")


def build_profile(config: ProfileConfig) -> tuple[RadialProfile, dict]:
    """
    Run the generator selected by the configuration.

    Returns
    -------
    tuple
        The profile (with enclosed mass) and a dict of derived scalars.
    """
    settings = config.profile
    units = config.units.to_code_units()

    if settings.type == "uniform":
        profile = uniform_profile(settings.npts, settings.mass, settings.radius)
        scalars = {}
    elif settings.type == "evrard":
        profile = evrard_profile(settings.npts, settings.mass, settings.radius)
        scalars = {}
    elif settings.type == "polytrope":
        result = polytrope_profile(
            settings.gamma,
            settings.polyk,
            settings.mass,
            capacity=settings.npts,
            radius=settings.radius,
            set_polyk=settings.set_polyk,
        )
        profile = result.profile
        scalars = {"rho_c": result.rho_c, "radius": result.radius, "polyk": result.polyk}
    elif settings.type == "piecewise_polytrope":
        eos = eos_models.PiecewisePolytropicEOS(
            settings.polyk, settings.gammas, settings.densities
        )
        result = piecewise_polytrope_profile(
            settings.mass, eos, settings.npts, max_iterations=settings.max_iterations
        )
        profile = result.profile
        scalars = {"rho_c": result.rho_c, "radius": float(profile.r[-1]), "dr": result.dr}
    elif settings.type == "bonnor_ebert":
        sphere = bonnor_ebert_profile(
            settings.to_parameters(units),
            settings.sound_speed_cgs() / units.unit_velocity,
            npts=settings.npts,
            gmw=settings.gmw,
            units=units,
            override_critical=settings.override_critical,
            write_profile=settings.write_profile,
            outdir=os.path.dirname(config.output) or ".",
        )
        edge = sphere.n_edge
        profile = RadialProfile(
            r=sphere.profile.r[:edge],
            rho=sphere.profile.rho[:edge],
            mass=sphere.profile.mass[:edge],
        )
        scalars = {
            "rho_c": sphere.central_density,
            "radius": sphere.radius,
            "mass_total": sphere.mass,
            "overdensity": sphere.overdensity,
        }
        return profile, scalars
    else:
        raise ValueError(f"Unknown profile type: {settings.type}")

    if profile.mass is None:
        profile = profile._replace(mass=np.asarray(calc_mass_enc(profile.r, profile.rho)))
    return profile, scalars


def save_profile(profile: RadialProfile, scalars: dict, output: str) -> None:
    """Save r, rho, the enclosed mass and the derived scalars to ``output``."""
    np.savez(
        output,
        r=np.asarray(profile.r),
        rho=np.asarray(profile.rho),
        mass=np.asarray(profile.mass),
        **{name: np.asarray(value) for name, value in scalars.items()},
    )
    logger.info(f"Profile saved to {output}")


def main(config_path: str):
    """Main profile script

    Parameters
    ----------
    config_path : str
        Path to YAML configuration file

    Returns
    -------
    RadialProfile or None
        The saved profile, or None when only validating.
    """
    logger.info(f"Loading configuration from {config_path}")
    config = load_config(config_path)
    set_log_level(getattr(logging, config.log_level))

    if config.validate_only:
        logger.info("Configuration valid!")
        return None

    outdir = os.path.dirname(config.output)
    if outdir:
        os.makedirs(outdir, exist_ok=True)

    file_handler = None
    if config.log_file is not None:
        file_handler = add_file_handler(config.log_file)
    try:
        logger.info(f"Building {config.profile.type} profile...")
        profile, scalars = build_profile(config)

        logger.info("=" * 60)
        logger.info(f"Samples: {profile.npts}")
        logger.info(f"Outer radius: {float(profile.r[-1]):.6e}")
        logger.info(f"Enclosed mass: {float(profile.mass[-1]):.6e}")
        for name, value in scalars.items():
            logger.info(f"{name}: {value:.6e}")
        logger.info("=" * 60)

        save_profile(profile, scalars, config.output)
    finally:
        if file_handler is not None:
            remove_handler(file_handler)
    return profile


def cli_entry_point():
    """
    Entry point for console script.

    Allows running with:
        run_radial_profile config.yaml

    Instead of:
        python -m radialProfiles.run_profile config.yaml
    """
    if len(sys.argv) != 2:
        print("Usage: run_radial_profile <config.yaml>")
        print("\nExamples:")
        print("  run_radial_profile examples/configs/polytrope.yaml")
        print("  run_radial_profile examples/configs/bonnor_ebert.yaml")
        sys.exit(1)

    main(sys.argv[1])


if __name__ == "__main__":
    cli_entry_point()

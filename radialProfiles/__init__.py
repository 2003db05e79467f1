"""Radial density profiles of self-gravitating spheres for particle setups."""

import jax

# Enclosed masses are compared at ~1e-12
jax.config.update("jax_enable_x64", True)

from radialProfiles import utils, eos, profiles, io  # noqa: E402
from radialProfiles.logging_config import get_logger, set_log_level  # noqa: E402

__all__ = ["utils", "eos", "profiles", "io", "get_logger", "set_log_level"]

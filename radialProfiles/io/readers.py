r"""
Readers for stellar-evolution profiles.

Two formats are understood: MESA ``profile*.data`` files and the plain
column files written by :func:`radialProfiles.io.write_profile` (a single
header line of bracketed names), and the ``#``-commented tables of the
KEPLER code. Quantities are converted from cgs to code units unless asked
otherwise.
"""

import os
from typing import NamedTuple, Optional

import numpy as np

from radialProfiles import utils
from radialProfiles.logging_config import get_logger
from radialProfiles.profiles.data_classes import RadialProfile

logger = get_logger("radialprofiles.io")

MESA_HEADER_LINES = 6


class StellarProfile(NamedTuple):
    """Profile read from a stellar-evolution file."""

    profile: RadialProfile
    total_mass: float
    rcut: Optional[float] = None  # Radius at the requested mass cut (KEPLER)


def _is_numeric(line: str) -> bool:
    tokens = line.split()
    if not tokens:
        return False
    try:
        [float(token) for token in tokens]
    except ValueError:
        return False
    return True


def _split_header(lines):
    # The column names are on the last line that is not a row of numbers;
    # MESA also has numeric lines (column indices, global values) above it.
    names_line = None
    for i, line in enumerate(lines):
        if line.strip() and not _is_numeric(line):
            names_line = i
    if names_line is None:
        raise ValueError("No header line with column names found")
    rows = [line for line in lines[names_line + 1 :] if line.strip()]
    if not rows:
        raise ValueError("No numeric data found")
    return names_line + 1, rows


def read_mesa(
    filepath: str,
    units: Optional[utils.CodeUnits] = None,
    cgs: bool = False,
    xfrac: float = utils.X_default,
    zfrac: float = utils.Z_default,
) -> StellarProfile:
    r"""
    Read a MESA profile or a column file with a bracketed header.

    Recognised columns (case-insensitive) are ``mass_grams``, ``mass``,
    ``rho``/``density``, ``logrho``, ``energy``/``e_int``,
    ``radius``/``radius_cm``, ``pressure``, ``temperature``,
    ``x_mass_fraction_h``/``xfrac`` and ``y_mass_fraction_he``/``yfrac``.
    In MESA files ``mass`` is in solar masses. Rows are returned from the
    centre outwards.

    Args:
        filepath (str): Path of the profile.
        units (CodeUnits, optional): Target code units.
        cgs (bool, optional): Keep cgs units.
        xfrac (float, optional): Hydrogen fraction when the file has none.
        zfrac (float, optional): Metallicity used for the default helium
            fraction :math:`Y = 1 - X - Z`.

    Returns:
        StellarProfile: The profile and the total mass.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds no data or no radius/density columns.
    """
    if units is None:
        units = utils.CodeUnits()
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Profile file not found: {filepath}")

    with open(filepath, "r") as f:
        lines = f.read().splitlines()

    try:
        n_header, rows = _split_header(lines)
    except ValueError as e:
        raise ValueError(f"Error reading profile {filepath}: {e}") from e
    is_mesa = n_header == MESA_HEADER_LINES
    names = lines[n_header - 1].replace("[", " ").replace("]", " ").lower().split()

    data = np.loadtxt(rows, ndmin=2)
    if data.shape[1] < len(names):
        names = names[: data.shape[1]]

    columns = {}
    for i, name in enumerate(names):
        columns.setdefault(name, data[:, i])

    def column(*keys):
        for key in keys:
            if key in columns:
                return columns[key]
        return None

    r = column("radius", "radius_cm")
    rho = column("rho", "density")
    if rho is None and "logrho" in columns:
        rho = 10.0 ** columns["logrho"]
    if r is None or rho is None:
        raise ValueError(f"Profile {filepath} has no radius or density column")

    m = column("mass_grams")
    if m is None and "mass" in columns:
        m = columns["mass"] * (utils.solarm if is_mesa else 1.0)
    pres = column("pressure")
    ene = column("energy", "e_int")
    temp = column("temperature")
    x = column("x_mass_fraction_h", "xfrac")
    y = column("y_mass_fraction_he", "yfrac")
    if x is None:
        x = np.full_like(r, xfrac)
    if y is None:
        y = np.full_like(r, 1.0 - xfrac - zfrac)

    if not cgs:
        r = r / units.udist
        rho = rho / units.unit_density
        m = None if m is None else m / units.umass
        pres = None if pres is None else pres / units.unit_pressure
        ene = None if ene is None else ene / units.unit_ergg

    # MESA lists the surface first
    order = slice(None, None, -1) if r[0] > r[-1] else slice(None)

    def reorder(a):
        return None if a is None else np.asarray(a)[order]

    profile = RadialProfile(
        r=reorder(r),
        rho=reorder(rho),
        mass=reorder(m),
        pressure=reorder(pres),
        temperature=reorder(temp),
        energy=reorder(ene),
        xfrac=reorder(x),
        yfrac=reorder(y),
    )
    total_mass = float(profile.mass[-1]) if profile.mass is not None else float("nan")
    logger.info(f"Read {profile.npts} zones from {filepath}")
    return StellarProfile(profile=profile, total_mass=total_mass)


def read_kepler(
    filepath: str,
    max_rows: int,
    units: Optional[utils.CodeUnits] = None,
    mcut: Optional[float] = None,
) -> StellarProfile:
    r"""
    Read a profile written by the KEPLER stellar evolution code.

    Lines containing ``#`` are comments. The columns used are 1 (mass
    coordinate for ``mcut``), 3 (mass), 4 (radius), 6 (density),
    7 (temperature), 8 (pressure) and 9 (specific internal energy), all cgs
    and converted to code units except the temperature.

    Args:
        filepath (str): Path of the KEPLER file.
        max_rows (int): Table capacity; files with this many rows or more
            are rejected.
        units (CodeUnits, optional): Target code units.
        mcut (float, optional): Mass coordinate whose radius is returned as
            ``rcut``.

    Returns:
        StellarProfile: The profile, total mass and optional cut radius.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds no rows or too many rows.
    """
    if units is None:
        units = utils.CodeUnits()
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"KEPLER file not found: {filepath}")

    with open(filepath, "r") as f:
        rows = [line for line in f.read().splitlines() if "#" not in line and line.strip()]

    if len(rows) < 1:
        raise ValueError(f"KEPLER file {filepath} contains no data rows")
    if len(rows) >= max_rows:
        raise ValueError(
            f"KEPLER file {filepath} has {len(rows)} rows, more than the {max_rows} available"
        )

    stardata = np.loadtxt(rows, ndmin=2)
    if stardata.shape[1] < 9:
        raise ValueError(f"KEPLER file {filepath} has {stardata.shape[1]} columns, need 9")

    r = stardata[:, 3] / units.udist
    m = stardata[:, 2] / units.umass
    profile = RadialProfile(
        r=r,
        rho=stardata[:, 5] / units.unit_density,
        mass=m,
        pressure=stardata[:, 7] / units.unit_pressure,
        temperature=stardata[:, 6],
        energy=stardata[:, 8] / units.unit_ergg,
    )

    rcut = None
    if mcut is not None:
        rcut = float(r[np.argmin(np.abs(stardata[:, 0] - mcut))])
        logger.info(f"rcut = {rcut:.6e}")

    logger.info(f"Finished reading KEPLER file {filepath} ({len(rows)} rows)")
    return StellarProfile(profile=profile, total_mass=float(m[-1]), rcut=rcut)

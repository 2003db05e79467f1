r"""Plain-text writers for stellar and Bonnor-Ebert profiles."""

from typing import Optional

import numpy as np

PROFILE_HEADER = (
    "[    Mass   ]  [  Pressure ]  [Temperature]  [   Radius  ]  [  Density  ]  [   E_int   ]"
)
BONNOR_EBERT_HEADER = "# [01     r(code)]   [02 M_enc(code)]   [03   rho(code)]"


def write_profile(
    outputpath: str,
    mass,
    pressure,
    temperature,
    r,
    rho,
    energy,
    xfrac=None,
    yfrac=None,
    csound=None,
    mu=None,
) -> None:
    r"""
    Write a stellar profile in the column format read by
    :func:`radialProfiles.io.read_mesa`.

    Every column is written as ``es13.6`` separated by two spaces; the
    optional columns are appended in the order Xfrac, Yfrac, mu, sound speed.

    Args:
        outputpath (str): File to (over)write.
        mass, pressure, temperature, r, rho, energy (array): Profile columns.
        xfrac, yfrac, csound, mu (array, optional): Extra columns.
    """
    headers = PROFILE_HEADER
    columns = [mass, pressure, temperature, r, rho, energy]
    for label, column in (
        ("[   Xfrac   ]", xfrac),
        ("[   Yfrac   ]", yfrac),
        ("[    mu     ]", mu),
        ("[Sound speed]", csound),
    ):
        if column is not None:
            headers += "  " + label
            columns.append(column)

    data = np.column_stack([np.asarray(c, dtype=float) for c in columns])
    np.savetxt(outputpath, data, fmt="%13.6E", delimiter="  ", header=headers, comments="")


def write_bonnor_ebert(outputpath: str, r, mass, rho) -> None:
    """
    Write a Bonnor-Ebert sphere as three ``1pe18.10`` columns: radius,
    enclosed mass and density in code units.
    """
    data = np.column_stack(
        [np.asarray(r, dtype=float), np.asarray(mass, dtype=float), np.asarray(rho, dtype=float)]
    )
    np.savetxt(
        outputpath, data, fmt="%18.10E", delimiter=" ", header=BONNOR_EBERT_HEADER, comments=""
    )

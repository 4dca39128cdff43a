"""
Centre of mass of a contiguous range of equal-mass particles.

Particle arrays use the dump layout: positions xyzh have shape (4, N)
with the smoothing length in the last row, velocities vxyzu have at least
three rows. Columns are particles.
"""

import numpy as np
from numba import jit


@jit(nopython=True)
def get_centreofmass(xyzh, vxyzu, particle_mass, istart, iend):
    """
    Calculate the centre of mass and centre of mass velocity of particles
    in columns [istart, iend).

    Args:
        xyzh: Particle positions and smoothing lengths (shape: (4, N))
        vxyzu: Particle velocities (shape: (>=3, N))
        particle_mass: Mass of each particle [code units]
        istart: First column (inclusive)
        iend: Last column (exclusive)

    Returns:
        (xcom, vcom, mass) tuple:
        - xcom: Centre of mass position (shape: (3,))
        - vcom: Centre of mass velocity (shape: (3,))
        - mass: Total mass of the range

    Notes:
        - An empty range returns zero vectors and zero mass
    """
    xcom = np.zeros(3)
    vcom = np.zeros(3)
    totmass = 0.0

    for i in range(istart, iend):
        totmass += particle_mass
        for k in range(3):
            xcom[k] += particle_mass * xyzh[k, i]
            vcom[k] += particle_mass * vxyzu[k, i]

    if totmass > 0.0:
        xcom /= totmass
        vcom /= totmass

    return xcom, vcom, totmass

"""
Physics kernels for the gravitational wave inspiral force.

All performance-critical functions are JIT-compiled with Numba.
These functions must be Numba-compatible (NumPy arrays, no Python objects).
"""

import numpy as np
from numba import jit, prange


@jit(nopython=True)
def gw_force_coefficients(nstar1, nstar2, particle_mass, c_code):
    """
    Calculate the per-star drag force coefficients.

    c1 = -(32/5) × N1 × N2³ × m⁴ / c⁵
    c2 = -(32/5) × N2 × N1³ × m⁴ / c⁵

    This is the quadrupole power of a circular binary, scaled by the
    particle counts so that the force summed over a star removes that
    star's share of the orbital energy.

    Args:
        nstar1: Number of particles in star 1
        nstar2: Number of particles in star 2
        particle_mass: Mass of each particle [code units]
        c_code: Speed of light [code velocity units]

    Returns:
        (c1, c2) tuple, both negative for positive inputs
    """
    m4 = particle_mass**4
    c5 = c_code**5
    n1 = float(nstar1)
    n2 = float(nstar2)
    c1 = -32.0 / 5.0 * n1 * n2**3 * m4 / c5
    c2 = -32.0 / 5.0 * n2 * n1**3 * m4 / c5
    return c1, c2


@jit(nopython=True, parallel=True)
def count_crossed_particles(xyzh, com, dirstar1, nstar1, npart):
    """
    Count particles on the wrong side of the barycentre.

    A star 1 particle has crossed if its offset from the barycentre has a
    negative projection on dirstar1; a star 2 particle has crossed if the
    projection is positive.

    Args:
        xyzh: Particle positions (shape: (4, N))
        com: Barycentre of the binary (shape: (3,))
        dirstar1: Vector from the barycentre towards star 1 (shape: (3,))
        nstar1: Number of particles in star 1 (columns 0..nstar1-1)
        npart: Total number of particles

    Returns:
        (k1, k2) tuple of crossed counts for star 1 and star 2

    Notes:
        - Both loops are prange sum reductions; order does not matter
    """
    k1 = 0
    for i in prange(nstar1):
        dx = xyzh[0, i] - com[0]
        dy = xyzh[1, i] - com[1]
        dz = xyzh[2, i] - com[2]
        proj = dirstar1[0] * dx + dirstar1[1] * dy + dirstar1[2] * dz
        if proj < 0.0:
            k1 += 1

    k2 = 0
    for i in prange(nstar1, npart):
        dx = xyzh[0, i] - com[0]
        dy = xyzh[1, i] - com[1]
        dz = xyzh[2, i] - com[2]
        proj = dirstar1[0] * dx + dirstar1[1] * dy + dirstar1[2] * dz
        if proj > 0.0:
            k2 += 1

    return k1, k2


@jit(nopython=True)
def gw_drag_force(coef, vcom, separation):
    """
    Drag force on every particle of one star.

    f = coef × v_com / (|v_com|² × d⁵)

    Args:
        coef: Force coefficient for this star (negative)
        vcom: Centre of mass velocity of the star (shape: (3,))
        separation: Distance between the two stellar centres of mass

    Returns:
        force: 3D force vector anti-parallel to vcom (shape: (3,))

    Notes:
        - Returns zero if the star is at rest or the separation is zero
    """
    v2 = vcom[0]**2 + vcom[1]**2 + vcom[2]**2
    if v2 <= 0.0 or separation <= 0.0:
        return np.zeros(3)

    return coef * vcom / (v2 * separation**5)

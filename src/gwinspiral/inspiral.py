"""
External force for the inspiral of two stars in a circular orbit caused by
gravitational wave radiation.

Each star is a contiguous block of particles: particles 1..Nstar_1 belong to
star 1 and the remainder to star 2. Every step the host calls
gw_still_inspiralling (or advance_inspiral) with the current particle arrays,
then get_gw_force, then get_gw_force_i once per particle. The drag applies
the same force to every particle of a star until the stars are judged to have
merged, after which the module contributes nothing.

Reference: e.g. Tong (2015) classical dynamics lecture notes.
"""

import warnings

import numpy as np

from gwinspiral import constants as const
from gwinspiral.centreofmass import get_centreofmass
from gwinspiral.infile import write_inopt
from gwinspiral.physics import (
    gw_force_coefficients,
    count_crossed_particles,
    gw_drag_force
)

STOP_RATIO_LABEL = 'stop_ratio'
STOP_RATIO_DESCRIPTION = 'ratio of particles crossing CoM to indicate a merger'
HEADER_FIELDS = ('Nstar_1', 'Nstar_2')


class InvalidOptionError(ValueError):
    """Raised when an input file option has an unusable value."""


class MissingHeaderFieldError(KeyError):
    """Raised when a dump header lacks the star particle counts."""


class InspiralState:
    """
    State of the gravitational wave inspiral for one binary.

    The particle partition is by index, not by position: the host must never
    reorder particles across the Nstar_1 boundary during a run.
    """

    def __init__(self, stop_ratio: float = const.default_stop_ratio):
        # Persisted in the dump header; zero means not a binary run
        self.nstar = np.zeros(2, dtype=np.int64)

        # Runtime parameter (options file)
        self.stop_ratio = stop_ratio
        self.n_options_read = 0

        # Fixed at initialisation
        self.n_threshold = 1
        self.fstar1_coef = 0.0
        self.fstar2_coef = 0.0

        # Kinematics, overwritten each step while separate
        self.com = np.zeros(3)
        self.comstar1 = np.zeros(3)
        self.comstar2 = np.zeros(3)
        self.vcomstar1 = np.zeros(3)
        self.vcomstar2 = np.zeros(3)

        # Per-star drag forces
        self.fstar1 = np.zeros(3)
        self.fstar2 = np.zeros(3)

        self.is_separate = True

    @property
    def nstar1(self) -> int:
        return int(self.nstar[0])

    @property
    def nstar2(self) -> int:
        return int(self.nstar[1])

    @property
    def separation(self) -> float:
        """Distance between the two stellar centres of mass."""
        return float(np.linalg.norm(self.comstar1 - self.comstar2))

    def __repr__(self) -> str:
        status = "inspiralling" if self.is_separate else "merged"
        return (f"InspiralState(Nstar_1={self.nstar1}, Nstar_2={self.nstar2}, "
                f"stop_ratio={self.stop_ratio}, n_threshold={self.n_threshold}, "
                f"{status})")


def initialise_gwinspiral(
    state: InspiralState,
    npart: int,
    particle_mass: float,
    unit_velocity: float
) -> int:
    """
    Set the merger threshold and force coefficients for the run.

    The star particle counts must already be set (normally from the dump
    header). If they are not, the inspiral force is switched off for the run.

    Args:
        state: InspiralState (modified in place)
        npart: Total number of particles
        particle_mass: Mass of each particle [code units]
        unit_velocity: Code velocity unit [cm/s]

    Returns:
        0 on success, 1 if the binary partition is uninitialised or does not
        cover exactly npart particles
    """
    # Number of particles that must cross before the stars count as merged
    state.n_threshold = max(int(npart * state.stop_ratio), 1)

    if state.nstar1 <= 0:
        warnings.warn(
            "Nstar_1 is not set: binary partition uninitialised, "
            "gravitational wave inspiral disabled",
            RuntimeWarning
        )
        state.is_separate = False
        return 1

    if state.nstar1 + state.nstar2 != npart:
        warnings.warn(
            f"Nstar_1 + Nstar_2 = {state.nstar1 + state.nstar2} does not match "
            f"npart = {npart}: gravitational wave inspiral disabled",
            RuntimeWarning
        )
        state.is_separate = False
        return 1

    print(f" Initialising inspiral, Nstar_1 = {state.nstar1:8d} Nstar_2 = {state.nstar2:8d}")

    c_code = const.c / unit_velocity
    state.fstar1_coef, state.fstar2_coef = gw_force_coefficients(
        state.nstar1, state.nstar2, particle_mass, c_code
    )

    return 0


def gw_still_inspiralling(
    state: InspiralState,
    xyzh: np.ndarray,
    vxyzu: np.ndarray,
    npart: int,
    particle_mass: float = 1.0
) -> bool:
    """
    Determine whether the stars are still inspiralling.

    Recomputes the stellar centres of mass, then counts particles that sit on
    the other star's side of the barycentre along the star 1 axis. Once the
    count reaches the threshold the stars are merged for the rest of the run.

    Args:
        state: InspiralState (modified in place)
        xyzh: Particle positions (shape: (4, N))
        vxyzu: Particle velocities (shape: (>=3, N))
        npart: Total number of particles
        particle_mass: Mass of each particle (cancels in the barycentre)

    Returns:
        True only on the step the merger is detected

    Raises:
        ValueError: If the arrays hold fewer than npart particles
    """
    if not state.is_separate:
        return False

    # The kernels do no bounds checking
    if npart > xyzh.shape[1] or npart > vxyzu.shape[1]:
        raise ValueError(f"npart = {npart} exceeds particle array width "
                         f"({xyzh.shape[1]}, {vxyzu.shape[1]})")

    nstar1 = state.nstar1
    state.comstar1, state.vcomstar1, mstar1 = get_centreofmass(
        xyzh, vxyzu, particle_mass, 0, nstar1
    )
    state.comstar2, state.vcomstar2, mstar2 = get_centreofmass(
        xyzh, vxyzu, particle_mass, nstar1, npart
    )
    state.com = (state.comstar1 * mstar1 + state.comstar2 * mstar2) / (mstar1 + mstar2)
    dirstar1 = state.comstar1 - state.com

    k1, k2 = count_crossed_particles(xyzh, state.com, dirstar1, nstar1, npart)

    if k1 + k2 >= state.n_threshold:
        state.is_separate = False
        return True

    return False


def get_gw_force(state: InspiralState) -> None:
    """
    Update the drag force on each star from the current kinematics.

    Must follow gw_still_inspiralling in the same step; advance_inspiral
    does both.
    """
    if not state.is_separate:
        return

    separation = state.separation
    for vcom in (state.vcomstar1, state.vcomstar2):
        if separation <= 0.0 or np.dot(vcom, vcom) <= 0.0:
            warnings.warn(
                "Stellar centre of mass at rest or stars coincident: "
                "gravitational wave force set to zero",
                RuntimeWarning
            )
            break

    state.fstar1 = gw_drag_force(state.fstar1_coef, state.vcomstar1, separation)
    state.fstar2 = gw_drag_force(state.fstar2_coef, state.vcomstar2, separation)


def advance_inspiral(
    state: InspiralState,
    xyzh: np.ndarray,
    vxyzu: np.ndarray,
    npart: int,
    particle_mass: float = 1.0
) -> bool:
    """
    Merger check and force update for one step.

    Returns:
        True only on the step the merger is detected
    """
    stopped_now = gw_still_inspiralling(state, xyzh, vxyzu, npart, particle_mass)
    get_gw_force(state)
    return stopped_now


def get_gw_force_i(state: InspiralState, i: int, phi: float = 0.0):
    """
    External force on particle i (1-based particle number).

    Args:
        state: InspiralState (not modified)
        i: Particle number, 1..npart
        phi: Potential term, passed through unchanged

    Returns:
        (fext, phi) tuple:
        - fext: Force on the particle (shape: (3,)); zero after the merger
          or for i <= 0
        - phi: The potential term as given
    """
    if i > 0 and state.is_separate:
        if i <= state.nstar1:
            return state.fstar1.copy(), phi
        return state.fstar2.copy(), phi

    return np.zeros(3), phi


def get_gw_forces(state: InspiralState, npart: int) -> np.ndarray:
    """
    External force on every particle.

    Returns:
        fext: Force array (shape: (3, npart)), zero after the merger
    """
    fext = np.zeros((3, npart))
    if state.is_separate:
        nstar1 = min(state.nstar1, npart)
        fext[:, :nstar1] = state.fstar1[:, np.newaxis]
        fext[:, nstar1:] = state.fstar2[:, np.newaxis]
    return fext


def write_options_gwinspiral(state: InspiralState, stream) -> None:
    """Write the inspiral options to an open input file."""
    write_inopt(stream, STOP_RATIO_LABEL, state.stop_ratio, STOP_RATIO_DESCRIPTION)


def read_options_gwinspiral(state: InspiralState, name: str, valstring: str):
    """
    Read one option from the input file.

    Args:
        state: InspiralState (modified in place)
        name: Option name
        valstring: Option value as written in the file

    Returns:
        (imatch, igotall) tuple:
        - imatch: Whether the option belongs to this module
        - igotall: Whether every inspiral option has been read

    Raises:
        InvalidOptionError: If stop_ratio is unparsable or outside [0, 1]
    """
    imatch = True
    if name.strip() == STOP_RATIO_LABEL:
        # Accept Fortran double precision exponents (5.0d-3)
        try:
            stop_ratio = float(valstring.strip().lower().replace('d', 'e'))
        except ValueError:
            raise InvalidOptionError(f"{STOP_RATIO_LABEL}: cannot parse '{valstring.strip()}' as a real")
        if not np.isfinite(stop_ratio):
            raise InvalidOptionError(f"{STOP_RATIO_LABEL}: value must be finite, got {stop_ratio}")
        if stop_ratio < 0.0:
            raise InvalidOptionError("Cannot have negative merger percentage of particle overlap")
        if stop_ratio > 1.0:
            raise InvalidOptionError("Cannot have ratio of particle overlap > 1")
        state.stop_ratio = stop_ratio
        state.n_options_read += 1
    else:
        imatch = False

    igotall = state.n_options_read >= 1
    return imatch, igotall


def write_headeropts_gwinspiral(state: InspiralState, hdr) -> None:
    """
    Add the star particle counts to a dump header.

    Args:
        state: InspiralState
        hdr: Mutable mapping (dict or h5py attributes)
    """
    hdr['Nstar_1'] = state.nstar1
    hdr['Nstar_2'] = state.nstar2


def read_headeropts_gwinspiral(state: InspiralState, hdr) -> None:
    """
    Set the star particle counts from a dump header.

    Raises:
        MissingHeaderFieldError: If Nstar_1 or Nstar_2 is absent; the counts
            are left untouched
    """
    missing = [field for field in HEADER_FIELDS if field not in hdr]
    if missing:
        print(" ERROR: Nstar_1 and Nstar_2 not present in dump file")
        raise MissingHeaderFieldError(f"Dump header missing: {', '.join(missing)}")

    state.nstar[0] = int(hdr['Nstar_1'])
    state.nstar[1] = int(hdr['Nstar_2'])

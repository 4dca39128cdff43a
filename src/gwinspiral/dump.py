"""
Dump file state for binary inspiral runs.

This module defines the SimulationState class holding the particle arrays in
the layout the inspiral force expects, with HDF5 save/load. The dump header
is the attribute set of the 'header' group; modules add their own entries
through header writer/reader hooks that receive that attribute mapping.
"""

import numpy as np
from typing import Callable, Iterable
from pathlib import Path
import h5py


class SimulationState:
    """
    Particle arrays for a binary run.

    - xyzh: positions and smoothing lengths (shape: (4, N))
    - vxyzu: velocities and internal energy (shape: (4, N))
    - particle_mass: uniform particle mass [code units]
    """

    def __init__(self, npart: int, particle_mass: float = 0.0):
        """
        Initialize particle arrays.

        Args:
            npart: Total number of particles
            particle_mass: Mass of each particle [code units]
        """
        self.xyzh = np.zeros((4, npart), dtype=np.float64)
        self.vxyzu = np.zeros((4, npart), dtype=np.float64)
        self.particle_mass = particle_mass

        # Simulation metadata
        self.time = 0.0
        self.nsteps = 0

    @property
    def npart(self) -> int:
        """Total number of particles."""
        return self.xyzh.shape[1]

    def save_to_hdf5(
        self,
        filepath: str,
        compression: str = "gzip",
        header_writers: Iterable[Callable] = ()
    ):
        """
        Save state to HDF5 dump file.

        Args:
            filepath: Path to HDF5 file
            compression: HDF5 compression method ("gzip", "lzf", or None)
            header_writers: Callables taking the header attribute mapping
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with h5py.File(filepath, 'w') as f:
            header = f.create_group('header')
            header.attrs['time'] = self.time
            header.attrs['nsteps'] = self.nsteps
            header.attrs['npart'] = self.npart
            header.attrs['massoftype'] = self.particle_mass
            for writer in header_writers:
                writer(header.attrs)

            particles = f.create_group('particles')
            particles.create_dataset('xyzh', data=self.xyzh, compression=compression)
            particles.create_dataset('vxyzu', data=self.vxyzu, compression=compression)

    @classmethod
    def load_from_hdf5(
        cls,
        filepath: str,
        header_readers: Iterable[Callable] = ()
    ) -> 'SimulationState':
        """
        Load state from HDF5 dump file.

        Args:
            filepath: Path to HDF5 file
            header_readers: Callables taking the header attribute mapping;
                their exceptions propagate

        Returns:
            SimulationState instance loaded from file
        """
        with h5py.File(filepath, 'r') as f:
            header = f['header']
            npart = int(header.attrs['npart'])
            state = cls(npart=npart, particle_mass=float(header.attrs['massoftype']))
            state.time = float(header.attrs['time'])
            state.nsteps = int(header.attrs['nsteps'])

            for reader in header_readers:
                reader(header.attrs)

            particles = f['particles']
            state.xyzh[:] = particles['xyzh'][:]
            state.vxyzu[:] = particles['vxyzu'][:]

        return state

    def __repr__(self) -> str:
        return (f"SimulationState(time={self.time:.4e}, step={self.nsteps}, "
                f"npart={self.npart}, particle_mass={self.particle_mass:.4e})")

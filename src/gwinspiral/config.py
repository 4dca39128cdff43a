"""
Configuration management for binary inspiral runs.

This module handles loading and parsing YAML run configuration files and
deriving the code unit system (G = 1) from the distance and mass units.
The merger threshold itself is a runtime option and lives in the input
file read by gwinspiral.infile.
"""

from dataclasses import dataclass
from typing import Any
import yaml
from pathlib import Path
import numpy as np

from gwinspiral import constants as const


@dataclass
class RunParameters:
    """
    Container for all run parameters.

    Internal values:
    - unit_distance: cm
    - unit_mass: g
    - particle_mass: code units
    """

    # Metadata
    simulation_name: str
    output_directory: str

    # Code units
    unit_distance: float = const.km  # cm
    unit_mass: float = const.solarm  # g

    # Binary
    nstar_1: int = 0
    nstar_2: int = 0
    particle_mass: float = 0.0  # code units

    # Options file (line-oriented, holds stop_ratio)
    infile: str = ""

    @property
    def unit_time(self) -> float:
        """Code time unit [s] from G = 1."""
        return np.sqrt(self.unit_distance**3 / (const.G * self.unit_mass))

    @property
    def unit_velocity(self) -> float:
        """Code velocity unit [cm/s]."""
        return self.unit_distance / self.unit_time

    @property
    def c_code(self) -> float:
        """Speed of light in code units."""
        return const.c / self.unit_velocity

    @property
    def npart(self) -> int:
        """Total number of particles in the binary."""
        return self.nstar_1 + self.nstar_2

    def validate(self) -> list:
        """
        Perform sanity checks on configuration parameters.

        Returns:
            List of warning/error messages. Empty list if all checks pass.
        """
        warnings = []

        if self.unit_distance <= 0:
            warnings.append(f"ERROR: unit distance must be positive, got {self.unit_distance}")

        if self.unit_mass <= 0:
            warnings.append(f"ERROR: unit mass must be positive, got {self.unit_mass}")

        if self.particle_mass <= 0:
            warnings.append(f"ERROR: particle_mass must be positive, got {self.particle_mass}")

        if self.nstar_1 < 0 or self.nstar_2 < 0:
            warnings.append(f"ERROR: particle counts must be non-negative, got "
                            f"nstar_1={self.nstar_1}, nstar_2={self.nstar_2}")
        elif self.nstar_1 == 0:
            warnings.append("WARNING: nstar_1 is 0, gravitational wave inspiral will be disabled")
        elif self.nstar_2 == 0:
            warnings.append("WARNING: nstar_2 is 0, star 2 has no particles")

        if not self.infile:
            warnings.append("INFO: no input file given, stop_ratio takes its default "
                            f"({const.default_stop_ratio})")

        return warnings

    @classmethod
    def from_yaml(cls, filepath: str) -> 'RunParameters':
        """
        Load configuration from YAML file.

        Args:
            filepath: Path to YAML configuration file

        Returns:
            RunParameters object

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        def to_float(value: Any) -> float:
            """Convert value to float, handling YAML quirks with scientific notation."""
            return float(value)

        def to_int(value: Any) -> int:
            """Convert value to int."""
            return int(value)

        config_path = Path(filepath)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)

        # Units: mass may be given in grams or solar masses, not both
        units = config.get('units', {})
        unit_distance = to_float(units.get('distance_cm', const.km))
        if 'mass_g' in units and 'mass_solar_masses' in units:
            raise ValueError("units: give mass_g or mass_solar_masses, not both")
        if 'mass_solar_masses' in units:
            unit_mass = to_float(units['mass_solar_masses']) * const.solarm
        else:
            unit_mass = to_float(units.get('mass_g', const.solarm))

        binary = config['binary']
        try:
            nstar_1 = to_int(binary['nstar_1'])
            nstar_2 = to_int(binary['nstar_2'])
            particle_mass = to_float(binary['particle_mass'])
        except KeyError as e:
            raise ValueError(f"binary: missing required entry {e}")

        # Relative input file paths are taken from the config file's directory
        infile = config.get('infile', '')
        if infile and not Path(infile).is_absolute():
            infile = str(config_path.parent / infile)

        return cls(
            simulation_name=config['simulation_name'],
            output_directory=config.get('output_directory', '.'),
            unit_distance=unit_distance,
            unit_mass=unit_mass,
            nstar_1=nstar_1,
            nstar_2=nstar_2,
            particle_mass=particle_mass,
            infile=infile
        )

    def __repr__(self):
        """Human-readable representation."""
        lines = [
            f"Simulation: {self.simulation_name}",
            f"Units: udist={self.unit_distance:.3e} cm, umass={self.unit_mass:.3e} g",
            f"Binary: Nstar_1={self.nstar_1}, Nstar_2={self.nstar_2}, "
            f"particle mass={self.particle_mass:.3e}",
            f"c in code units: {self.c_code:.4e}",
        ]
        if self.infile:
            lines.append(f"Input file: {self.infile}")
        return "\n".join(lines)

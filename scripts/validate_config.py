"""
Validate a run configuration and its input file, and report any issues.

Usage:
    python scripts/validate_config.py configs/binary_ns.yaml
"""

import sys
from functools import partial
from pathlib import Path

# Add src to path so we can import gwinspiral package
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from gwinspiral.config import RunParameters
from gwinspiral.infile import read_infile
from gwinspiral.inspiral import (
    InspiralState,
    InvalidOptionError,
    initialise_gwinspiral,
    read_options_gwinspiral
)


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/validate_config.py <config_file.yaml>")
        sys.exit(1)

    config_path = sys.argv[1]

    print(f"Validating configuration: {config_path}")
    print("=" * 70)

    try:
        params = RunParameters.from_yaml(config_path)
    except (FileNotFoundError, ValueError, KeyError) as e:
        print(f"[ERROR] loading configuration: {e}")
        sys.exit(1)

    print("[OK] Configuration loaded successfully")
    print()

    warnings = params.validate()
    errors = [w for w in warnings if w.startswith("ERROR")]
    warns = [w for w in warnings if w.startswith("WARNING")]
    infos = [w for w in warnings if w.startswith("INFO")]

    for label, messages in (("ERROR", errors), ("WARN", warns), ("INFO", infos)):
        if messages:
            print(f"[{label}] {len(messages)} message(s):")
            for message in messages:
                print(f"  {message}")
            print()

    if errors:
        print("Configuration has ERRORS and should not be used for simulation.")
        sys.exit(1)

    state = InspiralState()
    if params.infile:
        try:
            gotall = read_infile(params.infile, [partial(read_options_gwinspiral, state)])
        except (FileNotFoundError, InvalidOptionError) as e:
            print(f"[ERROR] input file: {e}")
            sys.exit(1)
        if not gotall:
            print("[WARN] input file is missing options, using defaults")
        print(f"[OK] Input file read: stop_ratio = {state.stop_ratio}")

    state.nstar[:] = (params.nstar_1, params.nstar_2)
    ierr = initialise_gwinspiral(state, params.npart, params.particle_mass, params.unit_velocity)
    if ierr != 0:
        print("[WARN] gravitational wave inspiral is disabled for this setup")
    else:
        print(f"[OK] Merger threshold: {state.n_threshold} particles")
        print(f"[OK] Force coefficients: {state.fstar1_coef:.4e}, {state.fstar2_coef:.4e}")

    print()
    print("Configuration summary:")
    print(params)
    sys.exit(0)


if __name__ == "__main__":
    main()

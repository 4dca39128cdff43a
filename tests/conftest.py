"""
Pytest configuration for the gravitational wave inspiral tests.

This file ensures the gwinspiral package is importable from tests.
"""

import sys
from pathlib import Path

# Add src to the Python path
src_dir = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_dir))

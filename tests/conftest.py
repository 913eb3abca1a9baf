"""Pytest configuration for the bitspkt test suite."""

import sys
from pathlib import Path

# Make the package importable without installing it
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

"""
Run the Hallowmoon console.

Usage:
    python -m hallowmoon.interface --seed 7
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

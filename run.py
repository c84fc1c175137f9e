#!/usr/bin/env python
"""
Launcher script for the Zenpire Inventory snapshot CLI.

This script ensures the src/ directory is on the Python path so the CLI
can run from a source checkout without installation.
"""

import sys
from pathlib import Path

# Add src/ to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from zenpire_inventory.utils.snapshot_cli import main

if __name__ == "__main__":
    sys.exit(main())

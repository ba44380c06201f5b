"""
Entry point for running Kicker as a module.

Usage: python -m kicker --config kicker.yaml
"""

import sys
from kicker.main import main

if __name__ == "__main__":
    sys.exit(main())

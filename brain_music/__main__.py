"""
Main entry point for Brain Music package

This allows running the package with: python -m brain_music
"""

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())

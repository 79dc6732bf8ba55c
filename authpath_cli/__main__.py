"""
Module execution entry point.

Allows running with: python -m authpath_cli
"""

import sys
from authpath_cli.main import main

if __name__ == "__main__":
    sys.exit(main())

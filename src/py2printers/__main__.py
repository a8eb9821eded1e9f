"""
Entry Point - Module Execution

Runs the command-line interface when the package is executed as a module:
    python -m py2printers
"""

import sys

from py2printers.cli import main

if __name__ == "__main__":
    sys.exit(main())

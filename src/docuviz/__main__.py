"""Command-line interface: python -m docuviz [--debug] [--log-file PATH]."""
import sys

from docuviz.main import main

if __name__ == "__main__":
    sys.exit(main())

"""Entry point for PyInstaller executable."""
import sys

from gopro_join.cli import main

if __name__ == "__main__":
    sys.exit(main())

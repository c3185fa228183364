"""Allow running envscan as ``python -m envscan``."""

from envscan.cli import app

if __name__ == "__main__":
    app()

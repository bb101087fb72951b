"""
Convenience entry point for running facilityslots directly.

Usage: python -m facilityslots [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()

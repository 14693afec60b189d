#!/usr/bin/env python3
# quickstart.py
"""
Quick start script for xsdpack development.
"""

import subprocess
import sys


def main():
    print("xsdpack Quick Start\n")

    # Python 3.11+ is required (checked by pip via requires-python)
    print(f"Using Python {sys.version}")

    print("Installing xsdpack in development mode...")
    subprocess.run([sys.executable, "-m", "pip", "install", "-e", ".[dev]"])

    print("Testing installation...")
    subprocess.run([sys.executable, "-m", "xsdpack.cli", "info"])

    print("Ready to pack!")
    print("\nTry these commands:")
    print("  xsdpack info                          # See archive layouts")
    print("  xsdpack diagnose                      # Check environment")
    print("  xsdpack schemas -c xsdpack.yaml       # List resolved schemas")
    print("\nBuild everything:")
    print("  xsdpack dist --config xsdpack.yaml --out build/distributions")


if __name__ == "__main__":
    main()

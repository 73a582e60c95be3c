"""
Package entry point.

Allows running the application via:

    python -m svarchiv

This simply forwards execution to svarchiv.cli.main().
"""

from svarchiv.cli import main

if __name__ == "__main__":
    main()

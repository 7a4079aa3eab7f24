"""
Package entry point.

Allows running the application via:

    python -m myregistrar

This simply forwards execution to myregistrar.cli.main().
"""

from myregistrar.cli import main

if __name__ == "__main__":
    main()

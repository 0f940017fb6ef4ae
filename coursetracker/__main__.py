"""
Package entry point.

Allows running the application via:

    python -m coursetracker

This simply forwards execution to coursetracker.cli.main().
"""

from coursetracker.cli import main

if __name__ == "__main__":
    main()

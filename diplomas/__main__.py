"""
Package entry point.

Allows running the application via:

    python -m diplomas

This simply forwards execution to diplomas.cli.main().
"""

from diplomas.cli import main

if __name__ == "__main__":
    main()

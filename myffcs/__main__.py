"""
Package entry point.

Allows running the application via:

    python -m myffcs

This simply forwards execution to myffcs.cli.main().
"""

from myffcs.cli import main

if __name__ == "__main__":
    main()

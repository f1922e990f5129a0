"""
Package entry point.

Allows running the application via:

    python -m studyschedule

This simply forwards execution to studyschedule.cli.main().
"""

from studyschedule.cli import main

if __name__ == "__main__":
    main()

"""
Package entry point.

Allows running the CLI via:

    python -m querycourse

This simply forwards execution to querycourse.cli.main().
"""

from querycourse.cli import main

if __name__ == "__main__":
    main()

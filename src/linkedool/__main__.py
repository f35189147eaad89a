"""Entry point for running linkedool as a module.

This allows running: python -m linkedool
"""

from .cli import main

if __name__ == "__main__":
    # main() is the CLI boundary and already maps failures to exit codes.
    main()

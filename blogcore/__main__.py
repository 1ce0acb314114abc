"""Entry point for the blogcore CLI.

Runs the click command group when the package is executed with ``python -m``.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()

"""Module entrypoint for ``python -m lazylaunch``.

All argument parsing and command dispatch happen in ``lazylaunch.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()

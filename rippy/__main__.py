"""Module entrypoint for ``python -m rippy``.

All argument parsing and pipeline setup happen in ``rippy.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()

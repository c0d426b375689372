"""Module entrypoint for ``python -m lazyjq``."""

from .cli import main


if __name__ == "__main__":
    main()

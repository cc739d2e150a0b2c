"""Module entrypoint for running mtbatch as ``python -m mtbatch``."""

from __future__ import annotations

from mtbatch.cli import main


if __name__ == "__main__":
    main()

"""Module entrypoint for running podtranslate as ``python -m podtranslate``."""

from __future__ import annotations

from podtranslate.cli import main


if __name__ == "__main__":
    main()

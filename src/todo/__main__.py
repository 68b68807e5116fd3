"""Entry point for ``python -m todo``."""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())

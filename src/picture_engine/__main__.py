"""Allow running the CLI with `python -m picture_engine`."""

from picture_engine.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()

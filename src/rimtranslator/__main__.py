"""Allow running as python -m rimtranslator."""

from rimtranslator.cli import app


def main() -> None:
    app()


main()

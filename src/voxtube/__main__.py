"""Entry point for running voxtube as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the voxtube CLI application."""
    app()


if __name__ == "__main__":
    main()

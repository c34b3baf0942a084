"""Main entry point for the quotebook package."""

from quotebook.cli import app


def main():
    """Run the quotebook command-line interface."""
    app()


if __name__ == "__main__":
    main()

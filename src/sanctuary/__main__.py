"""Allow ``python -m sanctuary``."""

from sanctuary.cli import app

if __name__ == "__main__":
    app()

"""Allow ``python -m fatigat``."""

from fatigat.cli import app

if __name__ == "__main__":
    app()

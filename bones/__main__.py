"""Allow ``python -m bones``."""

from bones.main import cli

if __name__ == "__main__":
    cli()

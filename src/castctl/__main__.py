"""Allow ``python -m castctl``."""

from castctl.cli.main import cli

if __name__ == "__main__":
    cli()

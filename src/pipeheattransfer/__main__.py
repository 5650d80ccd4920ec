"""Command-line interface."""
from pipeheattransfer.main import cli

if __name__ == "__main__":
    cli()

"""Entry point for running Satchel as a module: python -m satchel"""

from satchel.cli.main import cli


def main():
    """Run the Satchel CLI."""
    cli(prog_name="satchel")


if __name__ == "__main__":
    main()

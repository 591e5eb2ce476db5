"""Allow running the launcher with ``python -m zenlaunch``."""

from zenlaunch.cli import cli_main

if __name__ == "__main__":
    cli_main()

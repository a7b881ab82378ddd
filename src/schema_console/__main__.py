"""Entry point for running schema_console as a module."""

from schema_console.app import cli_entry

if __name__ == "__main__":
    cli_entry()

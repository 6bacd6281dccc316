"""Main entry point when executing iamcli as a package.

This allows running the package using python -m iamcli.
"""

from iamcli.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()

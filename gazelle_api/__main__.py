"""Main entry point when executing gazelle_api as a package.

This allows running the package using python -m gazelle_api.
"""

from gazelle_api.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()

"""Main entry point for running splurge-cypress-to-playwright as a module.

This allows users to run the CLI with:
    python -m splurge_cypress_to_playwright [command] [options]
"""

from .cli import main

if __name__ == "__main__":
    main()

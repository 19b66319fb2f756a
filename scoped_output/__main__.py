"""
Main entry point for the scoped-output package.

This allows the package to be run as a module:
python -m scoped_output
"""

from .cli.commands import main

if __name__ == '__main__':
    main()

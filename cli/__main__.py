"""
Allows the CLI package to be executed directly with:
    python -m cli
"""

from . import main

if __name__ == '__main__':
    main()

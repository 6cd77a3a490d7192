"""
Main entry point for running the package as a module.

Usage:
    python -m imgregen --product-ids 1,2,3 --media-root /var/www/pub/media
    python -m imgregen --all --dry-run
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())

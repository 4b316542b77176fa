"""Entry point for `python -m yieldcast`."""

import sys

from yieldcast.cli import main

if __name__ == "__main__":
    sys.exit(main())

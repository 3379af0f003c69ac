"""
LineAlign command line entry point.

Usage:
    python main.py OLD NEW
    python main.py --merge BASE THEIRS OURS
"""

import sys

from linealign.cli import main

if __name__ == '__main__':
    sys.exit(main())

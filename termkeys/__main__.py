#!/usr/bin/env python3
"""
termkeys entry point for running as a module: python3 -m termkeys
"""

import sys
from termkeys.cli import main

if __name__ == '__main__':
    sys.exit(main())

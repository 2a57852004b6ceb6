#!/usr/bin/env python3
"""
roomgen - Main Application Entry Point

Runs the command line room generator. See ``roomgen --help``.
"""

import sys

from roomgen.cli import main

if __name__ == "__main__":
    sys.exit(main())

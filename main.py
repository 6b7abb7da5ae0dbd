#!/usr/bin/env python3
"""
gitlanes - branch lane viewer for git histories

This is a convenience wrapper for running from the repo root.
The actual entry point is gitlanes.main:main (for pip install).
"""

from gitlanes.main import main

if __name__ == "__main__":
    main()

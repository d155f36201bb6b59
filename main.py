#!/usr/bin/env python3
"""
uigen - tool invocation engine for AI-edited projects

This is a convenience wrapper for running from the repo root.
The actual entry point is uigen.main:main (for pip install).
"""

from uigen.main import main

if __name__ == "__main__":
    main()

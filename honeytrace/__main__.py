"""
honeytrace.__main__ - Entry point for running honeytrace as a module.

Usage:
    python -m honeytrace --dataset my-traces [options]

This module enables sending a test span using:
    python -m honeytrace --name smoke-test
"""

from honeytrace.cli import main

if __name__ == "__main__":
    exit(main())

#!/usr/bin/env python
"""
Setup script for s3dirfs.
This file is kept for backward compatibility with older pip versions.
The actual configuration is in pyproject.toml.
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
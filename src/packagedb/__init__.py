"""
packagedb: Package Metadata Database Compiler.

This package loads human-edited YAML package records, validates them
against JSON schemas and structural rules, and compiles them into a
single indexed binary database with a SHA-256 checksum.
"""

from importlib.metadata import version

__version__ = version("packagedb")

__all__ = ["__version__"]

"""
Team ownership lookup service.

Maps package-qualified identifiers (usually lines from a stack trace) to the
teams owning the package, based on flat ownership manifests on disk.
"""

__version__ = "0.1.0"

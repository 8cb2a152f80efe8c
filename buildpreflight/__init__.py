"""
Build Preflight — validate the build environment before a toolchain build starts.
"""

__version__ = "0.1.0"

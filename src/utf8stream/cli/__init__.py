"""Command-line interface module for utf8stream.

This module provides CLI tools for splitting, inspecting and validating UTF-8
text streams and for benchmarking the codecs.
"""

from .main import main

__all__ = ["main"]

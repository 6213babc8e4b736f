"""Parsing and edit primitives the migration engine is built on.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from .edits import Edit, EditAccumulator
from .tree import SourceTree, parse_source

__all__ = ["Edit", "EditAccumulator", "SourceTree", "parse_source"]

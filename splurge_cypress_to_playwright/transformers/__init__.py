"""Syntax-tree transformations from Cypress commands to Playwright Test.

Submodules are imported directly by callers; nothing is re-exported here
so that the detector and the transformer can share the scope helpers
without import cycles.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

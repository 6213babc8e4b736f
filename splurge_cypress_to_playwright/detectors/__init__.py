"""Syntax-tree based detection of Cypress spec files.

Detection parses the file and resolves each ``cy`` reference instead of
searching for strings, so mocks and unrelated names do not count.
"""

from .cypress_detector import CypressFileDetector, file_uses_cypress

__all__ = ["CypressFileDetector", "file_uses_cypress"]

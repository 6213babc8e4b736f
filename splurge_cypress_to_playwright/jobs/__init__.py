"""Job modules for high-level pipeline orchestration.

Each job orchestrates one phase of the Cypress to Playwright
migration.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from .collector_job import CollectorJob
from .output_job import OutputJob

__all__ = ["CollectorJob", "OutputJob"]

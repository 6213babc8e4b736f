"""Step modules for individual pipeline operations.

Each step performs one operation on its input: parsing a spec,
rewriting it, or writing the result.
"""

from .output_steps import WriteOutputStep
from .parse_steps import ParseSourceStep, TransformCypressStep

__all__ = [
    "ParseSourceStep",
    "TransformCypressStep",
    "WriteOutputStep",
]

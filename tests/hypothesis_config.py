"""
Hypothesis configuration for property-based testing.

Profiles and shared settings for the splurge-cypress-to-playwright
property tests. Select a profile with ``--hypothesis-profile=ci``.
"""

import hypothesis
from hypothesis import HealthCheck, Phase, settings

hypothesis.settings.register_profile(
    "default",
    settings(
        database=None,  # No example database between runs
        print_blob=True,
        max_examples=100,
        deadline=None,  # tree-sitter grammars load lazily on first parse
        phases=[
            Phase.explicit,
            Phase.reuse,
            Phase.generate,
            Phase.target,
            Phase.shrink,
        ],
        derandomize=True,
    ),
)

hypothesis.settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        print_blob=True,
        derandomize=True,
        phases=[
            Phase.explicit,
            Phase.reuse,
            Phase.generate,
            Phase.target,
            Phase.shrink,
        ],
    ),
)

hypothesis.settings.register_profile(
    "fast",
    settings(
        max_examples=30,
        deadline=None,
        print_blob=True,
        derandomize=True,
        phases=[
            Phase.explicit,
            Phase.reuse,
            Phase.generate,
            Phase.shrink,
        ],
    ),
)

hypothesis.settings.load_profile("default")

# Common settings that can be imported by test modules
DEFAULT_SETTINGS = settings(
    max_examples=100,
    deadline=None,
    print_blob=True,
    derandomize=True,
)

# Whole-file transforms parse and rewrite a generated spec per example
TRANSFORM_SETTINGS = settings(
    max_examples=40,
    deadline=None,
    print_blob=True,
    derandomize=True,
    suppress_health_check=[HealthCheck.too_slow],
)

"""splurge_cypress_to_playwright package.

The initializer stays lightweight: submodules are imported only when one
of the public names below is first accessed, so importing the package
does not load the tree-sitter grammars or typer.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

__version__ = "2025.0.1"
__author__ = "Jim Schilling"
__description__ = "Automated Cypress to Playwright Test migration tool"

# Public API names. Submodules are imported lazily when accessed.
__all__ = [
    "main",
    "MigrationOrchestrator",
    "PipelineContext",
    "MigrationConfig",
    "Result",
    "EventBus",
    "Step",
    "Task",
    "Job",
    "Pipeline",
    "LoggingSubscriber",
    "ResultStatus",
    "CollectorJob",
    "OutputJob",
    "CypressToPlaywrightTransformer",
    # Exceptions
    "MigrationError",
    "ParseError",
    "TransformationError",
    "ValidationError",
    "ConfigurationError",
]


def __getattr__(name: str):
    """Import the submodule that defines ``name`` on first access."""
    import importlib

    mapping = {
        "main": "splurge_cypress_to_playwright.main",
        "cli": "splurge_cypress_to_playwright.cli",
        "MigrationOrchestrator": "splurge_cypress_to_playwright.migration_orchestrator",
        "PipelineContext": "splurge_cypress_to_playwright.context",
        "MigrationConfig": "splurge_cypress_to_playwright.context",
        "EventBus": "splurge_cypress_to_playwright.events",
        "LoggingSubscriber": "splurge_cypress_to_playwright.events",
        "Result": "splurge_cypress_to_playwright.result",
        "ResultStatus": "splurge_cypress_to_playwright.result",
        "Job": "splurge_cypress_to_playwright.pipeline",
        "Pipeline": "splurge_cypress_to_playwright.pipeline",
        "Task": "splurge_cypress_to_playwright.pipeline",
        "Step": "splurge_cypress_to_playwright.pipeline",
        "CollectorJob": "splurge_cypress_to_playwright.jobs",
        "OutputJob": "splurge_cypress_to_playwright.jobs",
        "CypressToPlaywrightTransformer": "splurge_cypress_to_playwright.transformers.cypress_transformer",
        # Exceptions
        "MigrationError": "splurge_cypress_to_playwright.exceptions",
        "ParseError": "splurge_cypress_to_playwright.exceptions",
        "TransformationError": "splurge_cypress_to_playwright.exceptions",
        "ValidationError": "splurge_cypress_to_playwright.exceptions",
        "ConfigurationError": "splurge_cypress_to_playwright.exceptions",
    }

    if name not in mapping:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = importlib.import_module(mapping[name])

    # 'main' and 'cli' are the modules themselves.
    if name in {"main", "cli"}:
        return module
    return getattr(module, name)


def __dir__():
    return sorted(list(globals().keys()) + __all__)

"""
Form Validation - schema-driven validation of dynamic form submissions.

This package validates submitted form data against a form schema fetched from
a remote form management provider and reconciles the provider's own validation
result with locally computed rules.

Modules:
    engine: Schema indexing, date rewriting, file completeness checks and error reconciliation
    clients: HTTP client for the form management provider
    services: Request-level orchestration of the validation pipeline
    schemas: Pydantic models for schemas, submissions and verdicts
    config: Application settings
    utils: Logging helpers
"""

__version__ = "0.1.0"
__author__ = "Form Validation Team"

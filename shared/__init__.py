"""
Shared utilities for step filter evaluation.

This package aggregates common building blocks consumed by the filter
service:

- config: Settings via pydantic-settings
- logging: Structured logging with trace correlation
- errors: Canonical error types and responses
- retry: Retry decorators for remote calls

Do not import from service_* packages into shared/.
"""

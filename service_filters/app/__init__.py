"""
Step filter service package.

Decides whether a notification workflow step should fire by evaluating
its configured filter groups against the trigger payload, subscriber
attributes and, for webhook conditions, a remote response. It provides:

- app.filters: Filter models, value coercion, condition evaluation and
  the filter engine.
- app.webhook: HTTP client for webhook-backed conditions.

Guidelines:
- Evaluation is stateless; nothing is cached between calls.
- Missing configuration enables a step; evaluation errors never do.
"""

from .filters.engine import FilterEngine, is_step_enabled

__all__ = ["FilterEngine", "is_step_enabled"]

"""
Filters package.

Defines the filter model and the evaluation engine for workflow steps.
Groups combine leaf conditions with AND/OR; local conditions are always
resolved before any webhook call is considered.

Modules of interest:
- models: Data classes for steps, groups, conditions and the variables context.
- coercion: Conversion of configured literals to the runtime type they are compared with.
- conditions: Operator evaluation for a single condition.
- engine: Group and step evaluation with short-circuiting.
"""

"""
Webhook package.

Provides the client used by webhook conditions: a JSON POST of the
variables context with bounded retry, resolving every failure to
"no response".
"""

"""Structured logging: formatters, handlers and run/stage/scope context."""

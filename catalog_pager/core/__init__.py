"""Core building blocks: database helpers, pagination, settings and exceptions."""

"""Move processing helpers.

This package centralizes move validation + application so every move flows
through the same pipeline regardless of which entry point submitted it.
"""

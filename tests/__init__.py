"""
Test package for scoped-output.

This package contains:
- Unit tests for the escaper, registry, session and CSV format
- Integration tests for plugins, replay and the CLI
- Property-based tests using Hypothesis
"""

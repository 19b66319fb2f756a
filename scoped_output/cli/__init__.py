"""
Command-line interface for scoped-output.
"""

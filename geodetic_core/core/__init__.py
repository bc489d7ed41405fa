"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named numeric limits, tolerances and notation symbols
- exceptions: Custom exception hierarchy
"""

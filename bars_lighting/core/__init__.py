"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants shared by the dialects and geometry
- exceptions: Custom exception hierarchy
"""

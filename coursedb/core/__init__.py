"""
Core utilities shared across coursedb.

This package hosts:
- configuration helpers (env vars, data paths)
- the error taxonomy raised by stores and services
- logging setup (structlog over stdlib logging)
- password hashing helpers
"""

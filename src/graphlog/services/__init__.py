"""Service layer: every operation returns a ServiceResult.

The CLI (and any future adapter) consumes services, never the domain directly.
"""

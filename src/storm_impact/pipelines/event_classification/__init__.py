"""Event classification pipeline — raw descriptions to general categories."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]

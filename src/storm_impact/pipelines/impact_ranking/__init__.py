"""Impact ranking pipeline — per-category mean health and economic impact."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]

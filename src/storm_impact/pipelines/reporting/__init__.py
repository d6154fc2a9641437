"""Reporting pipeline — bar charts of the ranked impact tables."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]

"""Raw → normalized data processing pipeline for NOAA storm data."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]

"""storm_impact — which storm event types do the most harm per event."""

__version__ = "0.1.0"

"""notelens: incremental note search with a consistent selected view."""

__version__ = "0.1.0"

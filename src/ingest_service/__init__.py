"""Media ingest service: authenticated video and thumbnail uploads."""

__version__ = "1.0.0"

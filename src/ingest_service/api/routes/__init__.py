"""API route modules."""

from . import videos

__all__ = ["videos"]

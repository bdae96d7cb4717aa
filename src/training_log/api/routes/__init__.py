"""API route modules."""

from . import analytics, records, sessions

__all__ = ["analytics", "records", "sessions"]

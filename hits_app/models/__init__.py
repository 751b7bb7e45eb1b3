"""
Database models for hit statistics.

Hits reference a Host; both live in the main database.
"""

from .host import Host
from .hit import Hit

__all__ = ["Host", "Hit"]

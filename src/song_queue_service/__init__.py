"""
Song Queue Service - song request queue with a host-side terminal dashboard.

Requesters submit song URLs over HTTP; the host pops them in arrival order.
"""

__version__ = "1.0.0"

from .main import main, create_app

__all__ = ["main", "create_app"]

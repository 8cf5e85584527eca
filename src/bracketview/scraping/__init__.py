"""start.gg data access for the bracket display."""

from __future__ import annotations

from bracketview.scraping.api import (
    FetchError,
    StartGGClient,
    get_api_token,
    post_query,
)
from bracketview.scraping.storage import SnapshotCache

__all__ = [
    # API
    "StartGGClient",
    "FetchError",
    "post_query",
    "get_api_token",
    # Storage
    "SnapshotCache",
]

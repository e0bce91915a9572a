"""
api.deps
========

FastAPI dependency providers.

`get_store` yields a fresh **DBGraphStore** per request so every call runs
its own load → transition → save transaction against the SQLite store.
"""

from functools import lru_cache
from typing import Iterator

from chronograph.graph_db import DBGraphStore
from chronograph.settings import settings


def get_store() -> Iterator[DBGraphStore]:
    """DB‑backed graph store, closed when the request finishes."""
    with DBGraphStore() as store:
        yield store


@lru_cache
def get_settings():
    """Return application settings."""
    return settings

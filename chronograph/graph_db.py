"""
chronograph.graph_db
====================

SQLite‑backed unit of work around a :class:`chronograph.graph.PropertyGraph`.

Each :meth:`DBGraphStore.transaction` loads the graph, hands it to the
caller inside :meth:`PropertyGraph.transaction`, then writes it back and
commits.  If the block raises, the session is rolled back and nothing is
persisted.

Writes are checked optimistically: the graph version read at load time
must still be the committed one when the transaction saves, otherwise
:class:`chronograph.errors.StoreConflictError` is raised and nothing is
written.  Two overlapping transitions therefore never both commit.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlmodel import Session

from chronograph.db import SessionLocal, bump_version, load_graph, read_version, save_graph
from chronograph.graph import PropertyGraph

logger = logging.getLogger(__name__)


class DBGraphStore:
    """
    Persistent graph store.

    Example
    -------
    >>> with DBGraphStore() as store:
    ...     with store.transaction() as graph:
    ...         entity = create_entity(graph, state_props={"name": "ACME"})
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session = session or SessionLocal()

    # ------------------------------------------------------------------ reads
    def load(self) -> PropertyGraph:
        """Return a detached copy of the stored graph."""
        return load_graph(self._session)

    # ---------------------------------------------------------- unit of work
    @contextmanager
    def transaction(self) -> Iterator[PropertyGraph]:
        # version is read before the graph, so the snapshot is never older than it
        version = read_version(self._session)
        graph = load_graph(self._session)
        try:
            with graph.transaction():
                yield graph
            bump_version(self._session, version)
            save_graph(self._session, graph)
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.debug("Rolled back store transaction")
            raise

    # ----------------------------------------------------- context manager
    def __enter__(self) -> "DBGraphStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._session.close()

"""
chronograph.db
==============

SQLite persistence layer for Chronograph.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at *chronograph.db*
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``create_all()`` – helper to create tables at first run
* ``save_graph()`` / ``load_graph()`` – write and read a whole
  :class:`chronograph.graph.PropertyGraph`, ids included
* ``read_version()`` / ``bump_version()`` – optimistic write check shared by
  every store transaction
"""

from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import Column, JSON, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from chronograph.errors import StoreConflictError
from chronograph.graph import PropertyGraph
from chronograph.models import Relationship
from chronograph.settings import DB_ECHO, DB_URL


# ---------------------------------------------------------------------------
# Engine (SQLite file lives in project root unless CHRONOGRAPH_DB_FILE is set)
# ---------------------------------------------------------------------------
def make_engine(url: str = DB_URL, echo: bool = DB_ECHO) -> Engine:
    """Build an engine; in-memory SQLite URLs share one connection across threads."""
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(url, echo=echo, poolclass=StaticPool,
                             connect_args={"check_same_thread": False})
    return create_engine(url, echo=echo)


engine = make_engine()


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal() -> Session:  # noqa: N802 (factory camel‑case for consistency with FastAPI docs)
    """Return a new Session bound to the global engine."""
    return Session(engine)


# ---------------------------------------------------------------------------
# ORM models mirroring PropertyGraph nodes and relationships
# ---------------------------------------------------------------------------
class NodeRow(SQLModel, table=True):
    """One graph node: its labels and property map as JSON."""

    __tablename__ = "node"

    id: int = Field(primary_key=True)
    labels: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    properties: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))


class RelationshipRow(SQLModel, table=True):
    """One typed relationship between two node rows."""

    __tablename__ = "relationship"

    id: int = Field(primary_key=True)
    start_id: int = Field(index=True)
    end_id: int = Field(index=True)
    type: str = Field(index=True)
    properties: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))


class CounterRow(SQLModel, table=True):
    """Next id to allocate per id space, so deleted ids stay retired."""

    __tablename__ = "id_counter"

    name: str = Field(primary_key=True)
    value: int


# ---------------------------------------------------------------------------
# Whole-graph helpers
# ---------------------------------------------------------------------------
def save_graph(s: Session, graph: PropertyGraph) -> None:
    """
    Make the tables mirror *graph*: upsert every node and relationship and
    delete rows the graph no longer has.  Does not commit.
    """
    rel_ids = {rel.id for rel in graph.relationships()}
    for row in s.exec(select(RelationshipRow)).all():
        if row.id not in rel_ids:
            s.delete(row)

    node_ids = set(graph.nodes())
    for row in s.exec(select(NodeRow)).all():
        if row.id not in node_ids:
            s.delete(row)

    for node in graph.nodes():
        s.merge(NodeRow(id=node, labels=graph.labels(node), properties=graph.properties(node)))

    for rel in graph.relationships():
        s.merge(RelationshipRow(
            id=rel.id,
            start_id=rel.start,
            end_id=rel.end,
            type=rel.type,
            properties=graph.relationship_properties(rel),
        ))

    for name, value in graph.id_counters().items():
        s.merge(CounterRow(name=name, value=value))


def load_graph(s: Session) -> PropertyGraph:
    """Rebuild a PropertyGraph from the tables."""
    graph = PropertyGraph()
    for row in s.exec(select(NodeRow).order_by(NodeRow.id)).all():
        graph.restore_node(row.id, row.labels or [], row.properties or {})

    for row in s.exec(select(RelationshipRow).order_by(RelationshipRow.id)).all():
        graph.restore_relationship(
            Relationship(id=row.id, start=row.start_id, end=row.end_id, type=row.type),
            row.properties or {},
        )

    counters = {row.name: row.value for row in s.exec(select(CounterRow)).all()}
    graph.restore_id_counters(counters)
    return graph


# ---------------------------------------------------------------------------
# Optimistic concurrency: one version number for the whole graph
# ---------------------------------------------------------------------------
VERSION_KEY = "version"


def read_version(s: Session) -> int:
    """Return the committed graph version (0 before the first write)."""
    row = s.exec(
        select(CounterRow)
        .where(CounterRow.name == VERSION_KEY)
        .execution_options(populate_existing=True)
    ).first()
    return row.value if row else 0


def bump_version(s: Session, expected: int) -> int:
    """
    Advance the graph version from *expected* to the next one.

    Raises :class:`StoreConflictError` when another transaction has already
    moved the version, so a stale snapshot is never written back.
    """
    table = CounterRow.__table__
    conn = s.connection()
    if expected == 0:
        try:
            conn.execute(insert(table).values(name=VERSION_KEY, value=1))
        except IntegrityError:
            raise StoreConflictError(expected) from None
        return 1

    result = conn.execute(
        update(table)
        .where(table.c.name == VERSION_KEY, table.c.value == expected)
        .values(value=expected + 1)
    )
    if result.rowcount != 1:
        raise StoreConflictError(expected)
    return expected + 1


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Engine | None = None) -> None:
    """Create all tables for imported SQLModel subclasses."""
    SQLModel.metadata.create_all(bind or engine)

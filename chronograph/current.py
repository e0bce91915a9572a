"""
chronograph.current
===================

Current-pointer manager.

An entity's ``CURRENT`` relationship marks its active State.  Promoting a
new State retires every existing current edge: the old State gets a
``PREVIOUS`` link from the new one, its ``HAS_STATE`` edge is closed with an
``endDate`` and the ``CURRENT`` edge is deleted.  The ``HAS_STATE`` edges are
never deleted; they are the durable history.

None of the functions here open a transaction.  Callers wrap each
transition in :meth:`chronograph.graph.PropertyGraph.transaction` (or an
outer store transaction) so a failure leaves no partial mutation behind.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .graph import PropertyGraph
from .models import DATE_PROP, END_DATE_PROP, Relationship, RelType

logger = logging.getLogger(__name__)


def current_relationships(graph: PropertyGraph, entity: int) -> List[Relationship]:
    """Return every outgoing CURRENT edge of *entity* (normally zero or one)."""
    return graph.outgoing(entity, RelType.CURRENT)


def current_relationship(graph: PropertyGraph, entity: int) -> Optional[Relationship]:
    """Return the entity's CURRENT edge, or None if it has no state yet."""
    rels = current_relationships(graph, entity)
    return rels[0] if rels else None


def add_current_state(graph: PropertyGraph, entity: int, state: int, at: int) -> None:
    """Attach *state* to *entity* with fresh CURRENT and HAS_STATE edges dated *at*."""
    graph.create_relationship(entity, state, RelType.CURRENT, {DATE_PROP: at})
    graph.create_relationship(entity, state, RelType.HAS_STATE, {DATE_PROP: at})


def retire(graph: PropertyGraph, current_rel: Relationship, new_state: int, at: int) -> None:
    """
    Retire the State *current_rel* points to in favour of *new_state*.

    Links ``new_state -[:PREVIOUS {date: old date}]-> old_state``, stamps
    ``endDate = at`` on every HAS_STATE edge entering the old State and
    deletes the CURRENT edge.
    """
    old_state = current_rel.end
    old_date = graph.get_relationship_property(current_rel, DATE_PROP)

    graph.create_relationship(new_state, old_state, RelType.PREVIOUS, {DATE_PROP: old_date})

    for has_state in graph.incoming(old_state, RelType.HAS_STATE):
        graph.set_relationship_property(has_state, END_DATE_PROP, at)

    graph.delete_relationship(current_rel)
    logger.debug(f"Retired state {old_state} of entity {current_rel.start} at {at}")


def promote_to_current(graph: PropertyGraph, entity: int, new_state: int, at: int) -> None:
    """
    Make *new_state* the current State of *entity* as of *at*.

    Every existing CURRENT edge is retired, then the new CURRENT and
    HAS_STATE edges are created.  With no existing edge this bootstraps the
    entity's first State.
    """
    existing = current_relationships(graph, entity)
    if len(existing) > 1:
        logger.warning(f"Entity {entity} has {len(existing)} CURRENT relationships; retiring all of them")

    for current_rel in existing:
        retire(graph, current_rel, new_state, at)

    add_current_state(graph, entity, new_state, at)

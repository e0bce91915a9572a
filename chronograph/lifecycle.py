"""
chronograph.lifecycle
=====================

State transitions for a versioned entity.

Three operations add a State to an entity and make it current:

* :func:`update` – the new State holds exactly the given properties.
* :func:`patch` – the new State is the current one with the given
  properties overlaid (copy-on-write); reference edges are replayed.
* :func:`patch_from` – like :func:`patch`, but the overlay and the labels
  come from an earlier State of the same entity.

Each call must run inside one transaction supplied by the caller, e.g.

>>> with graph.transaction():
...     state = patch(graph, entity, {"status": "ACTIVE"})
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .current import add_current_state, current_relationship, promote_to_current
from .errors import CurrentStateNotFoundError, StateNotLinkedError
from .graph import PropertyGraph
from .models import PropertyMap, Relationship, RelType, Timestamp
from .settings import settings
from .states import (
    ReferencePredicate,
    create_state,
    default_to_now,
    has_reference_label,
    state_labels,
)

logger = logging.getLogger(__name__)


def create_entity(
    graph: PropertyGraph,
    props: Optional[PropertyMap] = None,
    label: str = "",
    state_props: Optional[PropertyMap] = None,
    additional_label: str = "",
    date: Timestamp = None,
) -> int:
    """
    Create an Entity node and, when *state_props* is given, its first State.

    Returns the entity id.
    """
    labels = [settings.entity_label]
    if label:
        labels.append(label)
    entity = graph.set_properties(graph.create_node(labels), props)
    logger.info(f"Created entity with id {entity}")

    if state_props is not None:
        update(graph, entity, state_props, additional_label, date)
    return entity


def update(
    graph: PropertyGraph,
    entity: int,
    props: Optional[PropertyMap] = None,
    additional_label: str = "",
    date: Timestamp = None,
) -> int:
    """Add a brand-new State built from *props* alone and make it current."""
    at = default_to_now(date)
    new_state = create_state(graph, state_labels(additional_label), props)
    promote_to_current(graph, entity, new_state, at)

    logger.info(f"Updated entity with id {entity}, adding a state with id {new_state}")
    return new_state


def patch(
    graph: PropertyGraph,
    entity: int,
    props: Optional[PropertyMap] = None,
    additional_label: str = "",
    date: Timestamp = None,
    is_reference: Optional[ReferencePredicate] = None,
) -> int:
    """
    Add a State derived from the current one with *props* overlaid.

    Without a current State there is nothing to merge from, so the new State
    holds *props* alone and becomes the entity's first State.
    """
    labels = state_labels(additional_label)
    at = default_to_now(date)

    current_rel = current_relationship(graph, entity)
    if current_rel is not None:
        new_state = create_patched_state(graph, props, labels, at, current_rel, is_reference)
    else:
        new_state = create_state(graph, labels, props)
        add_current_state(graph, entity, new_state, at)

    logger.info(f"Patched entity with id {entity}, adding a state with id {new_state}")
    return new_state


def patch_from(
    graph: PropertyGraph,
    entity: int,
    state: int,
    date: Timestamp = None,
    is_reference: Optional[ReferencePredicate] = None,
) -> int:
    """
    Add a State derived from the current one, overlaid with the properties
    of *state* and carrying *state*'s labels.

    Raises
    ------
    StateNotLinkedError
        *state* is not part of *entity*'s history.
    CurrentStateNotFoundError
        *entity* has no current State.
    """
    at = default_to_now(date)
    labels = graph.labels(state)

    check_relationship(graph, entity, state)

    current_rel = current_relationship(graph, entity)
    if current_rel is None:
        raise CurrentStateNotFoundError(entity)

    new_state = create_patched_state(
        graph, graph.properties(state), labels, at, current_rel, is_reference
    )
    logger.info(f"Patched entity with id {entity} from state {state}, adding a state with id {new_state}")
    return new_state


def check_relationship(graph: PropertyGraph, entity: int, state: int) -> None:
    """Raise StateNotLinkedError unless *entity* has a HAS_STATE edge to *state*."""
    owners = [rel.start for rel in graph.incoming(state, RelType.HAS_STATE)]
    if not owners:
        raise StateNotLinkedError(entity, state, "no entity owns it")
    if entity not in owners:
        raise StateNotLinkedError(entity, state, f"it is owned by entity {owners[0]}")


def create_patched_state(
    graph: PropertyGraph,
    overrides: Optional[PropertyMap],
    labels: List[str],
    at: int,
    current_rel: Relationship,
    is_reference: Optional[ReferencePredicate] = None,
) -> int:
    """
    Copy the State *current_rel* points to into a new State, overlay
    *overrides* key by key, promote the copy to current and replay the
    base State's edges to reference nodes onto it.
    """
    is_reference = is_reference or has_reference_label
    base = current_rel.end
    entity = current_rel.start

    patched = graph.properties(base)
    patched.update(overrides or {})
    new_state = create_state(graph, labels, patched)

    promote_to_current(graph, entity, new_state, at)

    for rel in graph.outgoing(base):
        if is_reference(graph, rel.end):
            graph.create_relationship(new_state, rel.end, rel.type)
            logger.debug(f"Replayed {rel.type} edge from state {base} to reference node {rel.end}")

    return new_state

"""
chronograph.states
==================

State factory: builds the immutable snapshot nodes the engine attaches to
entities, plus the small helpers every transition shares.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from .graph import PropertyGraph
from .models import PropertyMap, Timestamp, now_millis
from .settings import settings

# (graph, node) -> is this node a reference/target node?
ReferencePredicate = Callable[[PropertyGraph, int], bool]


def state_labels(additional_label: Optional[str] = "") -> List[str]:
    """
    Return the label list for a new State: the state marker, followed by
    *additional_label* when it is non-empty.

    >>> state_labels("Draft")
    ['State', 'Draft']
    """
    labels = [settings.state_label]
    if additional_label:
        labels.append(additional_label)
    return labels


def create_state(graph: PropertyGraph, labels: Iterable[str], properties: Optional[PropertyMap]) -> int:
    """Create a State node carrying *labels* and *properties* verbatim."""
    return graph.set_properties(graph.create_node(labels), properties)


def default_to_now(date: Timestamp) -> int:
    """Return *date* unchanged, or the current epoch millis when it is None."""
    return now_millis() if date is None else date


def has_reference_label(graph: PropertyGraph, node: int) -> bool:
    return graph.has_label(node, settings.reference_label)

"""
chronograph.models
==================

Value types and schema constants shared by the graph store and the
state-transition engine.  Like the rest of the core, these objects carry
**no** external-library dependencies.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

# Epoch milliseconds; ``None`` means "not supplied, use now".
Timestamp = Optional[int]
PropertyMap = Dict[str, Any]

DATE_PROP = "date"
END_DATE_PROP = "endDate"


class RelType(str, Enum):
    """Relationship types written by the versioning engine."""
    CURRENT = "CURRENT"
    HAS_STATE = "HAS_STATE"
    PREVIOUS = "PREVIOUS"

    def __str__(self) -> str:        # nicer REPL display
        return self.value


@dataclass(frozen=True)
class Relationship:
    """
    Immutable handle on a directed, typed edge of a
    :class:`chronograph.graph.PropertyGraph`.

    Parameters
    ----------
    id : int
        Relationship id, unique within its graph.
    start : int
        Id of the node the edge leaves.
    end : int
        Id of the node the edge points to.
    type : str
        Relationship type name (e.g. ``"CURRENT"`` or ``"LIKES"``).

    The property map lives in the graph; read it with
    :meth:`PropertyGraph.relationship_properties`.
    """
    id: int
    start: int
    end: int
    type: str


def now_millis() -> int:
    """Return the current wall-clock instant in epoch milliseconds."""
    return int(time.time() * 1000)

"""
api.versioner
=============

Endpoints that create entities and add states to them.

Each endpoint is one store transaction: a precondition failure or a
missing node rolls it back and nothing is written.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from chronograph.errors import StoreConflictError, TransitionError
from chronograph.graph import PropertyGraph
from chronograph.graph_db import DBGraphStore
from chronograph.lifecycle import create_entity, patch, patch_from, update
from .deps import get_store

router = APIRouter(prefix="/entities", tags=["versioner"])

# Configure logging
logger = logging.getLogger(__name__)


class EntityRequest(BaseModel):
    """Model for entity creation request."""
    label: str = ""
    properties: Dict[str, Any] = Field(default_factory=dict)
    state: Optional[Dict[str, Any]] = None
    state_label: str = ""
    date: Optional[int] = None


class StateRequest(BaseModel):
    """Model for update / patch requests."""
    properties: Dict[str, Any] = Field(default_factory=dict)
    additional_label: str = ""
    date: Optional[int] = Field(None, description="Epoch millis; omitted means now")


class PatchFromRequest(BaseModel):
    """Model for patch-from requests."""
    state_id: int
    date: Optional[int] = None


class NodeOut(BaseModel):
    id: int
    labels: List[str]
    properties: Dict[str, Any]


def node_out(graph: PropertyGraph, node: int) -> NodeOut:
    return NodeOut(id=node, labels=graph.labels(node), properties=graph.properties(node))


def _run(store: DBGraphStore, op, *args) -> NodeOut:
    try:
        with store.transaction() as graph:
            node = op(graph, *args)
            return node_out(graph, node)
    except (TransitionError, StoreConflictError) as e:
        logger.warning(f"Rejected transition: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0] if e.args else e))


@router.post("", response_model=NodeOut, status_code=201)
def add_entity(data: EntityRequest, store: DBGraphStore = Depends(get_store)):
    """Create an Entity node, optionally with its first State."""
    return _run(store, create_entity, data.properties, data.label,
                data.state, data.state_label, data.date)


@router.post("/{entity_id}/update", response_model=NodeOut, status_code=201)
def update_entity(entity_id: int, data: StateRequest, store: DBGraphStore = Depends(get_store)):
    """Add a State holding exactly the given properties."""
    return _run(store, update, entity_id, data.properties, data.additional_label, data.date)


@router.post("/{entity_id}/patch", response_model=NodeOut, status_code=201)
def patch_entity(entity_id: int, data: StateRequest, store: DBGraphStore = Depends(get_store)):
    """Add a State derived from the current one with the given properties overlaid."""
    return _run(store, patch, entity_id, data.properties, data.additional_label, data.date)


@router.post("/{entity_id}/patch-from", response_model=NodeOut, status_code=201)
def patch_entity_from(entity_id: int, data: PatchFromRequest, store: DBGraphStore = Depends(get_store)):
    """Add a State derived from the current one, overlaid with an earlier State."""
    return _run(store, patch_from, entity_id, data.state_id, data.date)

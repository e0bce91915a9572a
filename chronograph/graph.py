"""
chronograph.graph
=================

Labelled property graph built on NetworkX.

Nodes carry a list of labels and a property map; relationships are typed,
directed and carry their own property map.  Several relationships may join
the same pair of nodes, so the backing store is a ``MultiDiGraph`` keyed by
relationship id.
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional

import networkx as nx

from .models import PropertyMap, Relationship

logger = logging.getLogger(__name__)


class PropertyGraph:
    """
    Lightweight wrapper around a MultiDiGraph that stores labels and
    properties on nodes and typed relationships between them.

    Example
    -------
    >>> pg = PropertyGraph()
    >>> ent = pg.create_node(["Entity"])
    >>> st = pg.set_properties(pg.create_node(["State"]), {"name": "ACME"})
    >>> rel = pg.create_relationship(ent, st, "CURRENT", {"date": 1})
    >>> [r.end for r in pg.outgoing(ent, "CURRENT")]
    [2]
    """

    def __init__(self) -> None:
        self.g = nx.MultiDiGraph()
        self._rels: Dict[int, Relationship] = {}  # relationship index by id
        self._next_node_id = 1
        self._next_rel_id = 1

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_node(self, node: int) -> Dict[str, Any]:
        if node not in self.g:
            raise KeyError(f"node {node} not found")
        return self.g.nodes[node]

    def _require_rel(self, rel: Relationship) -> Relationship:
        stored = self._rels.get(rel.id)
        if stored is None:
            raise KeyError(f"relationship {rel.id} not found")
        return stored

    def _edge_data(self, rel: Relationship) -> Dict[str, Any]:
        stored = self._require_rel(rel)
        return self.g.edges[stored.start, stored.end, stored.id]

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------
    def create_node(self, labels: Iterable[str] = ()) -> int:
        """Create a node with the given labels and no properties; return its id."""
        node = self._next_node_id
        self._next_node_id += 1
        unique: List[str] = []
        for label in labels:
            if label and label not in unique:
                unique.append(label)
        self.g.add_node(node, labels=unique, properties={})
        return node

    def set_properties(self, node: int, properties: Optional[PropertyMap]) -> int:
        """
        Assign every key of *properties* onto *node* and return the node.

        Values are stored verbatim; existing keys are overwritten.
        """
        data = self._require_node(node)
        if properties:
            data["properties"].update(properties)
        return node

    def add_label(self, node: int, label: str) -> None:
        labels = self._require_node(node)["labels"]
        if label not in labels:
            labels.append(label)

    def labels(self, node: int) -> List[str]:
        """Return a copy of the node's labels in insertion order."""
        return list(self._require_node(node)["labels"])

    def has_label(self, node: int, label: str) -> bool:
        return label in self._require_node(node)["labels"]

    def properties(self, node: int) -> PropertyMap:
        """Return a shallow copy of the node's property map."""
        return dict(self._require_node(node)["properties"])

    def get_property(self, node: int, key: str, default: Any = None) -> Any:
        return self._require_node(node)["properties"].get(key, default)

    def has_node(self, node: int) -> bool:
        return node in self.g

    def nodes(self, label: Optional[str] = None) -> List[int]:
        """Return node ids, optionally only those carrying *label*."""
        return [n for n, data in self.g.nodes(data=True)
                if label is None or label in data["labels"]]

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------
    def create_relationship(
        self,
        start: int,
        end: int,
        type: str,
        properties: Optional[PropertyMap] = None,
    ) -> Relationship:
        """Add an edge start → end of the given type and return its handle."""
        self._require_node(start)
        self._require_node(end)
        rel = Relationship(id=self._next_rel_id, start=start, end=end, type=str(type))
        self._next_rel_id += 1
        self.g.add_edge(start, end, key=rel.id, type=rel.type,
                        properties=dict(properties or {}))
        self._rels[rel.id] = rel
        return rel

    def delete_relationship(self, rel: Relationship) -> None:
        stored = self._require_rel(rel)
        self.g.remove_edge(stored.start, stored.end, key=stored.id)
        del self._rels[stored.id]

    def relationship(self, rel_id: int) -> Relationship:
        """Return the relationship with *rel_id* or raise KeyError if missing."""
        try:
            return self._rels[rel_id]
        except KeyError:
            raise KeyError(f"relationship {rel_id} not found") from None

    def relationships(self, type: Optional[str] = None) -> List[Relationship]:
        return [r for r in sorted(self._rels.values(), key=lambda r: r.id)
                if type is None or r.type == str(type)]

    def outgoing(self, node: int, type: Optional[str] = None) -> List[Relationship]:
        """Return relationships leaving *node*, optionally filtered by type."""
        self._require_node(node)
        rels = [self._rels[key] for _, _, key, t in self.g.out_edges(node, keys=True, data="type")
                if type is None or t == str(type)]
        return sorted(rels, key=lambda r: r.id)

    def incoming(self, node: int, type: Optional[str] = None) -> List[Relationship]:
        """Return relationships entering *node*, optionally filtered by type."""
        self._require_node(node)
        rels = [self._rels[key] for _, _, key, t in self.g.in_edges(node, keys=True, data="type")
                if type is None or t == str(type)]
        return sorted(rels, key=lambda r: r.id)

    def relationship_properties(self, rel: Relationship) -> PropertyMap:
        return dict(self._edge_data(rel)["properties"])

    def get_relationship_property(self, rel: Relationship, key: str, default: Any = None) -> Any:
        return self._edge_data(rel)["properties"].get(key, default)

    def set_relationship_property(self, rel: Relationship, key: str, value: Any) -> None:
        self._edge_data(rel)["properties"][key] = value

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator["PropertyGraph"]:
        """
        Run a block of mutations all-or-nothing.

        A deep snapshot is taken on entry; if the block raises, the graph is
        restored to it and the exception propagates.
        """
        snapshot = (copy.deepcopy(self.g), dict(self._rels),
                    self._next_node_id, self._next_rel_id)
        try:
            yield self
        except BaseException:
            self.g, self._rels, self._next_node_id, self._next_rel_id = snapshot
            logger.debug("Rolled back graph transaction")
            raise

    # ------------------------------------------------------------------
    # Rebuilding from storage (ids are preserved)
    # ------------------------------------------------------------------
    def restore_node(self, node: int, labels: Iterable[str], properties: PropertyMap) -> None:
        if node in self.g:
            raise ValueError(f"node {node} already exists")
        self.g.add_node(node, labels=list(labels), properties=dict(properties))
        self._next_node_id = max(self._next_node_id, node + 1)

    def restore_relationship(self, rel: Relationship, properties: PropertyMap) -> None:
        if rel.id in self._rels:
            raise ValueError(f"relationship {rel.id} already exists")
        self._require_node(rel.start)
        self._require_node(rel.end)
        self.g.add_edge(rel.start, rel.end, key=rel.id, type=rel.type,
                        properties=dict(properties))
        self._rels[rel.id] = rel
        self._next_rel_id = max(self._next_rel_id, rel.id + 1)

    def id_counters(self) -> Dict[str, int]:
        """Next ids to allocate; deleted ids are never handed out again."""
        return {"node": self._next_node_id, "relationship": self._next_rel_id}

    def restore_id_counters(self, counters: Dict[str, int]) -> None:
        self._next_node_id = max(self._next_node_id, counters.get("node", 1))
        self._next_rel_id = max(self._next_rel_id, counters.get("relationship", 1))

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_json(self) -> Dict[str, Any]:
        """
        Convert the graph to JSON format for visualization.
        Returns a dict with nodes and links arrays.
        """
        nodes = []
        for node, data in sorted(self.g.nodes(data=True)):
            nodes.append({
                "id": node,
                "labels": list(data["labels"]),
                "properties": dict(data["properties"]),
            })

        links = []
        for rel in self.relationships():
            links.append({
                "id": rel.id,
                "source": rel.start,
                "target": rel.end,
                "type": rel.type,
                "properties": self.relationship_properties(rel),
            })

        return {
            "nodes": nodes,
            "links": links
        }

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return self.g.number_of_nodes()

    def __contains__(self, node: object) -> bool:
        return node in self.g



"""
Chronograph
===========

Temporal versioning of entities stored in a property graph.

Every *Entity* node accumulates an ordered history of immutable *State*
snapshots, with exactly one state marked current at any time.

Import structure
----------------
`import chronograph` is intentionally cheap: the engine sub‑modules only
need *networkx* and *pydantic-settings*.  *sqlmodel* is imported by
:pymod:`chronograph.db`, and *matplotlib* only when you explicitly access
:pymod:`chronograph.viz`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`chronograph.graph`       – ``PropertyGraph`` on a NetworkX MultiDiGraph
- :pymod:`chronograph.states`      – State factory helpers
- :pymod:`chronograph.current`     – CURRENT pointer retirement / promotion
- :pymod:`chronograph.lifecycle`   – ``update``, ``patch``, ``patch_from``
- :pymod:`chronograph.db`          – SQLite persistence (SQLModel)
- :pymod:`chronograph.graph_db`    – ``DBGraphStore`` unit of work
- :pymod:`chronograph.viz`         – plotting helper

Quick start
-----------
>>> from chronograph.graph import PropertyGraph
>>> from chronograph.lifecycle import create_entity, patch
>>> g = PropertyGraph()
>>> with g.transaction():
...     ent = create_entity(g, state_props={"a": 1, "b": 2}, date=1)
...     st = patch(g, ent, {"b": 3, "c": 4}, date=2)
>>> g.properties(st)
{'a': 1, 'b': 3, 'c': 4}

"""

__all__ = [
    "graph",
    "states",
    "current",
    "lifecycle",
    "db",
    "graph_db",
    "viz",
]

__version__ = "0.1.0"

"""
tests/test_graph.py
===================

Unit tests for chronograph.graph.PropertyGraph
"""

import pytest

from chronograph.graph import PropertyGraph
from chronograph.models import Relationship


def _demo_graph():
    pg = PropertyGraph()
    a = pg.create_node(["Entity"])
    b = pg.set_properties(pg.create_node(["State"]), {"name": "ACME"})
    c = pg.create_node(["R"])
    pg.create_relationship(a, b, "CURRENT", {"date": 10})
    pg.create_relationship(a, b, "HAS_STATE", {"date": 10})
    pg.create_relationship(b, c, "LIKES")
    return pg, a, b, c


def test_create_node_dedupes_labels_and_skips_empty():
    pg = PropertyGraph()
    node = pg.create_node(["State", "", "Draft", "State"])
    assert pg.labels(node) == ["State", "Draft"]
    assert pg.properties(node) == {}


def test_set_properties_overwrites_and_returns_node():
    pg = PropertyGraph()
    node = pg.create_node(["State"])
    assert pg.set_properties(node, {"a": 1, "b": [1, 2]}) == node
    pg.set_properties(node, {"a": 2})
    assert pg.properties(node) == {"a": 2, "b": [1, 2]}
    assert pg.get_property(node, "missing", "dflt") == "dflt"


def test_properties_returns_a_copy():
    pg = PropertyGraph()
    node = pg.set_properties(pg.create_node(), {"a": 1})
    pg.properties(node)["a"] = 99
    assert pg.get_property(node, "a") == 1


def test_parallel_relationships_filtered_by_type():
    pg, a, b, c = _demo_graph()
    assert [r.type for r in pg.outgoing(a)] == ["CURRENT", "HAS_STATE"]
    assert [r.end for r in pg.outgoing(a, "CURRENT")] == [b]
    assert [r.start for r in pg.incoming(b, "HAS_STATE")] == [a]
    assert pg.incoming(a) == []
    assert len(pg.relationships("LIKES")) == 1


def test_relationship_properties_roundtrip():
    pg, a, b, _ = _demo_graph()
    rel = pg.outgoing(a, "HAS_STATE")[0]
    pg.set_relationship_property(rel, "endDate", 20)
    assert pg.relationship_properties(rel) == {"date": 10, "endDate": 20}
    assert pg.get_relationship_property(rel, "nope") is None


def test_delete_relationship_keeps_nodes():
    pg, a, b, _ = _demo_graph()
    rel = pg.outgoing(a, "CURRENT")[0]
    pg.delete_relationship(rel)
    assert pg.outgoing(a, "CURRENT") == []
    assert pg.has_node(b)
    with pytest.raises(KeyError):
        pg.delete_relationship(rel)


def test_missing_node_raises_key_error():
    pg = PropertyGraph()
    with pytest.raises(KeyError):
        pg.labels(42)
    with pytest.raises(KeyError):
        pg.create_relationship(1, 2, "X")


def test_transaction_rolls_back_on_error():
    pg, a, b, _ = _demo_graph()
    before = pg.to_json()
    with pytest.raises(RuntimeError):
        with pg.transaction():
            pg.create_node(["State"])
            pg.delete_relationship(pg.outgoing(a, "CURRENT")[0])
            pg.set_properties(b, {"name": "changed"})
            raise RuntimeError("boom")
    assert pg.to_json() == before
    # ids allocated inside the failed transaction are handed out again
    assert pg.create_node() == 4


def test_transaction_commits_on_success():
    pg = PropertyGraph()
    with pg.transaction() as tx:
        node = tx.create_node(["State"])
    assert pg.has_node(node)


def test_restore_preserves_ids_and_counters():
    pg = PropertyGraph()
    pg.restore_node(5, ["State"], {"a": 1})
    pg.restore_node(7, ["Entity"], {})
    pg.restore_relationship(Relationship(id=3, start=7, end=5, type="CURRENT"), {"date": 1})
    pg.restore_id_counters({"node": 10, "relationship": 9})
    assert pg.relationship(3).end == 5
    assert pg.create_node() == 10
    assert pg.create_relationship(7, 5, "HAS_STATE").id == 9
    with pytest.raises(ValueError):
        pg.restore_node(5, [], {})


def test_to_json_shape():
    pg, a, b, c = _demo_graph()
    data = pg.to_json()
    assert [n["id"] for n in data["nodes"]] == [a, b, c]
    assert data["links"][0] == {
        "id": 1, "source": a, "target": b, "type": "CURRENT", "properties": {"date": 10},
    }
    assert len(pg) == 3

"""
tests/test_viz.py
=================

Smoke test for chronograph.viz.plot_property_graph
"""

from chronograph.lifecycle import create_entity, patch
from chronograph.current import current_relationship
from chronograph.viz import plot_property_graph


def test_plot_writes_png(graph, tmp_path):
    entity = create_entity(graph, state_props={"a": 1}, date=1)
    ref = graph.create_node(["R"])
    graph.create_relationship(current_relationship(graph, entity).end, ref, "LIKES")
    patch(graph, entity, {"a": 2}, date=2)

    out = plot_property_graph(graph, tmp_path / "nested" / "graph.png")
    assert out.exists()
    assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"

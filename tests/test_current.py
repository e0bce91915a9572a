"""
tests/test_current.py
=====================

Unit tests for CURRENT pointer retirement / promotion in chronograph.current
"""

from chronograph.current import current_relationship, current_relationships, promote_to_current
from chronograph.models import RelType


def _entity_and_state(graph):
    entity = graph.create_node(["Entity"])
    state = graph.set_properties(graph.create_node(["State"]), {"v": 1})
    return entity, state


def test_no_current_relationship(graph):
    entity = graph.create_node(["Entity"])
    assert current_relationship(graph, entity) is None
    assert current_relationships(graph, entity) == []


def test_first_promotion_bootstraps_history(graph):
    entity, state = _entity_and_state(graph)
    promote_to_current(graph, entity, state, 100)

    current = current_relationship(graph, entity)
    assert current.end == state
    assert graph.relationship_properties(current) == {"date": 100}
    has_state = graph.incoming(state, RelType.HAS_STATE)
    assert len(has_state) == 1
    assert graph.relationship_properties(has_state[0]) == {"date": 100}
    assert graph.relationships(RelType.PREVIOUS) == []


def test_promotion_retires_previous_state(graph):
    entity, old = _entity_and_state(graph)
    promote_to_current(graph, entity, old, 100)
    new = graph.create_node(["State"])
    promote_to_current(graph, entity, new, 200)

    assert [r.end for r in current_relationships(graph, entity)] == [new]

    previous = graph.outgoing(new, RelType.PREVIOUS)
    assert [r.end for r in previous] == [old]
    assert graph.relationship_properties(previous[0]) == {"date": 100}

    old_has_state = graph.incoming(old, RelType.HAS_STATE)[0]
    assert graph.relationship_properties(old_has_state) == {"date": 100, "endDate": 200}
    new_has_state = graph.incoming(new, RelType.HAS_STATE)[0]
    assert graph.relationship_properties(new_has_state) == {"date": 200}


def test_every_current_edge_is_retired(graph):
    """A malformed entity with two CURRENT edges ends up with exactly one."""
    entity = graph.create_node(["Entity"])
    s1 = graph.create_node(["State"])
    s2 = graph.create_node(["State"])
    for state, date in ((s1, 10), (s2, 20)):
        graph.create_relationship(entity, state, RelType.CURRENT, {"date": date})
        graph.create_relationship(entity, state, RelType.HAS_STATE, {"date": date})

    s3 = graph.create_node(["State"])
    promote_to_current(graph, entity, s3, 30)

    assert [r.end for r in current_relationships(graph, entity)] == [s3]
    prev = {r.end: graph.get_relationship_property(r, "date")
            for r in graph.outgoing(s3, RelType.PREVIOUS)}
    assert prev == {s1: 10, s2: 20}
    for state in (s1, s2):
        (has_state,) = graph.incoming(state, RelType.HAS_STATE)
        assert graph.get_relationship_property(has_state, "endDate") == 30


def test_backdated_promotion_is_accepted(graph):
    """Timestamps are not checked against history order."""
    entity, old = _entity_and_state(graph)
    promote_to_current(graph, entity, old, 500)
    new = graph.create_node(["State"])
    promote_to_current(graph, entity, new, 100)
    assert graph.get_relationship_property(current_relationship(graph, entity), "date") == 100

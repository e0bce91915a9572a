"""
chronograph.errors
==================

Domain errors raised by the state-transition engine.

Every error names the node ids involved so the failing entity/state can be
identified from the message alone.  Storage failures (``KeyError`` for a
missing node or relationship) are not wrapped and propagate unchanged.
"""

from __future__ import annotations


class TransitionError(ValueError):
    """Base error for a state transition whose preconditions do not hold."""


class CurrentStateNotFoundError(TransitionError):
    """The entity has no current state to transition from."""

    def __init__(self, entity: int):
        super().__init__(f"can't find any current state for entity {entity}")
        self.entity = entity


class StateNotLinkedError(TransitionError):
    """The given state is not part of the entity's history."""

    def __init__(self, entity: int, state: int, detail: str = ""):
        message = f"state {state} is not linked to entity {entity}"
        super().__init__(f"{message}: {detail}" if detail else message)
        self.entity = entity
        self.state = state


class StoreConflictError(RuntimeError):
    """Another transaction committed to the store after this one loaded it."""

    def __init__(self, loaded_version: int):
        super().__init__(
            f"graph store changed since version {loaded_version} was loaded; retry the transition"
        )
        self.loaded_version = loaded_version

"""
Immutable state update utilities using Pydantic model_copy.

Helpers for the collection-level updates every lifecycle transition needs.
They never mutate the input state; each returns a new LeagueState where only
the named collection is replaced and every other collection is shared with
the previous snapshot.
"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from league.logic.exceptions import InvalidInputError
from league.logic.state import LeagueState

EntityT = TypeVar("EntityT", bound=BaseModel)

_COLLECTIONS = set(LeagueState.model_fields) - {"current_user_id"}


def _check_collection(collection: str) -> None:
    if collection not in _COLLECTIONS:
        raise ValueError(f"Unknown state collection: {collection!r}")


def find_by_id(items: tuple[EntityT, ...], entity_id: str) -> EntityT | None:
    """Return the entity with the given id, or None."""
    return next((item for item in items if getattr(item, "id", None) == entity_id), None)


def append_entity(state: LeagueState, collection: str, entity: BaseModel) -> LeagueState:
    """Return new state with entity appended to the named collection."""
    _check_collection(collection)
    items = getattr(state, collection)
    return state.model_copy(update={collection: (*items, entity)})


def remove_entity(state: LeagueState, collection: str, entity_id: str) -> LeagueState:
    """Return new state without the entity. Unknown ids leave the collection as is."""
    _check_collection(collection)
    items = getattr(state, collection)
    return state.model_copy(update={collection: tuple(item for item in items if item.id != entity_id)})


def replace_entity(state: LeagueState, collection: str, entity: BaseModel) -> LeagueState:
    """Return new state with the entity sharing entity.id swapped for the given one."""
    _check_collection(collection)
    items = getattr(state, collection)
    entity_id = getattr(entity, "id")  # noqa: B009
    return state.model_copy(
        update={collection: tuple(entity if item.id == entity_id else item for item in items)},
    )


def update_fields(entity: EntityT, allowed: frozenset[str], **updates: object) -> EntityT:
    """
    Return a copy of entity with the given fields merged in.

    Args:
        entity: Frozen model to copy
        allowed: Field names callers may change
        **updates: New field values

    Returns:
        Validated copy of entity

    Raises:
        InvalidInputError: If any update names a field outside allowed or has an invalid value

    """
    invalid_fields = set(updates) - allowed
    if invalid_fields:
        raise InvalidInputError(f"Invalid update fields: {sorted(invalid_fields)}")
    try:
        return type(entity).model_validate({**entity.model_dump(), **updates})
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid update values: {exc.error_count()} error(s)") from exc

"""Server-context state for one orchestrator.

The remote backend keeps conversational state per client key. The
orchestrator tracks which local room that state currently reflects as a
two-case tagged state instead of two loose flags, so the resync trigger is a
single predicate (:func:`needs_sync`).
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from gamebot.core.models import RoomId


@dataclass(frozen=True, slots=True)
class Stale:
    """Remote context does not reflect any known room."""


@dataclass(frozen=True, slots=True, kw_only=True)
class Synced:
    """Remote context was reset and primed for ``room_id``.

    ``first_turn_pending`` stays true until the first admitted turn after the
    sync gets a reply; only that turn may carry a local context summary.
    """

    room_id: RoomId
    first_turn_pending: bool = True


type ContextState = Stale | Synced

STALE = Stale()


def needs_sync(state: ContextState, room_id: RoomId) -> bool:
    """True when reset + system prompt must run before the next turn in ``room_id``."""
    return not (isinstance(state, Synced) and state.room_id == room_id)


def is_first_turn(state: ContextState) -> bool:
    # A stale state always syncs first, which marks the turn as first.
    if isinstance(state, Synced):
        return state.first_turn_pending
    return True


def mark_synced(room_id: RoomId) -> Synced:
    return Synced(room_id=room_id, first_turn_pending=True)


def mark_replied(state: ContextState) -> ContextState:
    """Clear the first-turn flag after a successful reply."""
    if isinstance(state, Synced):
        return replace(state, first_turn_pending=False)
    return state

"""String keys used only at the persistence boundary."""

import json
from typing import Sequence

from nimq.core.entities.nim import NimAction, State
from nimq.core.exceptions import QTableFormatError


def state_to_key(state: Sequence[int]) -> str:
    """Encode piles as a compact JSON array, e.g. ``"[3,4,5]"``."""
    return json.dumps([int(p) for p in state], separators=(",", ":"))


def key_to_state(key: str) -> State:
    try:
        piles = json.loads(key)
    except (TypeError, json.JSONDecodeError) as e:
        raise QTableFormatError(f"State key is not a JSON array: {key!r}") from e

    if not isinstance(piles, list) or not all(
        isinstance(p, int) and not isinstance(p, bool) and p >= 0 for p in piles
    ):
        raise QTableFormatError(f"State key must list non-negative integers: {key!r}")
    return tuple(piles)


def action_to_key(action: NimAction) -> str:
    """Encode an action as ``"pileIndex,count"``, e.g. ``"1,2"``."""
    return f"{action.pile_index},{action.count}"


def key_to_action(key: str) -> NimAction:
    parts = key.split(",")
    if len(parts) != 2:
        raise QTableFormatError(f"Action key must be 'pileIndex,count': {key!r}")
    try:
        pile_index, count = (int(part.strip()) for part in parts)
    except ValueError as e:
        raise QTableFormatError(f"Action key must hold two integers: {key!r}") from e
    return NimAction(pile_index, count)

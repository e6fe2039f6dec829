from itertools import product

import numpy as np
import pytest

from nimq.core.entities.nim import NimAction, as_state
from nimq.core.exceptions import IllegalStateError, InvalidActionError
from nimq.core.rules import (
    apply_action,
    generate_initial_state,
    is_legal,
    is_terminal,
    nim_sum,
    random_action,
    valid_actions,
)

SMALL_STATES = [tuple(s) for s in product(range(4), repeat=3)]


def test_initial_state_shape_and_range():
    rng = np.random.default_rng(1)
    states = [generate_initial_state(rng) for _ in range(2000)]

    assert all(len(s) in (3, 4) for s in states)
    assert all(1 <= p <= 10 for s in states for p in s)

    three_pile_share = sum(len(s) == 3 for s in states) / len(states)
    assert three_pile_share == pytest.approx(0.25, abs=0.04)

    # Every count from 1 to 10 shows up
    assert {p for s in states for p in s} == set(range(1, 11))


def test_initial_state_is_reproducible_with_a_seed():
    first = [generate_initial_state(np.random.default_rng(42)) for _ in range(3)]
    second = [generate_initial_state(np.random.default_rng(42)) for _ in range(3)]
    assert first == second


def test_initial_state_overrides():
    rng = np.random.default_rng(3)
    state = generate_initial_state(rng, three_pile_probability=1.0, min_count=2, max_count=2)
    assert state == (2, 2, 2)


def test_valid_actions_order():
    assert valid_actions((2, 0, 1)) == [NimAction(0, 1), NimAction(0, 2), NimAction(2, 1)]


def test_valid_actions_terminal():
    assert valid_actions((0, 0, 0)) == []


def test_apply_action_returns_new_state():
    piles = [3, 4, 5]
    result = apply_action(piles, NimAction(1, 2))

    assert result == (3, 2, 5)
    assert piles == [3, 4, 5]


@pytest.mark.parametrize(
    "action",
    [NimAction(1, 1), NimAction(-1, 1), NimAction(0, 0), NimAction(0, 4), NimAction(0, -1)],
)
def test_apply_action_rejects_illegal_moves(action):
    with pytest.raises(InvalidActionError):
        apply_action((3,), action)
    assert not is_legal((3,), action)


def test_invalid_action_is_a_value_error():
    with pytest.raises(ValueError):
        apply_action((1, 1), NimAction(2, 1))


@pytest.mark.parametrize("state", SMALL_STATES)
def test_every_valid_action_applies_and_shrinks_the_position(state):
    for action in valid_actions(state):
        next_state = apply_action(state, action)
        assert sum(next_state) < sum(state)
        assert all(p >= 0 for p in next_state)


@pytest.mark.parametrize("state", SMALL_STATES)
def test_terminal_iff_no_moves_iff_empty(state):
    assert is_terminal(state) == (valid_actions(state) == []) == (sum(state) == 0)


def test_random_action_is_legal_and_uniform():
    rng = np.random.default_rng(5)
    counts = {}
    for _ in range(3000):
        action = random_action((2, 1), rng)
        counts[action] = counts.get(action, 0) + 1

    assert set(counts) == set(valid_actions((2, 1)))
    assert all(c / 3000 == pytest.approx(1 / 3, abs=0.04) for c in counts.values())


def test_random_action_on_terminal_state():
    with pytest.raises(IllegalStateError):
        random_action((0, 0), np.random.default_rng(0))


def test_nim_sum():
    assert nim_sum((1, 2, 3)) == 0
    assert nim_sum((1, 2, 4)) == 7
    assert nim_sum(()) == 0


def test_as_state_rejects_negative_counts():
    with pytest.raises(ValueError):
        as_state([1, -1])
    assert as_state([3, 4]) == (3, 4)

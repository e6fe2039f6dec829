from collections import Counter

import numpy as np
import pytest

from nimq.core.entities.nim import Difficulty, NimAction
from nimq.core.exceptions import IllegalStateError
from nimq.core.policy import DifficultyAI, choose_action, select_ai_move
from nimq.core.q_table import QTableManager
from nimq.core.rules import valid_actions


@pytest.fixture
def q_table():
    return QTableManager()


def test_choose_action_refuses_terminal_state(q_table):
    with pytest.raises(IllegalStateError):
        choose_action((0, 0, 0), q_table)


def test_greedy_picks_highest_value(q_table):
    q_table.set((3,), NimAction(0, 1), -0.3)
    q_table.set((3,), NimAction(0, 2), 1.0)

    assert choose_action((3,), q_table, 0.0) == NimAction(0, 2)


def test_ties_go_to_the_first_valid_action(q_table):
    q_table.set((2, 2), NimAction(1, 1), 0.5)
    q_table.set((2, 2), NimAction(0, 1), 0.5)

    assert choose_action((2, 2), q_table, 0.0) == NimAction(0, 1)


def test_unrecorded_actions_count_as_zero(q_table):
    q_table.set((2,), NimAction(0, 1), -0.5)

    assert choose_action((2,), q_table, 0.0) == NimAction(0, 2)


def test_unseen_state_is_played_at_random(q_table):
    rng = np.random.default_rng(2)
    picks = {choose_action((3, 3), q_table, 0.0, rng) for _ in range(200)}

    assert picks == set(valid_actions((3, 3)))


def test_full_exploration_ignores_values(q_table):
    q_table.set((4,), NimAction(0, 4), 10.0)
    rng = np.random.default_rng(4)

    picks = Counter(choose_action((4,), q_table, 1.0, rng) for _ in range(2000))

    assert set(picks) == set(valid_actions((4,)))
    assert all(count / 2000 == pytest.approx(0.25, abs=0.04) for count in picks.values())


def test_hard_always_follows_the_policy(q_table):
    q_table.set((5, 5), NimAction(1, 3), 0.9)
    rng = np.random.default_rng(0)

    moves = {select_ai_move((5, 5), Difficulty.HARD, q_table, rng) for _ in range(100)}
    assert moves == {NimAction(1, 3)}


def test_easy_is_uniform(q_table):
    q_table.set((4,), NimAction(0, 4), 10.0)
    rng = np.random.default_rng(8)

    picks = Counter(select_ai_move((4,), "easy", q_table, rng) for _ in range(4000))
    assert all(count / 4000 == pytest.approx(0.25, abs=0.03) for count in picks.values())


def test_medium_blends_policy_and_random(q_table):
    state = (10, 10, 10, 10)
    greedy = NimAction(3, 10)
    q_table.set(state, greedy, 1.0)
    rng = np.random.default_rng(12)

    samples = 4000
    hits = sum(select_ai_move(state, Difficulty.MEDIUM, q_table, rng) == greedy for _ in range(samples))

    # 70% policy, plus the random branch landing on the same move 1 time in 40
    expected = 0.7 + 0.3 / len(valid_actions(state))
    assert hits / samples == pytest.approx(expected, abs=0.035)


def test_custom_policy_rate(q_table):
    q_table.set((6,), NimAction(0, 5), 1.0)
    rng = np.random.default_rng(3)

    moves = {select_ai_move((6,), "medium", q_table, rng, policy_rate=1.0) for _ in range(50)}
    assert moves == {NimAction(0, 5)}


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_every_difficulty_returns_legal_moves(q_table, difficulty):
    rng = np.random.default_rng(6)
    state = (1, 0, 3)
    for _ in range(100):
        assert select_ai_move(state, difficulty, q_table, rng) in valid_actions(state)


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_every_difficulty_refuses_terminal_state(q_table, difficulty):
    with pytest.raises(IllegalStateError):
        select_ai_move((0, 0), difficulty, q_table, np.random.default_rng(0))


def test_unknown_difficulty(q_table):
    with pytest.raises(ValueError):
        select_ai_move((1,), "impossible", q_table)


def test_difficulty_ai_callable(q_table):
    q_table.set((2, 1), NimAction(0, 2), 0.4)
    ai = DifficultyAI(q_table, "hard", np.random.default_rng(0))

    assert ai((2, 1)) == NimAction(0, 2)
    assert ai.difficulty is Difficulty.HARD

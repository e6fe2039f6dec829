import pytest

from nimq.core.entities.nim import NimAction
from nimq.core.q_table import QTableManager


@pytest.fixture
def learner():
    return QTableManager(alpha=0.5, gamma=0.9)


def test_emptying_the_board_is_scored_as_a_loss(learner):
    # One object left: the only move empties the board and loses
    state_s = (0, 1)
    action_a = NimAction(1, 1)
    state_s_prime = (0, 0)

    new_q_value = learner.update_policy(state_s, action_a, -1.0, state_s_prime)

    # 0 + 0.5 * (-1 + 0.9 * 0 - 0)
    assert new_q_value == pytest.approx(-0.5)
    assert learner.get(state_s, action_a) == pytest.approx(-0.5)


def test_opponent_value_is_negated(learner):
    learner.set((0, 1), NimAction(1, 1), -0.5)

    # From (1, 1) taking one object hands the opponent the losing (0, 1)
    new_q_value = learner.update_policy((1, 1), NimAction(0, 1), 0.0, (0, 1))

    # 0 + 0.5 * (0 + 0.9 * -(-0.5) - 0)
    assert new_q_value == pytest.approx(0.225)


def test_repeated_updates_move_towards_target(learner):
    values = [learner.update_policy((1,), NimAction(0, 1), -1.0, (0,)) for _ in range(20)]

    assert values == sorted(values, reverse=True)
    assert values[-1] == pytest.approx(-1.0, abs=1e-5)


def test_max_value_only_considers_moves_legal_in_that_state(learner):
    # A value recorded for a move that is not legal in (1, 1) must be ignored
    learner.set((1, 1), NimAction(0, 3), 5.0)
    learner.set((1, 1), NimAction(0, 1), -0.2)
    learner.set((1, 1), NimAction(1, 1), -0.4)

    assert learner.max_value((1, 1)) == pytest.approx(-0.2)


def test_max_value_counts_unrecorded_moves_as_zero(learner):
    learner.set((2, 1), NimAction(0, 1), -0.5)
    learner.set((2, 1), NimAction(0, 2), -1.0)

    # NimAction(1, 1) is legal but unrecorded
    assert learner.max_value((2, 1)) == 0.0


def test_max_value_defaults(learner):
    assert learner.max_value((3, 4, 5)) == 0.0
    assert learner.max_value((0, 0, 0)) == 0.0

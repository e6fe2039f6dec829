import threading

import numpy as np
import pytest

from nimq.core.entities.nim import NimAction
from nimq.core.entities.settings import QLearningSettings
from nimq.core.evaluation import evaluate_against_random, policy_accuracy, winning_moves
from nimq.core.notifications import TraceNotifier
from nimq.core.pipelines import QLearningTrainer
from nimq.core.policy import choose_action


class StopAfter:
    """Cancel event that turns on after a number of checks."""

    def __init__(self, checks: int):
        self.remaining = checks

    def is_set(self) -> bool:
        self.remaining -= 1
        return self.remaining < 0


def make_trainer(seed=0, **overrides) -> QLearningTrainer:
    return QLearningTrainer(QLearningSettings(**overrides), np.random.default_rng(seed))


def test_single_object_episode_is_a_loss():
    trainer = make_trainer(start_piles=[1], episodes=1)
    q_table = trainer.train()

    assert q_table.get((1,), NimAction(0, 1)) == pytest.approx(-0.1)
    assert trainer.last_stats.episodes == 1
    assert trainer.last_stats.updates == 1


def test_two_single_piles_are_a_win_for_the_mover():
    trainer = make_trainer(start_piles=[1, 1], episodes=2000)
    q_table = trainer.train()

    # Taking either pile forces the opponent to take the last object
    assert q_table.get((1, 1), NimAction(0, 1)) > 0
    assert q_table.get((1, 1), NimAction(1, 1)) > 0
    assert q_table.get((0, 1), NimAction(1, 1)) == pytest.approx(-1.0, abs=1e-2)
    assert q_table.get((1, 0), NimAction(0, 1)) == pytest.approx(-1.0, abs=1e-2)
    assert policy_accuracy(q_table, [(1, 1), (0, 1), (1, 0)]) == 1.0


def test_learns_the_winning_reply_from_a_known_position():
    trainer = make_trainer(seed=7, start_piles=[1, 2, 4], episodes=20000, epsilon=0.2)
    q_table = trainer.train()

    # [1, 2, 4] has Nim-sum 7; the only winning move leaves [1, 2, 3]
    assert winning_moves((1, 2, 4)) == [NimAction(2, 1)]
    assert choose_action((1, 2, 4), q_table, 0.0) == NimAction(2, 1)

    report = evaluate_against_random(q_table, 500, np.random.default_rng(1), piles=(1, 2, 4))
    assert report.win_rate > 0.9


def test_random_openings_are_used_by_default():
    trainer = make_trainer(seed=3, episodes=100)
    q_table = trainer.train()

    assert trainer.last_stats.episodes == 100
    assert all(len(state) in (3, 4) for state in q_table.states())
    assert trainer.last_stats.table_size == len(q_table)


def test_custom_initial_state_factory():
    trainer = QLearningTrainer(
        QLearningSettings(episodes=10),
        np.random.default_rng(0),
        initial_state_factory=lambda rng: (2,),
    )
    q_table = trainer.train()

    assert set(q_table.states()) <= {(2,), (1,)}


def test_training_is_reproducible_with_a_seed():
    first = make_trainer(seed=9, episodes=300, start_piles=[2, 3]).train()
    second = make_trainer(seed=9, episodes=300, start_piles=[2, 3]).train()

    assert first.serialize() == second.serialize()


def test_warm_start_continues_from_given_table():
    trainer = make_trainer(start_piles=[1])
    q_table = trainer.new_q_table()
    q_table.set((1,), NimAction(0, 1), -0.5)

    result = trainer.train(q_table=q_table, episodes=1)

    assert result is q_table
    assert q_table.get((1,), NimAction(0, 1)) == pytest.approx(-0.55)


def test_cancel_before_start():
    event = threading.Event()
    event.set()
    trainer = make_trainer(episodes=100)

    q_table = trainer.train(cancel_event=event)

    assert q_table.is_empty()
    assert trainer.last_stats.cancelled
    assert trainer.last_stats.episodes == 0


def test_cancel_midway_keeps_partial_table():
    trainer = make_trainer(episodes=50, start_piles=[3])
    q_table = trainer.train(cancel_event=StopAfter(5))

    assert trainer.last_stats.episodes == 5
    assert trainer.last_stats.cancelled
    assert not q_table.is_empty()


def test_notifications():
    notifier = TraceNotifier()
    trainer = QLearningTrainer(
        QLearningSettings(episodes=5, start_piles=[2]), np.random.default_rng(0), notifier=notifier
    )
    trainer.train()

    assert notifier.get_titles() == ["AI Ready"]

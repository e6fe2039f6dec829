import logging
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

from nimq.core.abstract.q_table.base_q_table_manager import BaseQTableManager
from nimq.core.entities.nim import NimAction, State, as_state
from nimq.core.entities.training import MatchReport
from nimq.core.evaluation.solver import is_winning_position, winning_moves
from nimq.core.policy.move_selection import choose_action
from nimq.core.rules.nim_rules import apply_action, generate_initial_state, is_terminal, random_action

logger = logging.getLogger("NIMQ-Arena")

Player = Callable[[State], NimAction]


def play_match(first: Player, second: Player, piles: Sequence[int]) -> int:
    """
    Play one game of misère Nim between two move functions.

    Returns:
        int: 1 if ``first`` won, 2 if ``second`` won
    """
    state = as_state(piles)
    players = {1: first, 2: second}
    seat = 1

    while True:
        state = apply_action(state, players[seat](state))
        if is_terminal(state):
            return 2 if seat == 1 else 1
        seat = 2 if seat == 1 else 1


def evaluate_against_random(
    q_table: BaseQTableManager,
    games: int,
    rng: Optional[np.random.Generator] = None,
    piles: Optional[Sequence[int]] = None,
    agent_first: bool = True,
) -> MatchReport:
    """
    Play the greedy policy against a uniformly random opponent.

    Args:
        q_table: Learned values
        games: Number of games
        rng: Seedable generator for openings, the opponent and unseen states
        piles: Fixed opening; random openings when omitted
        agent_first: Whether the agent takes the first move

    Returns:
        MatchReport: Wins and losses from the agent's side
    """
    rng = rng if rng is not None else np.random.default_rng()

    def agent(state: State) -> NimAction:
        return choose_action(state, q_table, 0.0, rng)

    def opponent(state: State) -> NimAction:
        return random_action(state, rng)

    wins = 0
    for _ in range(games):
        opening = as_state(piles) if piles is not None else generate_initial_state(rng)
        if agent_first:
            wins += play_match(agent, opponent, opening) == 1
        else:
            wins += play_match(opponent, agent, opening) == 2

    report = MatchReport(games=games, wins=wins, losses=games - wins)
    logger.info(f"Agent won {report.wins}/{report.games} games ({report.win_rate:.1%}) against random play")
    return report


def policy_accuracy(q_table: BaseQTableManager, states: Iterable[Sequence[int]]) -> float:
    """
    Share of winning positions in ``states`` where the greedy move keeps the win.

    Lost positions and terminal states are skipped.
    """
    checked = 0
    correct = 0
    for state in states:
        if is_terminal(state) or not is_winning_position(state):
            continue
        checked += 1
        # Unseen states would be played at random, so only a recorded state can count
        if q_table.has_state(state) and choose_action(state, q_table, 0.0) in winning_moves(state):
            correct += 1
    return correct / checked if checked else 0.0

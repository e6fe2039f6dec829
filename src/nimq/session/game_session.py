import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from nimq.core.abstract.notifications.base_notifier import BaseNotifier
from nimq.core.abstract.q_table.base_q_table_manager import BaseQTableManager
from nimq.core.entities.nim import Difficulty, NimAction, State, as_state
from nimq.core.entities.session import GameOutcome, MoveRecord
from nimq.core.exceptions import IllegalStateError, SessionAbortedError
from nimq.core.policy.difficulty import MEDIUM_POLICY_RATE, DifficultyAI
from nimq.core.rules.nim_rules import apply_action, generate_initial_state, is_legal, is_terminal

logger = logging.getLogger("NIMQ-Session")

HUMAN_PLAYER = 1
AI_PLAYER = 2


class SessionPhase(str, Enum):
    AWAITING_PLAYER_MOVE = "awaiting_player_move"
    AWAITING_AI_MOVE = "awaiting_ai_move"
    TERMINAL_WIN = "terminal_win"
    TERMINAL_LOSS = "terminal_loss"
    ABORTED = "aborted"


def _other(player: int) -> int:
    return 2 if player == 1 else 1


class NimGameSession:
    """
    Turn-by-turn controller for one game of misère Nim.

    Player 1 is always a human. Player 2 is the computer unless the session is
    multiplayer, in which case both seats are human and only
    ``submit_player_move`` is used. Whoever empties the last pile loses;
    ``TERMINAL_WIN`` means player 1 won, ``TERMINAL_LOSS`` that player 1 lost.
    """

    def __init__(
        self,
        q_table: BaseQTableManager,
        difficulty: Union[Difficulty, str] = Difficulty.HARD,
        rng: Optional[np.random.Generator] = None,
        piles: Optional[Sequence[int]] = None,
        ai_moves_first: bool = False,
        multiplayer: bool = False,
        notifier: Optional[BaseNotifier] = None,
        move_selector: Optional[Callable[[State], NimAction]] = None,
        policy_rate: float = MEDIUM_POLICY_RATE,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.difficulty = Difficulty(difficulty)
        self.multiplayer = multiplayer
        self.ai_moves_first = ai_moves_first
        self.notifier = notifier
        self.move_selector = move_selector or DifficultyAI(
            q_table, self.difficulty, self.rng, policy_rate
        )

        self.initial_piles: State = ()
        self.piles: State = ()
        self.current_player = HUMAN_PLAYER
        self.phase = SessionPhase.AWAITING_PLAYER_MOVE
        self.winner: Optional[int] = None
        self.history: List[MoveRecord] = []

        self.reset(piles)

    def reset(self, piles: Optional[Sequence[int]] = None) -> None:
        """Start a new game, from ``piles`` or from a random opening."""
        state = as_state(piles) if piles is not None else generate_initial_state(self.rng)
        if is_terminal(state):
            raise ValueError(f"A game needs at least one object, got {list(state)}")

        self.initial_piles = state
        self.piles = state
        self.winner = None
        self.history = []
        self.current_player = AI_PLAYER if self.ai_moves_first and not self.multiplayer else HUMAN_PLAYER
        self.phase = self._turn_phase()
        logger.info(f"New game {list(state)}, player {self.current_player} to move")

    @property
    def is_over(self) -> bool:
        return self.phase in (SessionPhase.TERMINAL_WIN, SessionPhase.TERMINAL_LOSS)

    def _turn_phase(self) -> SessionPhase:
        if not self.multiplayer and self.current_player == AI_PLAYER:
            return SessionPhase.AWAITING_AI_MOVE
        return SessionPhase.AWAITING_PLAYER_MOVE

    def submit_player_move(self, pile_index: int, count: int) -> bool:
        """
        Play a human move.

        Out-of-turn or illegal moves are rejected without changing the game.

        Returns:
            bool: True if the move was applied
        """
        if self.phase is not SessionPhase.AWAITING_PLAYER_MOVE:
            logger.warning(f"Rejected player move while {self.phase.value}")
            return False

        action = NimAction(pile_index, count)
        if not is_legal(self.piles, action):
            logger.info(f"Rejected illegal move {tuple(action)} on {list(self.piles)}")
            return False

        self._play(action)
        return True

    def play_ai_turn(self) -> NimAction:
        """
        Ask the computer for its move and play it.

        Returns:
            NimAction: The move played

        Raises:
            IllegalStateError: If it is not the computer's turn
            SessionAbortedError: If the move selector fails; the session is
                unusable afterwards
        """
        if self.phase is SessionPhase.ABORTED:
            raise SessionAbortedError("Session was aborted")
        if self.phase is not SessionPhase.AWAITING_AI_MOVE:
            raise IllegalStateError(f"Not the computer's turn ({self.phase.value})")

        try:
            chosen = self.move_selector(self.piles)
        except Exception as e:
            self.phase = SessionPhase.ABORTED
            logger.error(f"Move selection failed on {list(self.piles)}: {e}")
            raise SessionAbortedError(f"Computer could not choose a move: {e}") from e

        try:
            # Selectors may hand back plain (pile_index, count) pairs
            action = NimAction(*chosen)
            legal = is_legal(self.piles, action)
        except (TypeError, ValueError) as e:
            self.phase = SessionPhase.ABORTED
            logger.error(f"Move selector returned {chosen!r} on {list(self.piles)}: {e}")
            raise SessionAbortedError(f"Computer returned an unusable move {chosen!r}") from e

        if not legal:
            self.phase = SessionPhase.ABORTED
            logger.error(f"Move selector returned illegal move {tuple(action)} on {list(self.piles)}")
            raise SessionAbortedError(f"Computer chose an illegal move {tuple(action)}")

        self._play(action)
        return action

    def _play(self, action: NimAction) -> None:
        mover = self.current_player
        piles_after = apply_action(self.piles, action)
        record = MoveRecord(player=mover, pile_index=action.pile_index, count=action.count, piles_after=piles_after)

        self.piles = piles_after
        self.history.append(record)

        if is_terminal(self.piles):
            # The player who took the last object loses
            self.winner = _other(mover)
            self.phase = SessionPhase.TERMINAL_WIN if self.winner == HUMAN_PLAYER else SessionPhase.TERMINAL_LOSS
            logger.info(f"Game over: player {self.winner} wins")
            if self.notifier:
                self.notifier.notify("Game Over!", f"Player {self.winner} wins!")
            return

        self.current_player = _other(mover)
        self.phase = self._turn_phase()

    def outcome(self) -> Optional[GameOutcome]:
        if not self.is_over:
            return None
        return GameOutcome(
            winner=self.winner,
            loser=_other(self.winner),
            initial_piles=self.initial_piles,
            moves=list(self.history),
            multiplayer=self.multiplayer,
            difficulty=None if self.multiplayer else self.difficulty,
        )

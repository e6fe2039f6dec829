from .game_session import AI_PLAYER, HUMAN_PLAYER, NimGameSession, SessionPhase

__all__ = ["NimGameSession", "SessionPhase", "HUMAN_PLAYER", "AI_PLAYER"]

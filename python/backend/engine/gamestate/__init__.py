from backend.engine.gamestate.state import GameState, Phase, StateStore

__all__ = ["GameState", "Phase", "StateStore"]

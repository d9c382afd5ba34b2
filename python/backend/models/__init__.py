from backend.models.config import CLASSIC_MODE, FULL_MODE, GameConfig, Mode
from backend.models.element import DefectKind, Element, ElementType, UIState
from backend.models.highscore import (
    HighScoreManager,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    Stats,
)
from backend.models.rewards import Achievement, PowerUp

__all__ = [
    "Achievement",
    "CLASSIC_MODE",
    "DefectKind",
    "Element",
    "ElementType",
    "FULL_MODE",
    "GameConfig",
    "HighScoreManager",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "Mode",
    "PowerUp",
    "Stats",
    "UIState",
]

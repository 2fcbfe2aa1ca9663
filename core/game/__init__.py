"""Round engine and state management."""

from core.game.events import GameEvent, EventEmitter, EventType
from core.game.state import Phase, RoundState
from core.game.engine import RoundEngine, RoundResult

__all__ = [
    "GameEvent",
    "EventEmitter",
    "EventType",
    "Phase",
    "RoundState",
    "RoundEngine",
    "RoundResult",
]

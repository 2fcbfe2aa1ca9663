"""Basic strategy advice."""

from core.strategy.basic import Action, BasicStrategy, Tip

__all__ = [
    "Action",
    "BasicStrategy",
    "Tip",
]

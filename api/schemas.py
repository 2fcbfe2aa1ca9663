"""Pydantic schemas for API requests and responses."""

from typing import Any, Literal

from pydantic import BaseModel, Field


# Requests
class ChipRequest(BaseModel):
    """Request to add a chip to the pending bet."""

    value: int = Field(..., ge=1, description="Chip denomination")


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "double", "split"]


class NextRoundRequest(BaseModel):
    """Request to leave the result screen."""

    keep_bet: bool = False


# Responses
class CardResponse(BaseModel):
    """Card representation; hidden cards show no rank or suit."""

    rank: str
    suit: str
    value: int
    face_down: bool = False


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    score: int
    label: str
    is_soft: bool
    is_blackjack: bool
    is_bust: bool
    bet: int
    stood: bool
    doubled: bool
    split_aces: bool


class StatsResponse(BaseModel):
    """Session counters."""

    wins: int
    losses: int
    pushes: int
    streak: int
    best_win: int


class ProgressionResponse(BaseModel):
    """Experience and level."""

    total_xp: int
    level: int
    rank: str
    progress: float
    next_level_xp: int | None


class SettlementResponse(BaseModel):
    """One settled hand."""

    outcome: Literal["blackjack", "win", "push", "loss"]
    payout: int


class RoundResultResponse(BaseModel):
    """Round result."""

    outcome: Literal["blackjack", "win", "push", "loss"]
    label: str
    settlements: list[SettlementResponse]
    total_payout: int
    net_gain: int
    xp_awarded: int
    leveled_up: bool


class EventResponse(BaseModel):
    """An engine event emitted while handling the request."""

    type: str
    data: dict[str, Any]
    timestamp: str


class TableStateResponse(BaseModel):
    """Current table state."""

    phase: Literal["betting", "dealing", "player-turn", "dealer-turn", "result"]
    bankroll: int
    current_bet: int
    last_bet: int
    player_hands: list[HandResponse]
    active_hand_index: int
    dealer_hand: HandResponse | None
    can_hit: bool
    can_stand: bool
    can_double: bool
    can_split: bool
    can_rebet: bool
    is_bankrupt: bool
    stats: StatsResponse
    progression: ProgressionResponse
    result: RoundResultResponse | None = None
    events: list[EventResponse] = Field(default_factory=list)


class NewTableResponse(BaseModel):
    """A new session and its table."""

    session_id: str
    table: TableStateResponse


class TipResponse(BaseModel):
    """Basic strategy advice."""

    situation: str
    action: Literal["HIT", "STAND", "DOUBLE", "SPLIT"]
    reason: str

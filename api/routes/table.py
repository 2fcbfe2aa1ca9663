"""Table API endpoints."""

from typing import Annotated, Callable

from fastapi import APIRouter, HTTPException, Header

from api.schemas import (
    ActionRequest,
    CardResponse,
    ChipRequest,
    EventResponse,
    HandResponse,
    NewTableResponse,
    NextRoundRequest,
    ProgressionResponse,
    RoundResultResponse,
    SettlementResponse,
    StatsResponse,
    TableStateResponse,
    TipResponse,
)
from api.session import create_session, get_table
from core.cards import Card
from core.game import GameEvent, RoundEngine
from core.hand import Hand

router = APIRouter()

SessionHeader = Annotated[str, Header(alias="X-Session-ID")]


def _card_to_response(card: Card) -> CardResponse:
    if card.face_down:
        return CardResponse(rank="?", suit="?", value=0, face_down=True)
    return CardResponse(rank=str(card.rank), suit=str(card.suit), value=card.value)


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse; hidden cards do not count."""
    return HandResponse(
        cards=[_card_to_response(c) for c in hand.cards],
        score=hand.score,
        label=hand.score_label,
        is_soft=hand.is_soft,
        is_blackjack=hand.is_blackjack,
        is_bust=hand.is_bust,
        bet=hand.bet,
        stood=hand.stood,
        doubled=hand.doubled,
        split_aces=hand.split_aces,
    )


def _result_to_response(table: RoundEngine) -> RoundResultResponse | None:
    result = table.last_result
    if result is None:
        return None
    return RoundResultResponse(
        outcome=result.outcome.value,
        label=result.label,
        settlements=[
            SettlementResponse(outcome=s.outcome.value, payout=s.payout)
            for s in result.settlements
        ],
        total_payout=result.total_payout,
        net_gain=result.net_gain,
        xp_awarded=result.xp.amount,
        leveled_up=result.xp.leveled_up,
    )


def _state_response(
    table: RoundEngine,
    events: list[GameEvent] | None = None,
) -> TableStateResponse:
    """Convert table state to response, with the events of this request."""
    progression = table.progression
    level = progression.level
    next_level = progression.next_level
    stats = table.stats

    return TableStateResponse(
        phase=table.phase.value,
        bankroll=table.bankroll,
        current_bet=table.current_bet,
        last_bet=table.last_bet,
        player_hands=[_hand_to_response(h) for h in table.player_hands],
        active_hand_index=table.active_hand_index,
        dealer_hand=_hand_to_response(table.dealer_hand) if table.dealer_hand else None,
        can_hit=table.can_hit,
        can_stand=table.can_stand,
        can_double=table.can_double,
        can_split=table.can_split,
        can_rebet=table.can_rebet,
        is_bankrupt=table.is_bankrupt,
        stats=StatsResponse(
            wins=stats.wins,
            losses=stats.losses,
            pushes=stats.pushes,
            streak=stats.streak,
            best_win=stats.best_win,
        ),
        progression=ProgressionResponse(
            total_xp=progression.total_xp,
            level=level.level,
            rank=level.rank,
            progress=progression.progress,
            next_level_xp=next_level.xp if next_level else None,
        ),
        result=_result_to_response(table),
        events=[EventResponse(**event.to_dict()) for event in events or []],
    )


async def _get_table(session_id: str) -> RoundEngine:
    table = await get_table(session_id)
    if table is None:
        raise HTTPException(status_code=401, detail="Unknown or expired session")
    return table


async def _run(session_id: str, action: Callable[[RoundEngine], None]) -> TableStateResponse:
    """Apply one engine call and report the state with the events it emitted."""
    table = await _get_table(session_id)
    table.events.clear_history()
    action(table)
    return _state_response(table, table.events.history)


@router.post("/new")
async def new_table() -> NewTableResponse:
    """Open a session with a fresh table."""
    session_id, table = await create_session()
    return NewTableResponse(session_id=session_id, table=_state_response(table))


@router.get("/state")
async def get_state(session_id: SessionHeader) -> TableStateResponse:
    """Get current table state."""
    return _state_response(await _get_table(session_id))


@router.post("/chips")
async def add_chip(request: ChipRequest, session_id: SessionHeader) -> TableStateResponse:
    """Add a chip to the pending bet."""
    return await _run(session_id, lambda table: table.add_chip(request.value))


@router.post("/clear")
async def clear_bet(session_id: SessionHeader) -> TableStateResponse:
    """Clear the pending bet."""
    return await _run(session_id, RoundEngine.clear_bet)


@router.post("/rebet")
async def rebet(session_id: SessionHeader) -> TableStateResponse:
    """Repeat the last bet."""
    return await _run(session_id, RoundEngine.rebet)


@router.post("/deal")
async def deal(session_id: SessionHeader) -> TableStateResponse:
    """Take the bet and deal."""
    return await _run(session_id, RoundEngine.deal_round)


@router.post("/action")
async def player_action(request: ActionRequest, session_id: SessionHeader) -> TableStateResponse:
    """Execute a player action."""
    actions = {
        "hit": RoundEngine.player_hit,
        "stand": RoundEngine.player_stand,
        "double": RoundEngine.player_double,
        "split": RoundEngine.player_split,
    }
    return await _run(session_id, actions[request.action])


@router.post("/next")
async def next_round(request: NextRoundRequest, session_id: SessionHeader) -> TableStateResponse:
    """Leave the result and return to betting, optionally re-dealing the last bet."""
    return await _run(
        session_id,
        lambda table: table.advance_after_result(keep_bet=request.keep_bet),
    )


@router.get("/tip")
async def get_tip(session_id: SessionHeader) -> TipResponse:
    """Basic strategy advice for the active hand."""
    table = await _get_table(session_id)
    tip = table.get_advisor_tip()
    return TipResponse(situation=tip.situation, action=tip.action.name, reason=tip.reason)


@router.post("/reset")
async def reset_session(session_id: SessionHeader) -> TableStateResponse:
    """Start the session over with the starting bankroll."""
    return await _run(session_id, RoundEngine.reset_session)

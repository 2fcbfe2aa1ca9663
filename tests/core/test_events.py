"""Tests for the event emitter."""

from random import Random

from core.game import EventEmitter, EventType, GameEvent, RoundEngine


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_typed_and_catch_all_handlers(self):
        emitter = EventEmitter()
        typed, everything = [], []
        emitter.subscribe(typed.append, EventType.PLAYER_HIT)
        emitter.subscribe(everything.append)

        emitter.emit_new(EventType.PLAYER_HIT, hand=0)
        emitter.emit_new(EventType.PLAYER_STAND, hand=0)

        assert [event.event_type for event in typed] == [EventType.PLAYER_HIT]
        assert len(everything) == 2

    def test_unsubscribe(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)
        emitter.unsubscribe(received.append)
        emitter.unsubscribe(print, EventType.BANKRUPT)

        emitter.emit_new(EventType.BANKRUPT)

        assert received == []

    def test_history(self):
        emitter = EventEmitter()
        event = emitter.emit_new(EventType.BET_CHANGED, current_bet=20, bankroll=1000)

        history = emitter.history
        assert history == [event]
        history.clear()
        assert len(emitter.history) == 1

        emitter.clear_history()
        assert emitter.history == []

    def test_history_keeps_most_recent_events(self):
        emitter = EventEmitter(max_history=3)
        for amount in range(5):
            emitter.emit_new(EventType.BET_CHANGED, current_bet=amount)

        history = emitter.history
        assert len(history) == 3
        assert [event.data["current_bet"] for event in history] == [2, 3, 4]

    def test_long_session_history_is_bounded(self):
        table = RoundEngine(rng=Random(3))
        for _ in range(600):
            table.add_chip(10)
            table.clear_bet()

        assert len(table.events.history) == 1000

    def test_to_dict(self):
        event = GameEvent(EventType.XP_AWARDED, {"amount": 30})
        data = event.to_dict()
        assert data["type"] == "XP_AWARDED"
        assert data["data"] == {"amount": 30}
        assert "T" in data["timestamp"]

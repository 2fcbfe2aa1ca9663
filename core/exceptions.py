"""Errors raised when a caller breaks the table's contract."""


class TableError(Exception):
    """Base class for rejected table requests."""


class InvalidActionError(TableError):
    """Action requested while its phase or hand preconditions are unmet."""


class InvalidBetError(TableError):
    """Bet outside the available bankroll, or a deal with no bet placed."""

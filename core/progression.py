"""Experience, levels and session statistics."""

import logging
from dataclasses import dataclass

from core.payout import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelInfo:
    """One row of the level table."""

    level: int
    xp: int
    rank: str


LEVELS: tuple[LevelInfo, ...] = (
    LevelInfo(1, 0, "Rookie"),
    LevelInfo(2, 100, "Rookie"),
    LevelInfo(3, 250, "Amateur"),
    LevelInfo(4, 450, "Amateur"),
    LevelInfo(5, 700, "Sharp"),
    LevelInfo(6, 1000, "Sharp"),
    LevelInfo(7, 1400, "Pro"),
    LevelInfo(8, 1900, "Pro"),
    LevelInfo(9, 2500, "Expert"),
    LevelInfo(10, 3200, "Expert"),
    LevelInfo(11, 4000, "Master"),
    LevelInfo(12, 5000, "Master"),
    LevelInfo(13, 6500, "Legend"),
)

XP_BLACKJACK = 50
XP_WIN = 30
XP_PUSH = 10
XP_LOSS = 5
XP_STREAK_BONUS = 10
STREAK_BONUS_MIN = 3


def level_for(total_xp: int) -> LevelInfo:
    """Return the highest level whose threshold has been reached."""
    for info in reversed(LEVELS):
        if total_xp >= info.xp:
            return info
    return LEVELS[0]


def next_level_for(total_xp: int) -> LevelInfo | None:
    """Return the level after the current one, or None at the top."""
    index = LEVELS.index(level_for(total_xp))
    if index + 1 < len(LEVELS):
        return LEVELS[index + 1]
    return None


@dataclass
class SessionStats:
    """Round counters kept for the whole session."""

    wins: int = 0
    losses: int = 0
    pushes: int = 0
    streak: int = 0
    best_win: int = 0

    @property
    def rounds(self) -> int:
        return self.wins + self.losses + self.pushes


@dataclass(frozen=True)
class XPAward:
    """Experience granted for one round."""

    amount: int
    total_xp: int
    old_level: LevelInfo
    new_level: LevelInfo

    @property
    def leveled_up(self) -> bool:
        return self.new_level.level > self.old_level.level


class ProgressionTracker:
    """
    Owns cumulative experience and the round statistics that feed it.

    Win streaks are counted here because the streak bonus depends on them.
    """

    def __init__(self) -> None:
        self.total_xp = 0
        self.stats = SessionStats()

    @property
    def level(self) -> LevelInfo:
        return level_for(self.total_xp)

    @property
    def next_level(self) -> LevelInfo | None:
        return next_level_for(self.total_xp)

    @property
    def progress(self) -> float:
        """Fraction of the way from the current level to the next."""
        current, upcoming = self.level, self.next_level
        if upcoming is None:
            return 1.0
        return min(1.0, (self.total_xp - current.xp) / (upcoming.xp - current.xp))

    def award(self, outcome: Outcome, net_gain: int = 0) -> XPAward:
        """
        Record a finished round and grant its experience.

        Args:
            outcome: Round-level outcome
            net_gain: Payout minus the amount wagered, used for best win

        Returns:
            The award, including whether it crossed a level threshold
        """
        stats = self.stats
        old_level = self.level

        if outcome.is_win:
            stats.wins += 1
            stats.streak += 1
            stats.best_win = max(stats.best_win, net_gain)
            amount = XP_BLACKJACK if outcome == Outcome.BLACKJACK else XP_WIN
            if stats.streak >= STREAK_BONUS_MIN:
                amount += XP_STREAK_BONUS
        elif outcome == Outcome.PUSH:
            stats.pushes += 1
            stats.streak = 0
            amount = XP_PUSH
        else:
            stats.losses += 1
            stats.streak = 0
            amount = XP_LOSS

        self.total_xp += amount
        award = XPAward(
            amount=amount,
            total_xp=self.total_xp,
            old_level=old_level,
            new_level=self.level,
        )
        if award.leveled_up:
            logger.info("Reached level %d (%s)", award.new_level.level, award.new_level.rank)
        return award

    def reset(self) -> None:
        """Clear experience and statistics."""
        self.total_xp = 0
        self.stats = SessionStats()

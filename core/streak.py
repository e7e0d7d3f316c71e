import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Optional


@dataclass(frozen=True)
class StreakState:
    exp: int
    streak: int = 0
    max_streak: int = 0
    progress_percentage: float = 0
    last_active_date: Optional[date] = None
    exp_history: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class StreakUpdate:
    streak: int
    max_streak: int
    progress_percentage: float
    last_active_date: date
    exp_history: Dict[str, int]


def day_key(day: date) -> str:
    return day.isoformat()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def daily_progress(yesterday_exp: int, today_exp: int) -> int:
    """Day-over-day change of recorded EXP, in percent."""
    if today_exp <= 0:
        return 0
    if yesterday_exp <= 0:
        return 100
    return round_half_up(100 * (today_exp - yesterday_exp) / yesterday_exp)


def next_streak(streak: int, last_active_date: Optional[date], today: date, today_exp: int) -> int:
    yesterday = today - timedelta(days=1)

    # active today, continued from yesterday
    if today_exp > 0 and last_active_date == yesterday:
        return streak + 1

    # active today after a gap (or first activity ever)
    if today_exp > 0:
        return 1

    # nothing today and the last active day is older than yesterday
    if last_active_date is not None and last_active_date < yesterday:
        return 0

    return streak


def tick(state: StreakState, today: date) -> Optional[StreakUpdate]:
    """
    Daily StreakTracker tick.

    Returns None when the profile was already ticked today. Otherwise records
    the current cumulative EXP as today's history entry and derives the new
    progress percentage and streak from it.
    """
    if state.last_active_date == today:
        return None

    yesterday = today - timedelta(days=1)

    history = dict(state.exp_history or {})
    history[day_key(today)] = state.exp

    yesterday_exp = history.get(day_key(yesterday), 0)
    today_exp = history[day_key(today)]

    streak = next_streak(state.streak, state.last_active_date, today, today_exp)

    return StreakUpdate(
        streak=streak,
        max_streak=max(state.max_streak, streak),
        progress_percentage=daily_progress(yesterday_exp, today_exp),
        last_active_date=today,
        exp_history=history,
    )

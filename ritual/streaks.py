import math
from collections.abc import Iterable

from .core.models import Completion, Habit, StreakResult
from .lib import dates

__all__ = [
    "LOOKBACK_DAYS",
    "RATE_WINDOW_DAYS",
    "calculate_streak",
    "completion_rate",
    "is_scheduled",
    "is_streak_active",
]

# Hard ceiling: no streak can exceed this many scheduled days.
LOOKBACK_DAYS = 365
RATE_WINDOW_DAYS = 30


def is_scheduled(habit: Habit, day: dates.DateKey) -> bool:
    if habit.frequency == "daily":
        return True
    if habit.frequency == "weekly" and habit.target_days is not None:
        return dates.weekday(day) in habit.target_days
    return True


def calculate_streak(
    habit: Habit,
    completions: Iterable[Completion],
    reference_date: dates.DateKey | None = None,
) -> StreakResult:
    """Derive current/best streak by walking backwards from ``reference_date``.

    Unscheduled days are skipped. A missed reference day does not break the
    current streak, any earlier missed scheduled day does.
    """
    reference = reference_date or dates.today()
    completed = {c.date for c in completions}

    current = 0
    best = 0
    run = 0
    last_completed: str | None = None
    broken = False

    day = reference
    for _ in range(LOOKBACK_DAYS):
        if is_scheduled(habit, day):
            if day in completed:
                if not broken:
                    current += 1
                run += 1
                if last_completed is None:
                    last_completed = day
            elif day != reference:
                broken = True
                best = max(best, run)
                run = 0
        day = dates.offset(day, 1)

    return StreakResult(
        current_streak=current,
        best_streak=max(best, run, current),
        last_completed_date=last_completed,
        is_completed_today=reference in completed,
    )


def is_streak_active(
    habit: Habit,
    completions: Iterable[Completion],
    reference_date: dates.DateKey | None = None,
) -> bool:
    """Cheap liveness check for badges; does not recompute the streak."""
    reference = reference_date or dates.today()
    completed = {c.date for c in completions}
    if reference in completed:
        return True
    return dates.offset(reference, 1) in completed and is_scheduled(habit, reference)


def completion_rate(
    completions: Iterable[Completion],
    days: int = RATE_WINDOW_DAYS,
    reference_date: dates.DateKey | None = None,
) -> int:
    """Percent of the last ``days`` calendar days, reference day included, with a check-in."""
    if days <= 0:
        return 0
    reference = reference_date or dates.today()
    window = {dates.offset(reference, i) for i in range(days)}
    done = len(window & {c.date for c in completions})
    return math.floor(done * 100 / days + 0.5)

import dataclasses
from typing import Literal

Frequency = Literal["daily", "weekly", "custom"]
FREQUENCIES: tuple[Frequency, ...] = ("daily", "weekly", "custom")


@dataclasses.dataclass(frozen=True)
class Reminder:
    id: str
    time: str
    enabled: bool = True
    days: tuple[int, ...] | None = None


@dataclasses.dataclass(frozen=True)
class HabitInput:
    """Everything a caller supplies when creating a habit."""

    name: str
    icon: str
    color: str
    frequency: Frequency = "daily"
    description: str | None = None
    target_days: tuple[int, ...] | None = None
    target_count: int = 1
    reminders: tuple[Reminder, ...] = ()
    archived_at: str | None = None


@dataclasses.dataclass(frozen=True)
class Habit:
    id: str
    name: str
    icon: str
    color: str
    frequency: Frequency
    created_at: str
    updated_at: str
    description: str | None = None
    target_days: tuple[int, ...] | None = None
    target_count: int = 1
    reminders: tuple[Reminder, ...] = ()
    archived_at: str | None = None
    current_streak: int = 0
    best_streak: int = 0
    total_completions: int = 0


@dataclasses.dataclass(frozen=True)
class Completion:
    id: str
    habit_id: str
    date: str
    completed_at: str
    count: int = 1
    note: str | None = None


@dataclasses.dataclass(frozen=True)
class StreakResult:
    current_streak: int
    best_streak: int
    last_completed_date: str | None
    is_completed_today: bool


@dataclasses.dataclass(frozen=True)
class TodayProgress:
    total: int = 0
    completed: int = 0
    percentage: int = 0


@dataclasses.dataclass(frozen=True)
class ProfileStats:
    total_habits: int = 0
    active_habits: int = 0
    total_completions: int = 0
    longest_streak: int = 0
    current_streaks: int = 0

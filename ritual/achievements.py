from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from fncli import cli

from .core.models import Completion, Habit
from .lib import ansi

__all__ = [
    "ACHIEVEMENTS",
    "Achievement",
    "achievement_progress",
    "is_unlocked",
    "total_points",
    "unlocked_achievements",
]

Requirement = Literal["habits_created", "streak_days", "total_completions"]


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    icon: str
    points: int
    threshold: int
    requirement: Requirement


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("1", "First Step", "Create your first habit", "🌱", 50, 1, "habits_created"),
    Achievement("2", "Streak Starter", "Reach a 3-day streak", "🔥", 25, 3, "streak_days"),
    Achievement("3", "Week Warrior", "Reach a 7-day streak", "💪", 75, 7, "streak_days"),
    Achievement("4", "Habit Builder", "Create 5 habits", "🏗️", 100, 5, "habits_created"),
    Achievement("5", "Two Week Champion", "Reach a 14-day streak", "⭐", 150, 14, "streak_days"),
    Achievement("6", "Monthly Master", "Reach a 30-day streak", "🏆", 300, 30, "streak_days"),
    Achievement("7", "Century Club", "Complete 100 habits", "💯", 200, 100, "total_completions"),
    Achievement("8", "Unstoppable", "Reach a 100-day streak", "👑", 1000, 100, "streak_days"),
)


def achievement_progress(
    achievement: Achievement, habits: Sequence[Habit], completions: Sequence[Completion]
) -> int:
    """Progress towards ``achievement``, capped at its threshold."""
    if achievement.requirement == "habits_created":
        value = len(habits)
    elif achievement.requirement == "streak_days":
        value = max((h.current_streak for h in habits), default=0)
    else:
        value = len(completions)
    return min(value, achievement.threshold)


def is_unlocked(
    achievement: Achievement, habits: Sequence[Habit], completions: Sequence[Completion]
) -> bool:
    return achievement_progress(achievement, habits, completions) >= achievement.threshold


def unlocked_achievements(
    habits: Sequence[Habit], completions: Sequence[Completion]
) -> list[Achievement]:
    return [a for a in ACHIEVEMENTS if is_unlocked(a, habits, completions)]


def total_points(habits: Sequence[Habit], completions: Sequence[Completion]) -> int:
    return sum(a.points for a in unlocked_achievements(habits, completions))


@cli("ritual")
def achievements() -> None:
    """List achievements and progress"""
    from .session import open_store

    store = open_store()
    habits, completions = store.habits, store.completions
    unlocked = unlocked_achievements(habits, completions)
    print(
        ansi.bold(ansi.white(f"ACHIEVEMENTS ({len(unlocked)}/{len(ACHIEVEMENTS)})"))
        + ansi.muted(f"  {total_points(habits, completions)} pts")
    )
    for a in ACHIEVEMENTS:
        progress = achievement_progress(a, habits, completions)
        if progress >= a.threshold:
            print(f"  {a.icon} {a.name}  {ansi.muted(a.description)}")
        else:
            print(ansi.dim(f"  □ {a.name}  {a.description}  {progress}/{a.threshold}"))

from ritual.core.models import Habit

from . import ansi
from .dates import DAY_NAMES

__all__ = ["format_frequency", "format_habit", "format_status", "format_streak"]


def format_frequency(habit: Habit) -> str:
    """'daily', 'custom', or the weekly days: 'mon wed fri'."""
    if habit.frequency == "weekly" and habit.target_days:
        return " ".join(DAY_NAMES[d] for d in sorted(habit.target_days))
    return habit.frequency


def format_streak(habit: Habit) -> str:
    if not habit.current_streak:
        return ""
    return ansi.orange(f"🔥{habit.current_streak}")


def format_habit(habit: Habit, checked: bool = False, show_id: bool = False) -> str:
    """Format a habit for display. Returns: [✓|□] icon name [streak] [id]"""
    parts = [ansi.muted("✓") if checked else "□"]

    if habit.icon:
        parts.append(habit.icon)

    parts.append(habit.name.lower())

    streak = format_streak(habit)
    if streak:
        parts.append(streak)

    if show_id:
        parts.append(ansi.muted(f"[{habit.id[:8]}]"))

    return " ".join(parts)


def format_status(symbol: str, content: str, item_id: str | None = None) -> str:
    """Format status message for action confirmations."""
    if item_id:
        return f"{symbol} {content} {ansi.muted(f'[{item_id[:8]}]')}"
    return f"{symbol} {content}"

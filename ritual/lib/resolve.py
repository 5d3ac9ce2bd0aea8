from collections.abc import Sequence

from ritual.core.errors import NotFoundError
from ritual.core.models import Habit
from ritual.store import HabitStore, select_active_habits, select_archived_habits

from .fuzzy import EXACT, LOOSE, Matcher, find_habit

__all__ = ["resolve_archived_habit", "resolve_habit", "resolve_habit_exact"]


def _resolve(ref: str, pool: Sequence[Habit], matchers: Sequence[Matcher], what: str) -> Habit:
    habit = find_habit(ref, pool, matchers)
    if not habit:
        raise NotFoundError(f"No {what} found: '{ref}'")
    return habit


def resolve_habit(store: HabitStore, ref: str) -> Habit:
    """Active habits only, tolerating typos."""
    return _resolve(ref, select_active_habits(store), LOOSE, "habit")


def resolve_habit_exact(store: HabitStore, ref: str) -> Habit:
    """Any habit, archived included, no typo correction."""
    return _resolve(ref, store.habits, EXACT, "habit")


def resolve_archived_habit(store: HabitStore, ref: str) -> Habit:
    return _resolve(ref, select_archived_habits(store), EXACT, "archived habit")

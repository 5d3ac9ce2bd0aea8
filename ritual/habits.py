from typing import cast

from fncli import UsageError, cli

from . import config
from .core.errors import ValidationError
from .core.models import FREQUENCIES, Frequency, HabitInput
from .lib import ansi
from .lib.dates import DAY_NAMES, parse_date_arg
from .lib.format import format_habit, format_status
from .lib.render import render_habit_detail, render_habit_matrix
from .lib.resolve import resolve_archived_habit, resolve_habit, resolve_habit_exact
from .session import open_store
from .store import select_active_habits, select_archived_habits
from .validation import sanitize_text, validate_habit_form

__all__ = ["parse_days", "parse_frequency"]


def parse_days(raw: str | None) -> tuple[int, ...] | None:
    """'mon,wed,fri' or '1,3,5' -> (1, 3, 5). Sunday is 0."""
    if raw is None:
        return None
    days: set[int] = set()
    for part in raw.replace(" ", ",").split(","):
        token = part.strip().lower()[:3]
        if not token:
            continue
        if token.isdigit() and 0 <= int(token) <= 6:
            days.add(int(token))
        elif token in DAY_NAMES:
            days.add(DAY_NAMES.index(token))
        else:
            raise ValidationError(f"unknown day '{part.strip()}' — use sun..sat or 0-6")
    return tuple(sorted(days))


def parse_frequency(raw: str) -> Frequency:
    lowered = raw.strip().lower()
    if lowered not in FREQUENCIES:
        raise UsageError(f"frequency must be one of: {', '.join(FREQUENCIES)}")
    return cast(Frequency, lowered)


def _check_form(
    name: str, frequency: str, description: str | None, target_days: tuple[int, ...] | None
) -> None:
    result = validate_habit_form(name, frequency, description, target_days)
    if not result.is_valid:
        raise ValidationError("; ".join(result.errors))


@cli(
    "ritual",
    flags={"name": [], "frequency": ["-f"], "days": ["-d"], "description": ["-m"]},
)
def add(
    name: list[str],
    frequency: str = "daily",
    days: str | None = None,
    description: str | None = None,
    icon: str | None = None,
    color: str | None = None,
    count: int = 1,
) -> None:
    """Add a habit: `ritual add read -f weekly -d mon,wed,fri`"""
    text = " ".join(name)
    freq = parse_frequency(frequency)
    target_days = parse_days(days)
    _check_form(text, freq, description, target_days)
    if count < 1:
        raise ValidationError("count must be at least 1")

    store = open_store()
    habit = store.add_habit(
        HabitInput(
            name=sanitize_text(text),
            icon=icon or config.get_default_icon(),
            color=color or config.get_default_color(),
            frequency=freq,
            description=sanitize_text(description) if description else None,
            target_days=target_days if freq == "weekly" else None,
            target_count=count,
        )
    )
    print(format_status("+", habit.name.lower(), habit.id))


@cli("ritual", flags={"ref": []})
def check(ref: list[str], on: str | None = None) -> None:
    """Toggle a habit done for today (or --on yesterday, --on mon, --on 2024-01-03)"""
    day = None
    if on is not None:
        day = parse_date_arg(on)
        if day is None:
            raise UsageError(f"invalid date: {on!r} — use today, yesterday, a weekday or yyyy-mm-dd")

    store = open_store()
    habit = resolve_habit(store, " ".join(ref))
    created = store.toggle_completion(habit.id, day)
    updated = store.get_habit(habit.id) or habit
    when = f" {ansi.muted(day)}" if day else ""
    if created:
        print(f"  {format_habit(updated, checked=True)}{when}")
    else:
        print(f"  {format_habit(updated)}{when}  {ansi.muted('unchecked')}")


@cli("ritual")
def habits(archived: bool = False) -> None:
    """Show habits matrix (--archived lists archived habits)"""
    store = open_store()
    if archived:
        items = select_archived_habits(store)
        if not items:
            print("no archived habits")
            return
        for h in items:
            archived_date = h.archived_at[:10] if h.archived_at else "?"
            print(f"{ansi.dim(h.name.lower())}  archived {archived_date}")
        return
    print(render_habit_matrix(store, select_active_habits(store)))


@cli("ritual", flags={"ref": []})
def show(ref: list[str]) -> None:
    """Show one habit's schedule and streaks"""
    store = open_store()
    print(render_habit_detail(store, resolve_habit_exact(store, " ".join(ref))))


@cli(
    "ritual",
    flags={"ref": [], "name": ["-n"], "frequency": ["-f"], "days": ["-d"], "description": ["-m"]},
)
def edit(
    ref: list[str],
    name: str | None = None,
    frequency: str | None = None,
    days: str | None = None,
    description: str | None = None,
    icon: str | None = None,
    color: str | None = None,
    count: int | None = None,
) -> None:
    """Edit a habit: -n name, -f frequency, -d days, -m description, --icon, --color, --count"""
    store = open_store()
    habit = resolve_habit_exact(store, " ".join(ref))

    updates: dict[str, object] = {}
    if name is not None:
        updates["name"] = sanitize_text(name)
    if description is not None:
        updates["description"] = sanitize_text(description) or None
    if icon is not None:
        updates["icon"] = icon
    if color is not None:
        updates["color"] = color
    if count is not None:
        if count < 1:
            raise ValidationError("count must be at least 1")
        updates["target_count"] = count
    freq = parse_frequency(frequency) if frequency is not None else habit.frequency
    if frequency is not None:
        updates["frequency"] = freq
    target_days = parse_days(days) if days is not None else habit.target_days
    if days is not None or frequency is not None:
        updates["target_days"] = target_days if freq == "weekly" else None
    if not updates:
        raise UsageError("nothing to update — use -n, -f, -d, -m, --icon, --color or --count")

    _check_form(
        str(updates.get("name", habit.name)),
        freq,
        cast(str | None, updates.get("description", habit.description)),
        target_days,
    )
    updated = store.update_habit(habit.id, **updates)
    if updated:
        print(format_status("✓", updated.name.lower(), updated.id))


@cli("ritual", flags={"ref": []})
def archive(ref: list[str]) -> None:
    """Archive a habit (kept in history, hidden from today)"""
    store = open_store()
    habit = resolve_habit_exact(store, " ".join(ref))
    store.archive_habit(habit.id)
    print(f"{ansi.dim(habit.name.lower())}  archived")


@cli("ritual", flags={"ref": []})
def unarchive(ref: list[str]) -> None:
    """Bring an archived habit back"""
    store = open_store()
    habit = resolve_archived_habit(store, " ".join(ref))
    store.unarchive_habit(habit.id)
    print(format_status("↺", habit.name.lower(), habit.id))


@cli("ritual", flags={"ref": []})
def rm(ref: list[str]) -> None:
    """Delete a habit and all of its check-ins"""
    store = open_store()
    habit = resolve_habit_exact(store, " ".join(ref))
    store.delete_habit(habit.id)
    print(format_status("✗", habit.name.lower(), habit.id))


@cli("ritual")
def reset(yes: bool = False) -> None:
    """Delete every habit and check-in (needs --yes)"""
    if not yes:
        raise UsageError("this deletes all habits and progress — rerun with --yes")
    store = open_store()
    count = len(store.habits)
    store.clear()
    print(f"✗ {count} habits cleared")

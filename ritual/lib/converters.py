import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, cast

from ritual.core.models import FREQUENCIES, Completion, Frequency, Habit, Reminder

__all__ = [
    "SNAPSHOT_VERSION",
    "completion_to_record",
    "decode_snapshot",
    "encode_snapshot",
    "habit_to_record",
    "record_to_completion",
    "record_to_habit",
]

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

Record = dict[str, Any]


def _days(val) -> tuple[int, ...] | None:
    if val is None:
        return None
    return tuple(int(d) for d in val)


def _optional_str(val) -> str | None:
    return str(val) if val is not None else None


def _frequency(val) -> Frequency:
    if val not in FREQUENCIES:
        raise ValueError(f"unknown frequency {val!r}")
    return cast(Frequency, val)


def _drop_none(record: Record) -> Record:
    return {k: v for k, v in record.items() if v is not None}


def reminder_to_record(reminder: Reminder) -> Record:
    return _drop_none(
        {
            "id": reminder.id,
            "time": reminder.time,
            "enabled": reminder.enabled,
            "days": list(reminder.days) if reminder.days is not None else None,
        }
    )


def record_to_reminder(record: Mapping[str, Any]) -> Reminder:
    return Reminder(
        id=str(record["id"]),
        time=str(record["time"]),
        enabled=bool(record.get("enabled", True)),
        days=_days(record.get("days")),
    )


def habit_to_record(habit: Habit) -> Record:
    """Serializes a Habit with the camelCase keys of the persisted layout."""
    return _drop_none(
        {
            "id": habit.id,
            "name": habit.name,
            "description": habit.description,
            "icon": habit.icon,
            "color": habit.color,
            "frequency": habit.frequency,
            "targetDays": list(habit.target_days) if habit.target_days is not None else None,
            "targetCount": habit.target_count,
            "reminders": [reminder_to_record(r) for r in habit.reminders],
            "createdAt": habit.created_at,
            "updatedAt": habit.updated_at,
            "archivedAt": habit.archived_at,
            "currentStreak": habit.current_streak,
            "bestStreak": habit.best_streak,
            "totalCompletions": habit.total_completions,
        }
    )


def record_to_habit(record: Mapping[str, Any]) -> Habit:
    """
    Converts a persisted habit record into a Habit.
    Required keys: id, name, frequency, createdAt. Everything else has a default.
    """
    created_at = str(record["createdAt"])
    return Habit(
        id=str(record["id"]),
        name=str(record["name"]),
        icon=str(record.get("icon", "")),
        color=str(record.get("color", "")),
        frequency=_frequency(record["frequency"]),
        created_at=created_at,
        updated_at=str(record.get("updatedAt", created_at)),
        description=_optional_str(record.get("description")),
        target_days=_days(record.get("targetDays")),
        target_count=max(1, int(record.get("targetCount", 1))),
        reminders=tuple(record_to_reminder(r) for r in record.get("reminders", [])),
        archived_at=_optional_str(record.get("archivedAt")),
        current_streak=max(0, int(record.get("currentStreak", 0))),
        best_streak=max(0, int(record.get("bestStreak", 0))),
        total_completions=max(0, int(record.get("totalCompletions", 0))),
    )


def completion_to_record(completion: Completion) -> Record:
    return _drop_none(
        {
            "id": completion.id,
            "habitId": completion.habit_id,
            "date": completion.date,
            "completedAt": completion.completed_at,
            "count": completion.count,
            "note": completion.note,
        }
    )


def record_to_completion(record: Mapping[str, Any]) -> Completion:
    return Completion(
        id=str(record["id"]),
        habit_id=str(record["habitId"]),
        date=str(record["date"]),
        completed_at=str(record["completedAt"]),
        count=int(record.get("count", 1)),
        note=_optional_str(record.get("note")),
    )


def encode_snapshot(habits: Iterable[Habit], completions: Iterable[Completion]) -> bytes:
    payload = {
        "version": SNAPSHOT_VERSION,
        "habits": [habit_to_record(h) for h in habits],
        "completions": [completion_to_record(c) for c in completions],
    }
    return json.dumps(payload, ensure_ascii=False).encode()


def _decode_records(raw: object, convert, kind: str) -> list:
    if not isinstance(raw, list):
        return []
    items = []
    for record in raw:
        try:
            items.append(convert(record))
        except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as e:
            logger.warning("skipping malformed %s record: %s", kind, e)
    return items


def decode_snapshot(data: bytes | None) -> tuple[list[Habit], list[Completion]]:
    """
    Reads back what encode_snapshot wrote. Missing or unreadable data is an
    empty state, and so is a snapshot written with another version. Completions
    that duplicate a (habit, date) pair or point at an unknown habit are dropped.
    """
    if not data:
        return [], []
    try:
        payload = json.loads(data)
    except (RecursionError, UnicodeDecodeError, ValueError) as e:
        logger.warning("persisted snapshot unreadable, starting empty: %s", e)
        return [], []
    if not isinstance(payload, dict):
        logger.warning("persisted snapshot has unexpected shape, starting empty")
        return [], []
    version = payload.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        logger.warning("persisted snapshot has unknown version %r, starting empty", version)
        return [], []

    habits: list[Habit] = _decode_records(payload.get("habits"), record_to_habit, "habit")
    known = {h.id for h in habits}
    seen: set[tuple[str, str]] = set()
    completions: list[Completion] = []
    for c in _decode_records(payload.get("completions"), record_to_completion, "completion"):
        pair = (c.habit_id, c.date)
        if c.habit_id not in known or pair in seen:
            continue
        seen.add(pair)
        completions.append(c)
    return habits, completions

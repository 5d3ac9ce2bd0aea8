"""The habit store: sole owner of habits and completions.

Every mutation runs to completion synchronously and lands as one state
transition (listeners notified, snapshot handed to storage). Completion
changes carry their streak recompute inside that same transition, so the
cached streak fields are never observed stale.
"""

import asyncio
import dataclasses
import logging
import math
import uuid
from collections.abc import Callable, Coroutine, Iterable
from typing import Any

from .config import DEFAULT_STORAGE_KEY
from .core.models import Completion, Habit, HabitInput, ProfileStats, TodayProgress
from .lib import dates
from .lib.converters import decode_snapshot, encode_snapshot
from .storage import Storage
from .streaks import calculate_streak

__all__ = [
    "HabitStore",
    "select_active_habits",
    "select_archived_habits",
    "select_profile_stats",
    "select_today_progress",
]

logger = logging.getLogger(__name__)

Listener = Callable[["HabitStore"], None]
WriteOp = Callable[[], Coroutine[Any, Any, None]]

_PROTECTED_FIELDS = frozenset(
    {"id", "created_at", "updated_at", "current_streak", "best_streak", "total_completions"}
)
_SCHEDULE_FIELDS = frozenset({"frequency", "target_days"})


def _with_streaks(habit: Habit, completions: Iterable[Completion]) -> Habit:
    own = [c for c in completions if c.habit_id == habit.id]
    result = calculate_streak(habit, own)
    return dataclasses.replace(
        habit,
        current_streak=result.current_streak,
        best_streak=max(habit.best_streak, result.best_streak),
        total_completions=len(own),
    )


async def _after(previous: "asyncio.Task[None] | None", op: WriteOp) -> None:
    if previous is not None:
        await asyncio.wait({previous})
    await op()


class HabitStore:
    def __init__(self, storage: Storage, key: str = DEFAULT_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._habits: tuple[Habit, ...] = ()
        self._completions: tuple[Completion, ...] = ()
        self._listeners: list[Listener] = []
        self._pending: set[asyncio.Task[None]] = set()
        self._last_write: asyncio.Task[None] | None = None
        self.is_hydrated = False

    @property
    def habits(self) -> tuple[Habit, ...]:
        return self._habits

    @property
    def completions(self) -> tuple[Completion, ...]:
        return self._completions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── state transitions ────────────────────────────────────────────────────

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _commit(
        self,
        habits: Iterable[Habit] | None = None,
        completions: Iterable[Completion] | None = None,
    ) -> None:
        if habits is not None:
            self._habits = tuple(habits)
        if completions is not None:
            self._completions = tuple(completions)
        self._persist()
        self._notify()

    def _replace_habit(self, updated: Habit) -> list[Habit]:
        return [updated if h.id == updated.id else h for h in self._habits]

    # ── persistence ──────────────────────────────────────────────────────────

    def _enqueue(self, op: WriteOp) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(op())
            return
        previous = self._last_write
        if previous is not None and (previous.done() or previous.get_loop() is not loop):
            previous = None
        task = loop.create_task(_after(previous, op))
        self._last_write = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, data: bytes) -> None:
        try:
            ok = await self._storage.set(self._key, data)
        except Exception:
            logger.warning("failed to persist %s", self._key, exc_info=True)
            return
        if ok is False:
            logger.warning("storage rejected write of %s", self._key)

    async def _remove(self) -> None:
        try:
            await self._storage.remove(self._key)
        except Exception:
            logger.warning("failed to remove %s", self._key, exc_info=True)

    def _persist(self) -> None:
        if not self.is_hydrated:
            logger.debug("store not hydrated, skipping write")
            return
        data = encode_snapshot(self._habits, self._completions)
        self._enqueue(lambda: self._write(data))

    async def hydrate(self) -> None:
        """Load the persisted snapshot, then reconcile every streak once."""
        try:
            data = await self._storage.get(self._key)
        except Exception:
            logger.warning("failed to read %s, starting empty", self._key, exc_info=True)
            data = None
        habits, completions = decode_snapshot(data)
        self._habits = tuple(habits)
        self._completions = tuple(completions)
        self.is_hydrated = True
        logger.debug("hydrated %d habits, %d completions", len(habits), len(completions))
        if self._habits:
            self.update_all_streaks()
        else:
            self._notify()
        await self.flush()

    async def flush(self) -> None:
        """Wait for every write scheduled so far."""
        if self._pending:
            await asyncio.gather(*self._pending)

    # ── habits ───────────────────────────────────────────────────────────────

    def add_habit(self, habit_input: HabitInput) -> Habit:
        now = dates.iso_timestamp()
        fields = {f.name: getattr(habit_input, f.name) for f in dataclasses.fields(habit_input)}
        habit = Habit(id=str(uuid.uuid4()), created_at=now, updated_at=now, **fields)
        self._commit(habits=[*self._habits, habit])
        return habit

    def update_habit(self, habit_id: str, **updates: Any) -> Habit | None:
        """Merge ``updates`` into a habit. Identity, timestamps and streak fields are ignored."""
        habit = self.get_habit(habit_id)
        if habit is None:
            logger.debug("update_habit: no habit %s", habit_id)
            return None
        changes = {k: v for k, v in updates.items() if k not in _PROTECTED_FIELDS}
        updated = dataclasses.replace(habit, **changes, updated_at=dates.iso_timestamp())
        if _SCHEDULE_FIELDS & changes.keys():
            updated = _with_streaks(updated, self._completions)
        self._commit(habits=self._replace_habit(updated))
        return updated

    def delete_habit(self, habit_id: str) -> Habit | None:
        habit = self.get_habit(habit_id)
        if habit is None:
            logger.debug("delete_habit: no habit %s", habit_id)
            return None
        self._commit(
            habits=[h for h in self._habits if h.id != habit_id],
            completions=[c for c in self._completions if c.habit_id != habit_id],
        )
        return habit

    def archive_habit(self, habit_id: str) -> Habit | None:
        habit = self.get_habit(habit_id)
        if habit is None:
            logger.debug("archive_habit: no habit %s", habit_id)
            return None
        now = dates.iso_timestamp()
        updated = dataclasses.replace(habit, archived_at=now, updated_at=now)
        self._commit(habits=self._replace_habit(updated))
        return updated

    def unarchive_habit(self, habit_id: str) -> Habit | None:
        habit = self.get_habit(habit_id)
        if habit is None:
            return None
        updated = dataclasses.replace(habit, archived_at=None, updated_at=dates.iso_timestamp())
        self._commit(habits=self._replace_habit(updated))
        return updated

    def clear(self) -> None:
        """Drop every habit and completion and the persisted record."""
        self._habits = ()
        self._completions = ()
        if self.is_hydrated:
            self._enqueue(self._remove)
        self._notify()

    # ── completions ──────────────────────────────────────────────────────────

    def toggle_completion(self, habit_id: str, date: str | None = None) -> Completion | None:
        """Mark ``date`` done, or undo it if already done.

        Returns the new completion, or None when one was removed (or the habit
        does not exist).
        """
        habit = self.get_habit(habit_id)
        if habit is None:
            logger.debug("toggle_completion: no habit %s", habit_id)
            return None
        day = date or dates.today()

        created: Completion | None = None
        if self.is_habit_completed_on_date(habit_id, day):
            completions = [
                c for c in self._completions if not (c.habit_id == habit_id and c.date == day)
            ]
        else:
            created = Completion(
                id=str(uuid.uuid4()),
                habit_id=habit_id,
                date=day,
                completed_at=dates.iso_timestamp(),
                count=1,
            )
            completions = [*self._completions, created]

        self._commit(
            habits=self._replace_habit(_with_streaks(habit, completions)),
            completions=completions,
        )
        return created

    def update_habit_streaks(self, habit_id: str) -> Habit | None:
        habit = self.get_habit(habit_id)
        if habit is None:
            return None
        updated = _with_streaks(habit, self._completions)
        self._commit(habits=self._replace_habit(updated))
        return updated

    def update_all_streaks(self) -> None:
        if not self._habits:
            return
        self._commit(habits=[_with_streaks(h, self._completions) for h in self._habits])

    # ── queries ──────────────────────────────────────────────────────────────

    def get_habit(self, habit_id: str) -> Habit | None:
        return next((h for h in self._habits if h.id == habit_id), None)

    def get_completions_for_habit(self, habit_id: str) -> list[Completion]:
        return [c for c in self._completions if c.habit_id == habit_id]

    def get_completions_for_date(self, date: str) -> list[Completion]:
        return [c for c in self._completions if c.date == date]

    def is_habit_completed_on_date(self, habit_id: str, date: str) -> bool:
        return any(c.habit_id == habit_id and c.date == date for c in self._completions)


# ── selectors ────────────────────────────────────────────────────────────────


def select_active_habits(store: HabitStore) -> list[Habit]:
    return [h for h in store.habits if not h.archived_at]


def select_archived_habits(store: HabitStore) -> list[Habit]:
    archived = [h for h in store.habits if h.archived_at]
    return sorted(archived, key=lambda h: h.archived_at or "", reverse=True)


def select_today_progress(store: HabitStore, today: str | None = None) -> TodayProgress:
    day = today or dates.today()
    active = select_active_habits(store)
    done_ids = {c.habit_id for c in store.get_completions_for_date(day)}
    completed = sum(1 for h in active if h.id in done_ids)
    total = len(active)
    percentage = math.floor(completed * 100 / total + 0.5) if total else 0
    return TodayProgress(total=total, completed=completed, percentage=percentage)


def select_profile_stats(store: HabitStore) -> ProfileStats:
    habits = store.habits
    return ProfileStats(
        total_habits=len(habits),
        active_habits=len(select_active_habits(store)),
        total_completions=len(store.completions),
        longest_streak=max((h.best_streak for h in habits), default=0),
        current_streaks=sum(h.current_streak for h in habits),
    )

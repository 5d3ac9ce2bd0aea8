from ritual.core.models import Habit, ProfileStats, TodayProgress
from ritual.store import HabitStore, select_active_habits, select_today_progress
from ritual.streaks import RATE_WINDOW_DAYS, calculate_streak, completion_rate, is_scheduled, is_streak_active

from . import ansi, dates
from .format import format_frequency, format_habit

__all__ = [
    "render_dashboard",
    "render_habit_detail",
    "render_habit_matrix",
    "render_progress",
    "render_stats",
]

_BAR_WIDTH = 20


def render_progress(progress: TodayProgress) -> str:
    filled = _BAR_WIDTH * progress.percentage // 100
    bar = "█" * filled + "░" * (_BAR_WIDTH - filled)
    return f"{bar}  {progress.completed}/{progress.total}  {progress.percentage}%"


def render_dashboard(store: HabitStore) -> str:
    today = dates.today()
    habits = select_active_habits(store)
    if not habits:
        return "no habits yet, add one with: ritual add <name>"

    progress = select_today_progress(store, today)
    lines = [ansi.bold(ansi.white(f"TODAY {today}")), render_progress(progress), ""]

    scheduled = [h for h in habits if is_scheduled(h, today)]
    resting = [h for h in habits if not is_scheduled(h, today)]
    done = [h for h in scheduled if store.is_habit_completed_on_date(h.id, today)]
    pending = [h for h in scheduled if h not in done]

    for habit in sorted(pending, key=lambda h: h.name.lower()):
        alive = is_streak_active(habit, store.get_completions_for_habit(habit.id), today)
        marker = "" if alive or not habit.current_streak else ansi.red("  at risk")
        lines.append(f"  {format_habit(habit, show_id=True)}{marker}")
    for habit in sorted(done, key=lambda h: h.name.lower()):
        lines.append(f"  {format_habit(habit, checked=True, show_id=True)}")
    if resting:
        names = ", ".join(h.name.lower() for h in sorted(resting, key=lambda h: h.name.lower()))
        lines.append(ansi.dim(f"  rest day: {names}"))
    return "\n".join(lines)


def render_habit_matrix(store: HabitStore, habits: list[Habit]) -> str:
    if not habits:
        return "No habits found."

    today = dates.today()
    days = [dates.offset(today, i) for i in range(6, -1, -1)]
    day_names = [dates.DAY_NAMES[dates.weekday(d)] for d in days]

    lines = ["HABIT TRACKER (last 7 days)\n"]
    header = "habit           " + " ".join(day_names) + "   streak"
    lines.append(header)
    lines.append("-" * len(header))

    for habit in sorted(habits, key=lambda h: h.name.lower()):
        done = {c.date for c in store.get_completions_for_habit(habit.id)}
        cells = []
        for day in days:
            if day in done:
                cells.append("✓")
            elif is_scheduled(habit, day):
                cells.append("□")
            else:
                cells.append("·")
        streak = f"{habit.current_streak}/{habit.best_streak}"
        lines.append(
            f"{habit.name.lower()[:15]:<15} {'   '.join(cells)}   {streak:<7} "
            f"{ansi.muted(f'[{habit.id[:8]}]')}"
        )
    return "\n".join(lines)


def render_habit_detail(store: HabitStore, habit: Habit) -> str:
    completions = store.get_completions_for_habit(habit.id)
    result = calculate_streak(habit, completions)
    lines = [ansi.bold(f"{habit.icon} {habit.name}".strip())]
    if habit.description:
        lines.append(ansi.dim(habit.description))
    lines.append(f"  schedule   {format_frequency(habit)}")
    if habit.target_count > 1:
        lines.append(f"  target     {habit.target_count}x per day")
    lines.append(f"  streak     {habit.current_streak} (best {habit.best_streak})")
    lines.append(f"  total      {habit.total_completions}")
    lines.append(f"  rate       {completion_rate(completions)}% of last {RATE_WINDOW_DAYS} days")
    lines.append(f"  last done  {result.last_completed_date or '-'}")
    if habit.archived_at:
        lines.append(ansi.muted(f"  archived   {habit.archived_at[:10]}"))
    lines.append(ansi.muted(f"  [{habit.id[:8]}]"))
    return "\n".join(lines)


def render_stats(stats: ProfileStats, points: int, unlocked: int, total: int) -> str:
    rows = [
        ("habits", f"{stats.active_habits} active / {stats.total_habits} total"),
        ("completions", str(stats.total_completions)),
        ("best streak", str(stats.longest_streak)),
        ("live streaks", str(stats.current_streaks)),
        ("achievements", f"{unlocked}/{total}  {points} pts"),
    ]
    lines = [ansi.bold(ansi.white("STATS"))]
    lines.extend(f"  {label:<13}{value}" for label, value in rows)
    return "\n".join(lines)

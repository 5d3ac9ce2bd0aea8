import asyncio

from ritual import config, db
from ritual.storage import SqliteStorage
from ritual.store import HabitStore
from tests.conftest import FnCLIRunner


def _load() -> HabitStore:
    db.init()
    store = HabitStore(SqliteStorage(config.DB_PATH))
    asyncio.run(store.hydrate())
    return store


def test_add_habit(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    result = runner.invoke(["add", "read", "books"])

    assert result.exit_code == 0
    assert "read books" in result.stdout
    habits = _load().habits
    assert [h.name for h in habits] == ["read books"]
    assert habits[0].icon == config.DEFAULT_ICON


def test_add_weekly_habit(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    result = runner.invoke(["add", "gym", "-f", "weekly", "-d", "mon,wed,fri"])

    assert result.exit_code == 0
    habit = _load().habits[0]
    assert habit.frequency == "weekly"
    assert habit.target_days == (1, 3, 5)


def test_add_rejects_invalid_name(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    result = runner.invoke(["add", "x"])

    assert result.exit_code != 0
    assert "at least 2 characters" in result.stderr
    assert _load().habits == ()


def test_add_weekly_without_days_fails(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    result = runner.invoke(["add", "gym", "-f", "weekly"])

    assert result.exit_code != 0
    assert "at least one day" in result.stderr


def test_check_toggles(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])

    first = runner.invoke(["check", "read"])
    assert first.exit_code == 0
    assert "✓" in first.stdout
    assert _load().get_completions_for_date("2024-01-03")

    second = runner.invoke(["check", "read"])
    assert second.exit_code == 0
    assert "unchecked" in second.stdout
    assert _load().completions == ()


def test_check_on_past_day_builds_streak(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])
    runner.invoke(["check", "read", "--on", "2024-01-01"])
    runner.invoke(["check", "read", "--on", "yesterday"])
    runner.invoke(["check", "read"])

    habit = _load().habits[0]
    assert habit.current_streak == 3
    assert habit.best_streak == 3


def test_check_unknown_habit(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    result = runner.invoke(["check", "nothing"])

    assert result.exit_code == 1
    assert "No habit found" in result.stderr


def test_rm_cascades(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])
    runner.invoke(["check", "read"])

    result = runner.invoke(["rm", "read"])

    assert result.exit_code == 0
    store = _load()
    assert store.habits == ()
    assert store.completions == ()


def test_archive_hides_from_today(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])
    runner.invoke(["add", "run"])

    result = runner.invoke(["archive", "run"])
    assert result.exit_code == 0

    today = runner.invoke(["today"])
    assert "read" in today.stdout
    assert "0/1" in today.stdout

    listed = runner.invoke(["habits", "--archived"])
    assert "run" in listed.stdout


def test_edit_renames(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])

    result = runner.invoke(["edit", "read", "-n", "read fiction"])

    assert result.exit_code == 0
    assert _load().habits[0].name == "read fiction"


def test_stats_and_achievements(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])
    runner.invoke(["check", "read"])

    stats = runner.invoke(["stats"])
    assert stats.exit_code == 0
    assert "completions" in stats.stdout

    achievements = runner.invoke(["achievements"])
    assert achievements.exit_code == 0
    assert "First Step" in achievements.stdout


def test_habits_matrix(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])
    runner.invoke(["check", "read"])

    result = runner.invoke(["habits"])
    assert result.exit_code == 0
    assert "HABIT TRACKER" in result.stdout
    assert "✓" in result.stdout


def test_reset_needs_confirmation(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])

    refused = runner.invoke(["reset"])
    assert refused.exit_code != 0
    assert len(_load().habits) == 1

    result = runner.invoke(["reset", "--yes"])
    assert result.exit_code == 0
    assert _load().habits == ()


def test_show_reports_completion_rate(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()
    runner.invoke(["add", "read"])
    for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
        runner.invoke(["check", "read", "--on", day])

    result = runner.invoke(["show", "read"])

    assert result.exit_code == 0
    assert "rate       10% of last 30 days" in result.stdout


def test_config_set_changes_default_icon(tmp_ritual_dir, set_today):
    set_today("2024-01-03")
    runner = FnCLIRunner()

    result = runner.invoke(["config", "set", "default_icon", "★"])
    assert result.exit_code == 0
    runner.invoke(["add", "read"])

    assert _load().habits[0].icon == "★"
    shown = runner.invoke(["config", "show"])
    assert "default_icon  ★" in shown.stdout


def test_config_set_rejects_unknown_key(tmp_ritual_dir):
    runner = FnCLIRunner()
    result = runner.invoke(["config", "set", "colour", "red"])
    assert result.exit_code != 0
    assert not (tmp_ritual_dir / "config.yaml").exists()

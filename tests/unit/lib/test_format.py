from ritual.core.models import Habit
from ritual.lib import ansi
from ritual.lib.format import format_frequency, format_habit, format_status


def _habit(**kwargs) -> Habit:
    base = {
        "id": "0123456789abcdef",
        "name": "Read",
        "icon": "📚",
        "color": "#000000",
        "frequency": "daily",
        "created_at": "2024-01-01T08:00:00",
        "updated_at": "2024-01-01T08:00:00",
    }
    base.update(kwargs)
    return Habit(**base)


def test_bold_and_dim_wrap_text():
    assert ansi.bold("hi") == f"{ansi.DEFAULT.bold}hi{ansi.DEFAULT.reset}"
    assert ansi.dim("hi").startswith("\033[2m")


def test_strip():
    assert ansi.strip(ansi.muted("hello")) == "hello"


def test_format_frequency():
    assert format_frequency(_habit()) == "daily"
    assert format_frequency(_habit(frequency="weekly", target_days=(5, 1, 3))) == "mon wed fri"
    assert format_frequency(_habit(frequency="weekly", target_days=())) == "weekly"


def test_format_habit_unchecked():
    assert ansi.strip(format_habit(_habit())) == "□ 📚 read"


def test_format_habit_checked_with_streak_and_id():
    text = ansi.strip(format_habit(_habit(current_streak=4), checked=True, show_id=True))
    assert text == "✓ 📚 read 🔥4 [01234567]"


def test_format_status():
    assert ansi.strip(format_status("+", "read", "0123456789")) == "+ read [01234567]"
    assert format_status("✗", "read") == "✗ read"

import dataclasses
import re
from collections.abc import Sequence

__all__ = [
    "ValidationResult",
    "sanitize_text",
    "validate_habit_description",
    "validate_habit_form",
    "validate_habit_name",
]

MAX_TEXT_LENGTH = 500
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200

_MARKUP_RE = re.compile(r"[<>]")


@dataclasses.dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = dataclasses.field(default_factory=list)


def _result(errors: list[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=errors)


def sanitize_text(text: str) -> str:
    """Trim, drop angle brackets, cap at 500 characters."""
    return _MARKUP_RE.sub("", text.strip())[:MAX_TEXT_LENGTH]


def validate_habit_name(name: str) -> ValidationResult:
    errors: list[str] = []
    sanitized = sanitize_text(name)
    if not sanitized:
        errors.append("Habit name is required")
    elif len(sanitized) < NAME_MIN_LENGTH:
        errors.append(f"Habit name must be at least {NAME_MIN_LENGTH} characters")
    elif len(sanitized) > NAME_MAX_LENGTH:
        errors.append(f"Habit name must be less than {NAME_MAX_LENGTH} characters")
    return _result(errors)


def validate_habit_description(description: str | None) -> ValidationResult:
    errors: list[str] = []
    if description and len(sanitize_text(description)) > DESCRIPTION_MAX_LENGTH:
        errors.append(f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters")
    return _result(errors)


def validate_habit_form(
    name: str,
    frequency: str,
    description: str | None = None,
    target_days: Sequence[int] | None = None,
) -> ValidationResult:
    errors = list(validate_habit_name(name).errors)
    errors.extend(validate_habit_description(description).errors)
    if frequency == "weekly" and not target_days:
        errors.append("Please select at least one day for weekly habits")
    return _result(errors)

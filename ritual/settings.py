from fncli import UsageError, cli

from . import config
from .lib import ansi

__all__ = ["SETTINGS"]

SETTINGS = {
    "storage_key": config.get_storage_key,
    "log_level": config.get_log_level,
    "default_icon": config.get_default_icon,
    "default_color": config.get_default_color,
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@cli("ritual config", name="show")
def show():
    """Show effective settings"""
    for key, getter in SETTINGS.items():
        marker = "" if config.Config().get(key) else ansi.muted("  (default)")
        print(f"  {key:<14}{getter()}{marker}")


@cli("ritual config", name="set")
def set_value(key: str, value: str):
    """Set a setting: `ritual config set default_icon ★`"""
    if key not in SETTINGS:
        raise UsageError(f"unknown setting '{key}' — one of: {', '.join(SETTINGS)}")
    value = value.strip()
    if not value:
        raise UsageError("value must not be empty")
    if key == "log_level" and value.upper() not in _LOG_LEVELS:
        raise UsageError(f"log_level must be one of: {', '.join(_LOG_LEVELS)}")
    config.Config().set(key, value)
    print(f"✓ {key} = {SETTINGS[key]()}")

from pathlib import Path

import yaml

RITUAL_DIR = Path.home() / ".ritual"
DB_PATH = RITUAL_DIR / "ritual.db"
CONFIG_PATH = RITUAL_DIR / "config.yaml"

DEFAULT_STORAGE_KEY = "habits-storage"
DEFAULT_ICON = "•"
DEFAULT_COLOR = "#6366F1"


class Config:
    """Single-instance config manager. Load once, cache in memory."""

    _instance: "Config | None" = None
    _data: dict[str, object]

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = {}
            cls._instance._load()
        return cls._instance

    def _load(self) -> None:
        """Load config from disk."""
        if not CONFIG_PATH.exists():
            self._data = {}
            return
        try:
            with CONFIG_PATH.open() as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError):
            loaded = None
        self._data = loaded if isinstance(loaded, dict) else {}

    def _save(self) -> None:
        """Persist config to disk."""
        RITUAL_DIR.mkdir(exist_ok=True)
        with CONFIG_PATH.open("w") as f:
            yaml.dump(self._data, f, default_flow_style=False, allow_unicode=True)

    def get(self, key: str, default: object = None) -> object:
        return self._data.get(key, default)

    def set(self, key: str, value: object) -> None:
        """Set config value and persist."""
        self._data[key] = value
        self._save()


def _str_setting(key: str, default: str) -> str:
    val = Config().get(key)
    return str(val).strip() if val else default


def get_storage_key() -> str:
    """Key the store snapshot is saved under."""
    return _str_setting("storage_key", DEFAULT_STORAGE_KEY)


def get_log_level() -> str:
    return _str_setting("log_level", "WARNING").upper()


def get_default_icon() -> str:
    return _str_setting("default_icon", DEFAULT_ICON)


def get_default_color() -> str:
    return _str_setting("default_color", DEFAULT_COLOR)

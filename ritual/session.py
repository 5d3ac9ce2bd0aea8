import asyncio

from . import config, db
from .storage import SqliteStorage
from .store import HabitStore

__all__ = ["open_store"]


def open_store() -> HabitStore:
    """Build the CLI's store over the sqlite file and hydrate it."""
    db.init()
    store = HabitStore(SqliteStorage(config.DB_PATH), key=config.get_storage_key())
    asyncio.run(store.hydrate())
    return store

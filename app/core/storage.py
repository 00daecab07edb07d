# app/core/storage.py

from typing import Optional

from loguru import logger

from app.core.seeding_logic import build_seeded_store
from app.repositories.memory import MemoryStore

DATABASE = "database"
MEMORY = "memory"


class StorageState:
    """
    Process-wide switch between the database and the in-memory fallback.
    When the database cannot be read or written the service keeps running on
    a seeded in-memory copy; nothing written there survives a restart.
    """

    def __init__(self):
        self.mode = DATABASE
        self.memory: Optional[MemoryStore] = None
        self.reason: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.mode == MEMORY

    def use_memory(self, reason: str, store: Optional[MemoryStore] = None) -> MemoryStore:
        if store is not None:
            self.memory = store
        elif self.memory is None:
            self.memory = build_seeded_store()

        if self.mode != MEMORY:
            logger.warning(f"Storage unavailable ({reason}). Continuing with in-memory data only.")
        self.mode = MEMORY
        self.reason = reason
        return self.memory

    def use_database(self):
        self.mode = DATABASE
        self.reason = None


storage = StorageState()

import os
import json
import logging
from typing import Optional
from dotenv import load_dotenv

from models import Database

logger = logging.getLogger(__name__)

# 1. Load environment variables from .env file
load_dotenv()

# 2. Path of the single JSON document holding users and bookings
DB_FILE = os.environ.get("DB_FILE", "db.json")


class BaseStore:
    """Whole-document storage: every call reads or rewrites everything.

    There is no locking and no caching between calls, so two requests that
    load, modify and save concurrently can overwrite each other.
    """

    def load(self) -> Database:
        raise NotImplementedError

    def save(self, db: Database) -> None:
        raise NotImplementedError


class JsonFileStore(BaseStore):
    def __init__(self, path: str):
        self.path = path

    def load(self) -> Database:
        if not os.path.exists(self.path):
            # Create the file with the default structure if it doesn't exist
            db = Database()
            self.save(db)
            return db
        with open(self.path, "r", encoding="utf-8") as f:
            return Database.model_validate(json.load(f))

    def save(self, db: Database) -> None:
        # Plain overwrite, a crash mid-write can leave a truncated file
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(db.model_dump(), f, indent=2, ensure_ascii=False)
        except OSError:
            logger.exception("Could not write store to %s", self.path)
            raise
        logger.debug("Store written to %s", self.path)


class MemoryStore(BaseStore):
    """Keeps the document as a JSON string so callers never share objects."""

    def __init__(self, db: Optional[Database] = None):
        self._raw = (db if db is not None else Database()).model_dump_json()

    def load(self) -> Database:
        return Database.model_validate_json(self._raw)

    def save(self, db: Database) -> None:
        self._raw = db.model_dump_json()


store = JsonFileStore(DB_FILE)


def init_db():
    # Touching the store creates the file if it doesn't exist yet
    store.load()
    logger.info("Using store at %s", os.path.abspath(DB_FILE))


def get_store() -> BaseStore:
    return store

"""Service for persisting named JSON documents in the database."""
import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vocabcoach.models.models import StateEntry
from vocabcoach.monitoring import storage_errors

logger = logging.getLogger(__name__)

WORD_SCORES_KEY = "word_scores"
RECENT_WORDS_KEY = "recent_words"
LOW_SCORE_CYCLE_KEY = "low_score_cycle"


class StateStore:
    """Key-value storage of engine state.

    Reads never fail: missing or unreadable documents yield the caller's
    default. Writes are committed in a single transaction and report success.
    """

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def load(self, key: str, default: Any = None) -> Any:
        """Return the document stored under ``key`` or ``default``."""
        try:
            entry = self.db.get(StateEntry, key)
        except SQLAlchemyError as e:
            self.db.rollback()
            storage_errors.labels(operation="load").inc()
            logger.error(f"Error reading state {key!r}: {e}")
            return default

        if entry is None:
            return default

        try:
            return json.loads(entry.value)
        except (TypeError, ValueError) as e:
            logger.warning(f"Stored state {key!r} is corrupt, ignoring it: {e}")
            return default

    def save(self, key: str, value: Any) -> bool:
        """Store ``value`` under ``key``. Returns False if nothing was persisted."""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"State {key!r} is not serializable: {e}")
            return False

        try:
            entry = self.db.get(StateEntry, key)
            if entry is None:
                self.db.add(StateEntry(key=key, value=payload))
            else:
                entry.value = payload
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            storage_errors.labels(operation="save").inc()
            logger.error(f"Error saving state {key!r}: {e}")
            return False
        return True

    def delete(self, key: str) -> bool:
        """Remove the document stored under ``key``."""
        try:
            entry = self.db.get(StateEntry, key)
            if entry is not None:
                self.db.delete(entry)
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            storage_errors.labels(operation="delete").inc()
            logger.error(f"Error deleting state {key!r}: {e}")
            return False
        return True

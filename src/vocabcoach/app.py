"""Main application entry point."""
import logging
import random
from pathlib import Path
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from vocabcoach.config import Settings, settings as default_settings
from vocabcoach.models.base import init_db, SessionLocal
from vocabcoach.models.entry_models import ImportReport, WordEntry
from vocabcoach.models.grading import GradingResult
from vocabcoach.services.dictionary import Dictionary
from vocabcoach.services.low_score_cycle import LowScoreCycle
from vocabcoach.services.recency_tracker import RecencyTracker
from vocabcoach.services.score_store import ScoreStore
from vocabcoach.services.state_store import StateStore
from vocabcoach.services.word_selector import WordSelector


class VocabCoach:
    """Main application class wiring storage, dictionary and selection."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        db: Optional[Session] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the application."""
        self.settings = settings or default_settings
        self.db = db
        self.rng = rng or random.Random()
        self.dictionary: Optional[Dictionary] = None
        self.score_store: Optional[ScoreStore] = None
        self.selector: Optional[WordSelector] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    async def start(self) -> None:
        """Start the application once the dictionary has loaded."""
        if self.running:
            return

        if self.db is None:
            init_db()
            self.db = SessionLocal()
            self.logger.info("Database initialized")

        self.dictionary = Dictionary(self.settings.paths.user_dictionary_file)
        await self.dictionary.load(self.settings.paths.dictionary_file)

        state_store = StateStore(self.db)
        self.score_store = ScoreStore(state_store)
        self.selector = WordSelector(
            score_store=self.score_store,
            dictionary=self.dictionary,
            recency_tracker=RecencyTracker(state_store, self.settings.selection),
            low_score_cycle=LowScoreCycle(state_store, self.rng),
            selection_settings=self.settings.selection,
            rng=self.rng,
        )
        self.running = True
        self.logger.info(f"Started with {len(self.dictionary)} dictionary words")

    async def stop(self) -> None:
        """Stop the application."""
        if not self.running:
            return
        if self.db is not None:
            self.db.close()
            self.db = None
        self.running = False
        self.logger.info("Stopped")

    def _require_started(self) -> None:
        if not self.running:
            raise RuntimeError("VocabCoach has not been started")

    def next_word(self) -> WordEntry:
        """Pick the next word to present."""
        self._require_started()
        return self.selector.select_next()

    def submit_grading(self, word: str, result: GradingResult) -> bool:
        """Record a grading result. Returns False if the score was not saved."""
        self._require_started()
        return self.score_store.record_score(word, result.star_rating())

    def mark_learned(self, word: str) -> None:
        self._require_started()
        self.selector.mark_learned(word)

    def import_words(self, path: Path) -> ImportReport:
        """Merge a CSV word list into the dictionary."""
        self._require_started()
        return self.dictionary.import_csv_file(path)

    async def reset_dictionary(self) -> Tuple[bool, Optional[str]]:
        """Replace the dictionary with the default word list."""
        self._require_started()
        return await self.dictionary.reset_to_default(self.settings.paths.default_dictionary_file)

    def reset_progress(self) -> bool:
        """Erase all score history and selection state."""
        self._require_started()
        if not self.score_store.reset():
            return False
        self.selector.reset_selection()
        return True

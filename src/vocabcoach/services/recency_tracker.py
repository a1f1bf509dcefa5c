"""Bounded window of recently served words."""
import logging
from typing import List

from vocabcoach.config import SelectionSettings
from vocabcoach.services.state_store import StateStore, RECENT_WORDS_KEY

logger = logging.getLogger(__name__)


class RecencyTracker:
    """FIFO of the most recently served words, persisted across restarts.

    The window size is read from the selection settings on every insert, so
    shrinking it mid-session evicts the surplus on the next ``add``.
    """

    def __init__(self, state_store: StateStore, selection_settings: SelectionSettings):
        self.state_store = state_store
        self.selection_settings = selection_settings
        stored = state_store.load(RECENT_WORDS_KEY, [])
        if not isinstance(stored, list) or not all(isinstance(word, str) for word in stored):
            logger.warning("Stored recent words are malformed, starting empty")
            stored = []
        if len(stored) > self.max_recent_words:
            logger.debug(f"Trimming stored recent words to the last {self.max_recent_words}")
            stored = stored[-self.max_recent_words:]
        self._words: List[str] = stored

    @property
    def max_recent_words(self) -> int:
        return self.selection_settings.max_recent_words

    @property
    def words(self) -> List[str]:
        """Recent words, oldest first."""
        return list(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def contains(self, word: str) -> bool:
        return word in self._words

    def add(self, word: str) -> None:
        """Append a word, evicting the oldest entries beyond the window size."""
        words = self._words + [word]
        overflow = len(words) - self.max_recent_words
        if overflow > 0:
            logger.debug(f"Evicting {words[:overflow]} from recent words")
            words = words[overflow:]
        self._store(words)

    def remove(self, word: str) -> bool:
        """Remove the first occurrence of ``word``. Returns whether it was present."""
        if word not in self._words:
            return False
        words = list(self._words)
        words.remove(word)
        self._store(words)
        return True

    def reset(self) -> None:
        self._store([])

    def _store(self, words: List[str]) -> None:
        self._words = words
        self.state_store.save(RECENT_WORDS_KEY, words)

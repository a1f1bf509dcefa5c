"""Shuffled traversal over the words the user is struggling with."""
import logging
import random
from typing import List, Optional, Sequence

from vocabcoach.models.score_models import WordScore
from vocabcoach.services.state_store import StateStore, LOW_SCORE_CYCLE_KEY

logger = logging.getLogger(__name__)


class LowScoreCycle:
    """Visits every low-score candidate once, in random order, before repeating.

    A cycle is a shuffled list of words plus a cursor. It is rebuilt from the
    candidates passed to ``next`` whenever it is empty or exhausted.
    """

    def __init__(self, state_store: StateStore, rng: Optional[random.Random] = None):
        self.state_store = state_store
        self.rng = rng or random.Random()
        self._words: List[str] = []
        self._index = 0
        self._restore()

    def _restore(self) -> None:
        stored = self.state_store.load(LOW_SCORE_CYCLE_KEY, {})
        words = stored.get("words") if isinstance(stored, dict) else None
        index = stored.get("index") if isinstance(stored, dict) else None
        if not isinstance(words, list) or not all(isinstance(word, str) for word in words):
            return
        if not isinstance(index, int) or index < 0:
            index = 0
        self._words = words
        self._index = min(index, len(words))

    def _store(self) -> None:
        self.state_store.save(LOW_SCORE_CYCLE_KEY, {"words": self._words, "index": self._index})

    @property
    def words(self) -> List[str]:
        return list(self._words)

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_exhausted(self) -> bool:
        return not self._words or self._index >= len(self._words)

    def contains(self, word: str) -> bool:
        return word in self._words

    def progress(self) -> str:
        """Human readable position within the current cycle."""
        if not self._words:
            return "Not started"
        return f"{self._index}/{len(self._words)}"

    def next(self, candidates: Sequence[WordScore]) -> WordScore:
        """Return the next word of the cycle, reshuffling ``candidates`` if needed.

        The word named by the cycle must be among ``candidates``; a missing
        word raises LookupError.
        """
        if self.is_exhausted:
            if not candidates:
                raise ValueError("Cannot start a low score cycle without candidates")
            self._words = [candidate.word for candidate in candidates]
            self.rng.shuffle(self._words)
            self._index = 0
            logger.debug(f"Started new low score cycle of {len(self._words)} words")

        selected = self._words[self._index]
        self._index += 1
        self._store()

        for candidate in candidates:
            if candidate.word == selected:
                return candidate
        raise LookupError(f"Low score cycle word {selected!r} is not among the candidates")

    def skip_unavailable(self, candidates: Sequence[WordScore]) -> None:
        """Advance the cursor past pending words that are not candidates right now."""
        available = {candidate.word for candidate in candidates}
        index = self._index
        while index < len(self._words) and self._words[index] not in available:
            index += 1
        if index != self._index:
            logger.debug(f"Skipping unavailable cycle words {self._words[self._index:index]}")
            self._index = index
            self._store()

    def discard(self, word: str) -> None:
        """Drop ``word`` from the cycle without disturbing the remaining order."""
        if word not in self._words:
            return
        position = self._words.index(word)
        self._words.pop(position)
        if position < self._index:
            self._index -= 1
        self._store()

    def invalidate(self) -> None:
        """Forget the current cycle; the next call starts a fresh one."""
        self._words = []
        self._index = 0
        self._store()

"""Service deciding which word to present next."""
import logging
import random
from typing import List, Optional, Tuple

from vocabcoach.config import SelectionSettings
from vocabcoach.models.entry_models import WordEntry
from vocabcoach.models.score_models import WordScore
from vocabcoach.monitoring import words_selected
from vocabcoach.services.dictionary import Dictionary
from vocabcoach.services.low_score_cycle import LowScoreCycle
from vocabcoach.services.recency_tracker import RecencyTracker
from vocabcoach.services.score_store import ScoreStore

logger = logging.getLogger(__name__)


class WordSelector:
    """Picks the next word following a spaced-repetition priority order.

    1. low-score review, cycling through struggling words
    2. a new word, with ``new_words_studied`` percent chance
    3. high-score review, weighted towards the lower averages
    4. any word not shown recently, or any word at all
    5. the empty sentinel when the dictionary is empty
    """

    def __init__(
        self,
        score_store: ScoreStore,
        dictionary: Dictionary,
        recency_tracker: RecencyTracker,
        low_score_cycle: LowScoreCycle,
        selection_settings: SelectionSettings,
        rng: Optional[random.Random] = None,
    ):
        self.score_store = score_store
        self.dictionary = dictionary
        self.recency_tracker = recency_tracker
        self.low_score_cycle = low_score_cycle
        self.selection_settings = selection_settings
        self.rng = rng or random.Random()

        dictionary.on_word_removed.append(self.forget_word)
        dictionary.on_reset.append(self.reset_selection)

    def select_next(self) -> WordEntry:
        """Return the next word to present."""
        for rule, select in (
            ("low_score", self._select_low_score),
            ("new_word", self._select_new_word),
            ("high_score", self._select_high_score),
            ("fallback", self._select_fallback),
        ):
            entry = select()
            if entry is not None:
                self.recency_tracker.add(entry.word)
                words_selected.labels(rule=rule).inc()
                logger.debug(f"Selected {entry.word!r} by {rule} rule")
                return entry

        logger.info("Dictionary is empty, returning the empty word")
        words_selected.labels(rule="empty").inc()
        return WordEntry.empty()

    def _not_recent(self, word_scores: List[WordScore]) -> List[WordScore]:
        return [word for word in word_scores if not self.recency_tracker.contains(word.word)]

    def _entry_for(self, word: str) -> Optional[WordEntry]:
        definitions = self.dictionary.get(word)
        if definitions is None:
            logger.debug(f"Scored word {word!r} is no longer in the dictionary")
            return None
        return WordEntry(word=word, definitions=list(definitions))

    def _select_low_score(self) -> Optional[WordEntry]:
        candidates = self._not_recent(
            self.score_store.scores_in_range(0, self.selection_settings.low_score_max)
        )
        if not candidates:
            return None
        self.low_score_cycle.skip_unavailable(candidates)
        selected = self.low_score_cycle.next(candidates)
        return self._entry_for(selected.word)

    def _select_new_word(self) -> Optional[WordEntry]:
        if self.rng.randint(1, 100) > self.selection_settings.new_words_studied:
            return None
        scored = {word.word.lower() for word in self.score_store.all_scores()}
        new_words = [
            word for word in self.dictionary
            if word.lower() not in scored and not self.recency_tracker.contains(word)
        ]
        if not new_words:
            return None
        word = self.rng.choice(new_words)
        return WordEntry(word=word, definitions=list(self.dictionary[word]))

    def _select_high_score(self) -> Optional[WordEntry]:
        candidates = self._not_recent(
            self.score_store.scores_in_range(
                self.selection_settings.high_score_min,
                6,
                last_element_threshold=self.selection_settings.high_score_admit_threshold,
            )
        )
        if not candidates:
            return None
        weights = [1.0 / (word.average_score_int + 1) for word in candidates]
        selected = self.rng.choices(candidates, weights=weights, k=1)[0]
        return self._entry_for(selected.word)

    def _select_fallback(self) -> Optional[WordEntry]:
        if not self.dictionary:
            return None
        available = [word for word in self.dictionary if not self.recency_tracker.contains(word)]
        word = self.rng.choice(available or self.dictionary.words())
        return WordEntry(word=word, definitions=list(self.dictionary[word]))

    def mark_learned(self, word: str) -> None:
        """Release a word from the recency window and restart the low-score cycle."""
        self.recency_tracker.remove(word)
        if self.low_score_cycle.contains(word):
            logger.debug(f"Learned word {word!r} was in the low score cycle, invalidating it")
            self.low_score_cycle.invalidate()

    def forget_word(self, word: str) -> None:
        """Drop references to a word removed from the dictionary."""
        self.recency_tracker.remove(word)
        self.low_score_cycle.discard(word)

    def reset_selection(self) -> None:
        """Clear the recency window and the low-score cycle."""
        self.recency_tracker.reset()
        self.low_score_cycle.invalidate()
        logger.info("Word selection state reset")

    def selection_stats(self) -> Tuple[int, str]:
        """Read-only diagnostic: recent word count and cycle progress."""
        return len(self.recency_tracker), self.low_score_cycle.progress()

    def count_dictionary_words_in_range(self, min_score: int, max_score: int) -> int:
        return self.score_store.count_in_range(min_score, max_score, self.dictionary)

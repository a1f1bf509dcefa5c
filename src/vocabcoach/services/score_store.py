"""Service for recording and querying per-word score history."""
import logging
from datetime import datetime, timedelta, UTC
from typing import Container, Dict, Iterable, List, Optional

from vocabcoach.models.score_models import ScoreData, ScoreGroup, WordScore, validate_score
from vocabcoach.monitoring import scores_recorded, tracked_words
from vocabcoach.services.state_store import StateStore, WORD_SCORES_KEY

logger = logging.getLogger(__name__)


def _most_recent_first(words: Iterable[WordScore]) -> List[WordScore]:
    return sorted((word.copy() for word in words), key=lambda w: w.last_updated, reverse=True)


class ScoreStore:
    """Durable, cached store of word score histories grouped by average.

    The state is loaded once on construction. Every mutation is applied to a
    copy, flushed, and only then becomes the cached state, so a failed write
    leaves the previous state in place.
    """

    def __init__(self, state_store: StateStore):
        """Initialize the store, loading persisted scores or starting empty."""
        self.state_store = state_store
        self._score_data = self._load()
        tracked_words.set(len(self._score_data.all_words()))
        logger.info(f"Score store initialized with {len(self._score_data.all_words())} words")

    def _load(self) -> ScoreData:
        data = self.state_store.load(WORD_SCORES_KEY)
        if data is None:
            return ScoreData()
        return ScoreData.from_data(data)

    def _flush(self, score_data: ScoreData) -> bool:
        if not self.state_store.save(WORD_SCORES_KEY, score_data.to_data()):
            return False
        self._score_data = score_data
        tracked_words.set(len(score_data.all_words()))
        return True

    def record_score(self, word: str, score: int) -> bool:
        """Add a score to a word's history and refile it under its new average.

        Returns False when the write did not persist; the cached state is then
        left unchanged.
        """
        validate_score(score)
        score_data = self._score_data.copy()

        updated: Optional[WordScore] = None
        for group in score_data.groups:
            index = group.index_of(word)
            if index is not None:
                updated = group.words.pop(index)
                previous_average = group.average_score_int
                updated.add_score(score)
                logger.debug(
                    f"Word {updated.word!r} moved from group {previous_average} "
                    f"to {updated.average_score_int}, scores {updated.scores}"
                )
                break

        if updated is None:
            updated = WordScore.first(word, score)
            logger.debug(f"New word {word!r} filed under group {updated.average_score_int}")

        score_data.group(updated.average_score_int).words.append(updated)

        if not self._flush(score_data):
            logger.error(f"Score {score} for {word!r} was not saved")
            return False
        scores_recorded.labels(stars=str(score)).inc()
        return True

    def all_scores(self) -> List[WordScore]:
        """All word scores, most recently updated first."""
        return _most_recent_first(self._score_data.all_words())

    def groups(self) -> List[ScoreGroup]:
        """The seven score groups, highest average first."""
        return [group.copy() for group in self._score_data.groups]

    def find(self, word: str) -> Optional[WordScore]:
        """Look up a word's score history, ignoring case."""
        for group in self._score_data.groups:
            index = group.index_of(word)
            if index is not None:
                return group.words[index].copy()
        return None

    def scores_with(self, average_score_int: int) -> List[WordScore]:
        """Words in a single group, most recently updated first."""
        try:
            group = self._score_data.group(average_score_int)
        except KeyError:
            return []
        return _most_recent_first(group.words)

    def scores_in_range(
        self,
        min_score: int,
        max_score: int,
        last_element_threshold: Optional[int] = None,
    ) -> List[WordScore]:
        """Words whose average lies in ``[min_score, max_score]``.

        With ``last_element_threshold`` set, words outside the range whose most
        recent score is at least the threshold are included as well.
        """
        if min_score > max_score:
            raise ValueError(f"Empty score range [{min_score}, {max_score}]")

        matching: List[WordScore] = []
        for group in self._score_data.groups:
            if min_score <= group.average_score_int <= max_score:
                matching.extend(group.words)
            elif last_element_threshold is not None:
                matching.extend(
                    word for word in group.words
                    if word.last_score is not None and word.last_score >= last_element_threshold
                )
        return _most_recent_first(matching)

    def count_in_range(self, min_score: int, max_score: int, dictionary: Container[str]) -> int:
        """Count in-range words that are still present in ``dictionary``."""
        return sum(1 for word in self.scores_in_range(min_score, max_score) if word.word in dictionary)

    def check_new(self, days_threshold: int = 7) -> List[WordScore]:
        """Words graded only once or not updated within ``days_threshold`` days."""
        cutoff = datetime.now(UTC) - timedelta(days=days_threshold)
        return _most_recent_first(
            word for word in self._score_data.all_words()
            if len(word.scores) == 1 or word.last_updated <= cutoff
        )

    def stats(self) -> Dict[str, object]:
        """Read-only diagnostic summary."""
        return {
            "total_words": len(self._score_data.all_words()),
            "groups": {group.average_score_int: len(group.words) for group in self._score_data.groups},
        }

    def reset(self) -> bool:
        """Replace all history with seven empty groups."""
        if not self._flush(ScoreData()):
            logger.error("Score reset was not saved, keeping previous scores")
            return False
        logger.info("Score data reset to initial state with 7 empty groups")
        return True

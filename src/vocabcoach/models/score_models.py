"""Models for per-word score history and its bucketed layout."""
import logging
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 3
MAX_HISTORY = 2  # only the most recent submissions are kept

# Integer averages on the doubled scale, highest first
AVERAGE_SCORE_INTS: List[int] = [6, 5, 4, 3, 2, 1, 0]


def validate_score(score: int) -> int:
    """Return ``score`` if it is a valid star rating, raise ValueError otherwise."""
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"Score must be an integer, got {score!r}")
    if score < MIN_SCORE or score > MAX_SCORE:
        raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}, got {score}")
    return score


@dataclass
class WordScore:
    """Rolling score history of a single word."""
    word: str
    scores: List[int] = field(default_factory=list)
    last_updated: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def first(cls, word: str, score: int) -> "WordScore":
        """Create the record for a word graded for the first time."""
        return cls(word=word, scores=[validate_score(score)])

    @property
    def average_score_int(self) -> int:
        """Average score on the doubled scale (0-6)."""
        if not self.scores:
            return 0
        return round(sum(self.scores) * 2 / len(self.scores))

    @property
    def last_score(self) -> Optional[int]:
        return self.scores[-1] if self.scores else None

    def matches(self, word: str) -> bool:
        """Case-insensitive word comparison."""
        return self.word.lower() == word.lower()

    def add_score(self, score: int) -> None:
        """Append a score, keeping only the most recent submissions."""
        self.scores.append(validate_score(score))
        if len(self.scores) > MAX_HISTORY:
            self.scores = self.scores[-MAX_HISTORY:]
        self.last_updated = datetime.now(UTC)

    def copy(self) -> "WordScore":
        return WordScore(word=self.word, scores=list(self.scores), last_updated=self.last_updated)

    def to_data(self) -> Dict[str, Any]:
        """Convert to serializable data for storage."""
        return {
            "word": self.word,
            "scores": list(self.scores),
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "WordScore":
        """Create a WordScore from stored data.

        Raises KeyError, TypeError or ValueError on malformed input.
        """
        word = data["word"]
        if not isinstance(word, str) or not word:
            raise ValueError(f"Invalid word: {word!r}")
        scores = [validate_score(score) for score in data["scores"]][-MAX_HISTORY:]
        if not scores:
            raise ValueError(f"No scores stored for {word!r}")
        last_updated = datetime.fromisoformat(data["last_updated"])
        if last_updated.tzinfo is None:
            last_updated = last_updated.replace(tzinfo=UTC)
        return cls(word=word, scores=scores, last_updated=last_updated)


@dataclass
class ScoreGroup:
    """Bucket of words sharing the same integer average."""
    average_score_int: int
    words: List[WordScore] = field(default_factory=list)

    def index_of(self, word: str) -> Optional[int]:
        for index, word_score in enumerate(self.words):
            if word_score.matches(word):
                return index
        return None

    def copy(self) -> "ScoreGroup":
        return ScoreGroup(self.average_score_int, [word.copy() for word in self.words])


@dataclass
class ScoreData:
    """Complete persisted score state: always exactly seven groups."""
    groups: List[ScoreGroup] = field(
        default_factory=lambda: [ScoreGroup(average) for average in AVERAGE_SCORE_INTS]
    )

    def group(self, average_score_int: int) -> ScoreGroup:
        for group in self.groups:
            if group.average_score_int == average_score_int:
                return group
        raise KeyError(f"No group for average score {average_score_int}")

    def all_words(self) -> List[WordScore]:
        return [word for group in self.groups for word in group.words]

    def copy(self) -> "ScoreData":
        return ScoreData(groups=[group.copy() for group in self.groups])

    def to_data(self) -> Dict[str, Any]:
        """Convert to serializable data for storage."""
        return {
            "groups": [
                {
                    "average_score_int": group.average_score_int,
                    "words": [word.to_data() for word in group.words],
                }
                for group in self.groups
            ]
        }

    @classmethod
    def from_data(cls, data: Any) -> "ScoreData":
        """Create ScoreData from stored data.

        Missing groups are synthesized empty and malformed entries are skipped.
        Each word is filed under the group matching its recomputed average so the
        one-word-one-group layout holds even for hand-edited data.
        """
        score_data = cls()
        if not isinstance(data, dict) or not isinstance(data.get("groups"), list):
            logger.warning("Stored score data has no group list, starting empty")
            return score_data

        seen = set()
        for group_data in data["groups"]:
            if not isinstance(group_data, dict):
                continue
            for word_data in group_data.get("words") or []:
                try:
                    word_score = WordScore.from_data(word_data)
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Skipping malformed score entry {word_data!r}: {e}")
                    continue
                key = word_score.word.lower()
                if key in seen:
                    logger.warning(f"Skipping duplicate score entry for {word_score.word!r}")
                    continue
                seen.add(key)
                score_data.group(word_score.average_score_int).words.append(word_score)
        return score_data

"""Models for sentence grading results."""
from dataclasses import dataclass
from typing import Any, Mapping

USAGE_STARS = {
    "correct": 2,
    "partial": 1,
}


@dataclass(frozen=True)
class GradingResult:
    """Outcome of grading one user-written sentence."""
    grammar_correct: bool
    usage_level: str
    feedback_text: str = ""

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "GradingResult":
        """Build a result from the grading service payload.

        The service answers with ``grammar``, ``usage`` and ``feedback`` keys.
        """
        return cls(
            grammar_correct=bool(payload["grammar"]),
            usage_level=str(payload["usage"]),
            feedback_text=str(payload.get("feedback", "")),
        )

    def star_rating(self) -> int:
        """Stars earned, 0-3: one for grammar, up to two for usage."""
        return int(self.grammar_correct) + USAGE_STARS.get(self.usage_level, 0)

"""Tests for grading results."""
import pytest

from vocabcoach.models.grading import GradingResult


@pytest.mark.parametrize(
    "grammar, usage, stars",
    [
        (True, "correct", 3),
        (False, "correct", 2),
        (True, "partial", 2),
        (False, "partial", 1),
        (True, "incorrect", 1),
        (False, "incorrect", 0),
        (False, "Correct", 0),
    ],
)
def test_star_rating(grammar: bool, usage: str, stars: int) -> None:
    assert GradingResult(grammar_correct=grammar, usage_level=usage).star_rating() == stars


def test_from_response() -> None:
    result = GradingResult.from_response(
        {"grammar": True, "usage": "partial", "feedback": "Close, but the tone is off."}
    )

    assert result.grammar_correct is True
    assert result.usage_level == "partial"
    assert result.feedback_text == "Close, but the tone is off."
    assert result.star_rating() == 2


def test_from_response_without_feedback() -> None:
    result = GradingResult.from_response({"grammar": False, "usage": "correct"})
    assert result.feedback_text == ""


def test_from_response_requires_grades() -> None:
    with pytest.raises(KeyError):
        GradingResult.from_response({"feedback": "?"})

"""Tests for the main application."""
import json
import random
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

import pytest
import pytest_asyncio
from sqlalchemy.orm import Session

from vocabcoach.app import VocabCoach
from vocabcoach.config import PathSettings, SelectionSettings, Settings
from vocabcoach.models.grading import GradingResult


@pytest.fixture
def app_settings(tmp_path: Path, selection_settings: SelectionSettings) -> Settings:
    bundled = tmp_path / "words.json"
    bundled.write_text(
        json.dumps({"lucid": ["clear"], "candid": ["frank"], "terse": ["brief"]}),
        encoding="utf-8",
    )
    defaults = tmp_path / "default_words.json"
    defaults.write_text(json.dumps({"lucid": ["clear"]}), encoding="utf-8")
    paths = replace(
        PathSettings(),
        dictionary_file=bundled,
        user_dictionary_file=tmp_path / "user" / "words.json",
        default_dictionary_file=defaults,
    )
    return Settings(paths=paths, selection=selection_settings)


@pytest_asyncio.fixture
async def coach(app_settings: Settings, db: Session) -> VocabCoach:
    coach = VocabCoach(settings=app_settings, db=db, rng=random.Random(5))
    await coach.start()
    yield coach
    await coach.stop()


@pytest.mark.asyncio
async def test_start_loads_dictionary(coach: VocabCoach) -> None:
    assert coach.running
    assert sorted(coach.dictionary.words()) == ["candid", "lucid", "terse"]


@pytest.mark.asyncio
async def test_start_is_idempotent(coach: VocabCoach) -> None:
    selector = coach.selector
    await coach.start()
    assert coach.selector is selector


@pytest.mark.asyncio
async def test_not_started_raises(app_settings: Settings, db: Session) -> None:
    coach = VocabCoach(settings=app_settings, db=db)
    with pytest.raises(RuntimeError):
        coach.next_word()


@pytest.mark.asyncio
async def test_next_word_and_grading(coach: VocabCoach) -> None:
    entry = coach.next_word()
    assert entry.word in {"lucid", "candid", "terse"}

    result = GradingResult(grammar_correct=True, usage_level="partial")
    assert coach.submit_grading(entry.word, result)

    assert coach.score_store.find(entry.word).scores == [2]


@pytest.mark.asyncio
async def test_low_score_word_comes_back(coach: VocabCoach) -> None:
    coach.submit_grading("candid", GradingResult(grammar_correct=False, usage_level="incorrect"))
    coach.selector.reset_selection()

    assert coach.next_word().word == "candid"


@pytest.mark.asyncio
async def test_perfect_grade_keeps_word_recent(coach: VocabCoach) -> None:
    entry = coach.next_word()
    assert coach.selector.recency_tracker.contains(entry.word)

    coach.submit_grading(entry.word, GradingResult(grammar_correct=True, usage_level="correct"))

    assert coach.selector.recency_tracker.contains(entry.word)
    assert coach.score_store.find(entry.word).average_score_int == 6


@pytest.mark.asyncio
async def test_perfect_grade_is_not_served_again_next(coach: VocabCoach) -> None:
    coach.submit_grading("candid", GradingResult(grammar_correct=False, usage_level="incorrect"))
    assert coach.next_word().word == "candid"

    coach.submit_grading("candid", GradingResult(grammar_correct=True, usage_level="correct"))

    assert coach.score_store.find("candid").average_score_int == 3
    assert coach.next_word().word != "candid"


@pytest.mark.asyncio
async def test_explicit_mark_learned_clears_recency(coach: VocabCoach) -> None:
    entry = coach.next_word()

    coach.mark_learned(entry.word)

    assert not coach.selector.recency_tracker.contains(entry.word)


@pytest.mark.asyncio
async def test_unsaved_grade_is_reported(coach: VocabCoach) -> None:
    with patch.object(coach.score_store.state_store, "save", return_value=False):
        saved = coach.submit_grading("lucid", GradingResult(grammar_correct=True, usage_level="correct"))

    assert saved is False
    assert coach.score_store.find("lucid") is None


@pytest.mark.asyncio
async def test_reset_progress(coach: VocabCoach) -> None:
    coach.submit_grading("lucid", GradingResult(grammar_correct=False, usage_level="partial"))
    coach.next_word()

    assert coach.reset_progress()

    assert coach.score_store.all_scores() == []
    assert coach.selector.selection_stats() == (0, "Not started")


@pytest.mark.asyncio
async def test_empty_dictionary_gives_sentinel(app_settings: Settings, db: Session, tmp_path: Path) -> None:
    settings = replace(app_settings, paths=replace(app_settings.paths, dictionary_file=tmp_path / "missing.json"))
    coach = VocabCoach(settings=settings, db=db)
    await coach.start()

    assert coach.next_word().is_empty
    await coach.stop()
    assert not coach.running


@pytest.mark.asyncio
async def test_import_words(coach: VocabCoach, tmp_path: Path) -> None:
    csv_file = tmp_path / "import.csv"
    csv_file.write_text("word,definitions\nvivid,bright;striking\n", encoding="utf-8")

    report = coach.import_words(csv_file)

    assert report.imported == 1
    assert coach.dictionary["vivid"] == ["bright", "striking"]


@pytest.mark.asyncio
async def test_reset_dictionary(coach: VocabCoach) -> None:
    coach.next_word()

    assert await coach.reset_dictionary() == (True, None)

    assert coach.dictionary.words() == ["lucid"]
    assert coach.selector.selection_stats() == (0, "Not started")


@pytest.mark.asyncio
async def test_import_unreadable_file_reports_error(coach: VocabCoach, tmp_path: Path) -> None:
    report = coach.import_words(tmp_path / "missing.csv")

    assert report.imported == 0
    assert report.message.startswith("Failed to read CSV file")
    assert "missing" not in coach.dictionary

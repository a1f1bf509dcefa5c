"""Test configuration."""
import os
import random
import tempfile
from datetime import datetime, timedelta, UTC
from pathlib import Path
from typing import Callable, Dict, Generator, List

import pytest
from dotenv import load_dotenv
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="vocabcoach-test-"))

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from vocabcoach.config import SelectionSettings, ensure_directories
from vocabcoach.models.base import init_db
from vocabcoach.models.score_models import ScoreData, WordScore
from vocabcoach.services.dictionary import Dictionary
from vocabcoach.services.score_store import ScoreStore
from vocabcoach.services.state_store import StateStore, WORD_SCORES_KEY

fake = Faker()


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment before each test."""
    ensure_directories()
    yield


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh in-memory database session for each test."""
    engine = create_engine("sqlite://")
    init_db(bind=engine)
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def state_store(db: Session) -> StateStore:
    return StateStore(db)


@pytest.fixture
def seed_scores(state_store: StateStore) -> Callable[[Dict[str, List[int]]], None]:
    """Persist score histories directly, oldest entry first.

    Each entry is stamped one minute after the previous one so ordering by
    ``last_updated`` is deterministic.
    """
    def seed(histories: Dict[str, List[int]]) -> None:
        score_data = ScoreData()
        start = datetime.now(UTC) - timedelta(days=1)
        for offset, (word, scores) in enumerate(histories.items()):
            word_score = WordScore(word=word, scores=scores, last_updated=start + timedelta(minutes=offset))
            score_data.group(word_score.average_score_int).words.append(word_score)
        assert state_store.save(WORD_SCORES_KEY, score_data.to_data())

    return seed


@pytest.fixture
def score_store(state_store: StateStore) -> ScoreStore:
    return ScoreStore(state_store)


@pytest.fixture
def selection_settings() -> SelectionSettings:
    return SelectionSettings(
        new_words_studied=20,
        max_recent_words=10,
        high_score_admit_threshold=3,
        low_score_max=4,
        high_score_min=5,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def words() -> Dict[str, List[str]]:
    """A small dictionary of unique fake words."""
    return {fake.unique.word() + str(i): [fake.sentence()] for i in range(12)}


@pytest.fixture
def dictionary(tmp_path: Path, words: Dict[str, List[str]]) -> Dictionary:
    return Dictionary(tmp_path / "user_words.json", words)

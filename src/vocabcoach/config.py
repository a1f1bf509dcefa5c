"""Configuration settings for the vocabulary coach."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
DICTIONARIES_DIR = DATA_DIR / "dictionaries"

# Bundled word lists shipped with the package
RESOURCES_DIR = Path(__file__).parent / "resources"

# Selection settings
LOW_SCORE_MAX = 4  # doubled scale, average <= 2.0
HIGH_SCORE_MIN = 5  # doubled scale, average >= 2.5


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
        DICTIONARIES_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


def _optional_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return int(value) if value else None


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR
    dictionaries_dir: Path = DICTIONARIES_DIR
    dictionary_file: Path = Path(os.getenv("DICTIONARY_FILE", str(RESOURCES_DIR / "words.json")))
    default_dictionary_file: Path = Path(
        os.getenv("DEFAULT_DICTIONARY_FILE", str(RESOURCES_DIR / "default_words.json"))
    )
    user_dictionary_file: Path = DICTIONARIES_DIR / "words.json"


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///vocabcoach.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class SelectionSettings:
    """Word selection settings.

    Read on every selection, so edits apply to the running session.
    """
    new_words_studied: int = int(os.getenv("NEW_WORDS_STUDIED", "20"))
    max_recent_words: int = int(os.getenv("MAX_RECENT_WORDS", "10"))
    high_score_admit_threshold: Optional[int] = field(
        default_factory=lambda: _optional_int("HIGH_SCORE_ADMIT_THRESHOLD", 3)
    )
    low_score_max: int = int(os.getenv("LOW_SCORE_MAX", str(LOW_SCORE_MAX)))
    high_score_min: int = int(os.getenv("HIGH_SCORE_MIN", str(HIGH_SCORE_MIN)))

    def reset_to_defaults(self) -> None:
        """Restore the factory defaults."""
        self.new_words_studied = 20
        self.max_recent_words = 10
        self.high_score_admit_threshold = 3
        self.low_score_max = LOW_SCORE_MAX
        self.high_score_min = HIGH_SCORE_MIN


@dataclass
class MonitoringSettings:
    """Metrics exporter settings."""
    port: Optional[int] = field(default_factory=lambda: _optional_int("METRICS_PORT", None))


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_selection_settings() -> SelectionSettings:
    """Get selection settings."""
    return SelectionSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    selection: SelectionSettings = field(default_factory=get_selection_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if not self.database.url:
            raise ValueError("DATABASE_URL is required")

        if self.selection.new_words_studied < 0 or self.selection.new_words_studied > 100:
            raise ValueError("NEW_WORDS_STUDIED must be between 0 and 100")

        if self.selection.max_recent_words < 1:
            raise ValueError("MAX_RECENT_WORDS must be positive")

        threshold = self.selection.high_score_admit_threshold
        if threshold is not None and (threshold < 0 or threshold > 3):
            raise ValueError("HIGH_SCORE_ADMIT_THRESHOLD must be between 0 and 3")

        if not 0 <= self.selection.low_score_max < self.selection.high_score_min <= 6:
            raise ValueError("LOW_SCORE_MAX must be below HIGH_SCORE_MIN, both within 0..6")


# Create global settings instance
settings = Settings()
settings.validate()

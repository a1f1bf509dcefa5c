"""Models for words handed to the presentation layer."""
from dataclasses import dataclass, field
from typing import List, Optional

EMPTY_WORD = "_"


@dataclass
class WordEntry:
    """A word together with its definitions."""
    word: str
    definitions: List[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "WordEntry":
        """Sentinel returned when there is nothing to present."""
        return cls(word=EMPTY_WORD, definitions=[])

    @property
    def is_empty(self) -> bool:
        return self.word == EMPTY_WORD and not self.definitions

    def definition_text(self) -> str:
        return "\n".join(self.definitions)


@dataclass
class ImportReport:
    """Result of merging imported words into the dictionary."""
    imported: int = 0
    failed: int = 0
    skipped_lines: List[int] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def message(self) -> str:
        if self.error:
            return self.error
        if self.failed == 0:
            return f"Successfully imported {self.imported} words."
        return f"Imported {self.imported} words successfully. {self.failed} words failed to import."

"""Service for the word to definitions mapping."""
import asyncio
import csv
import io
import json
import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from vocabcoach.models.entry_models import ImportReport
from vocabcoach.monitoring import words_imported

logger = logging.getLogger(__name__)

DEFINITION_SEPARATORS = re.compile(r"[;\n|]")

Result = Tuple[bool, Optional[str]]


def read_dictionary_file(path: Path) -> Dict[str, List[str]]:
    """Read a JSON mapping of word to definitions.

    Raises OSError or ValueError if the file is missing or malformed.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a mapping")
    words: Dict[str, List[str]] = {}
    for word, definitions in data.items():
        if not isinstance(definitions, list) or not all(isinstance(d, str) for d in definitions):
            raise ValueError(f"Definitions for {word!r} in {path} are not a list of strings")
        words[word] = definitions
    return words


def split_definitions(text: str) -> List[str]:
    """Split a definitions cell on ``;``, newlines or ``|``."""
    return [part.strip() for part in DEFINITION_SEPARATORS.split(text) if part.strip()]


def parse_word_table(content: str) -> Tuple[List[Tuple[str, List[str]]], List[int]]:
    """Parse comma separated ``word,definitions`` rows.

    Returns the parsed rows and the line numbers that were skipped. A first
    row mentioning "word" or "definition" is treated as a header.
    """
    rows: List[Tuple[str, List[str]]] = []
    skipped: List[int] = []
    reader = csv.reader(io.StringIO(content), skipinitialspace=True)
    first = True
    for line in reader:
        line_number = reader.line_num
        cells = [cell.strip() for cell in line]
        if not any(cells):
            continue
        if first:
            first = False
            header = ",".join(cells).lower()
            if "word" in header or "definition" in header:
                continue
        if len(cells) < 2:
            logger.warning(f"Skipping invalid line {line_number}: {line!r}")
            skipped.append(line_number)
            continue
        word, definitions = cells[0], split_definitions(cells[1])
        if not word or not definitions:
            logger.warning(f"Skipping line {line_number} with empty word or definitions")
            skipped.append(line_number)
            continue
        rows.append((word, definitions))
    return rows, skipped


class Dictionary(Mapping):
    """Word to definitions mapping with write-through persistence.

    The bundled word list is read once by ``load``. User edits are saved to
    ``user_file``, which takes precedence over the bundled list on later loads.
    """

    def __init__(self, user_file: Path, words: Optional[Dict[str, List[str]]] = None):
        self.user_file = Path(user_file)
        self._words: Dict[str, List[str]] = dict(words or {})
        self.on_word_removed: List[Callable[[str], None]] = []
        self.on_reset: List[Callable[[], None]] = []

    def __getitem__(self, word: str) -> List[str]:
        return self._words[word]

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def words(self) -> List[str]:
        return list(self._words)

    def snapshot(self) -> Dict[str, List[str]]:
        """A copy of the current contents."""
        return {word: list(definitions) for word, definitions in self._words.items()}

    async def load(self, path: Path) -> bool:
        """Load words from the saved user dictionary, or from ``path`` if there is none.

        An unreadable user dictionary falls back to ``path``. If that fails too
        the dictionary is left empty.
        """
        sources = [Path(path)]
        if self.user_file.exists():
            sources.insert(0, self.user_file)

        for source in sources:
            try:
                self._words = await asyncio.to_thread(read_dictionary_file, source)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load dictionary from {source}: {e}")
                continue
            logger.info(f"Loaded {len(self._words)} words from {source}")
            return True

        self._words = {}
        return False

    def _save(self) -> bool:
        tmp_file = self.user_file.with_suffix(self.user_file.suffix + ".tmp")
        try:
            self.user_file.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_file, "w", encoding="utf-8") as f:
                json.dump(self._words, f, ensure_ascii=False, indent=2)
            os.replace(tmp_file, self.user_file)
        except OSError as e:
            logger.error(f"Failed to save dictionary to {self.user_file}: {e}")
            return False
        logger.debug(f"Saved dictionary to {self.user_file}")
        return True

    def add_word(self, word: str, definitions: List[str]) -> Result:
        """Add or replace a word and save the dictionary."""
        word = word.strip()
        definitions = [d.strip() for d in definitions if d.strip()]
        if not word or not definitions:
            return False, "Word and definitions cannot be empty"

        previous = self._words.get(word)
        self._words[word] = definitions
        if not self._save():
            if previous is None:
                del self._words[word]
            else:
                self._words[word] = previous
            return False, "Failed to save dictionary to file"
        return True, None

    def remove_word(self, word: str) -> Result:
        """Remove a word and save the dictionary."""
        if word not in self._words:
            return False, "Word not found in dictionary"

        removed = self._words.pop(word)
        if not self._save():
            self._words[word] = removed
            return False, "Failed to save dictionary to file"

        for listener in self.on_word_removed:
            listener(word)
        return True, None

    async def reset_to_default(self, path: Path) -> Result:
        """Replace the contents with the default word list."""
        try:
            default_words = await asyncio.to_thread(read_dictionary_file, Path(path))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load default dictionary from {path}: {e}")
            return False, f"Failed to load or parse {Path(path).name}"

        current = self._words
        self._words = default_words
        if not self._save():
            self._words = current
            return False, "Failed to save default dictionary"

        for listener in self.on_reset:
            listener()
        logger.info(f"Dictionary reset to {len(default_words)} default words")
        return True, None

    def import_csv(self, content: str) -> ImportReport:
        """Merge ``word,definitions`` rows into the dictionary."""
        rows, skipped = parse_word_table(content)
        report = ImportReport(skipped_lines=skipped)
        if not rows:
            return report

        previous = self.snapshot()
        for word, definitions in rows:
            self._words[word] = definitions

        if self._save():
            report.imported = len(rows)
            words_imported.labels(outcome="imported").inc(len(rows))
        else:
            self._words = previous
            report.failed = len(rows)
            words_imported.labels(outcome="failed").inc(len(rows))
        logger.info(report.message)
        return report

    def import_csv_file(self, path: Path) -> ImportReport:
        """Read a CSV file and merge it into the dictionary."""
        try:
            with open(path, encoding="utf-8-sig") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read CSV file {path}: {e}")
            return ImportReport(error=f"Failed to read CSV file: {e}")
        return self.import_csv(content)

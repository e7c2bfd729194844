"""Record file persistence for both watch-lists."""

import json
import logging
import os
import stat
import tempfile
from collections import Counter
from pathlib import Path

from pydantic import ValidationError

from .constants import Category, ListKind
from .exceptions import ParseError, PersistError, ReadError
from .models import Entry, StoreFile

logger = logging.getLogger(__name__)


# Field names used by the single-list (anime only) record format
LEGACY_FIELDS = {"episodes": "total_units", "watched": "completed_units"}


def upgrade_legacy_entry(record: dict) -> dict:
    """Translate one entry of the single-list format to the current field names.

    Dates in that format carry a timezone suffix, e.g. "2023-04-01UTC".
    """
    if not isinstance(record, dict):
        return record
    upgraded = {LEGACY_FIELDS.get(key, key): value for key, value in record.items()}
    started = upgraded.get("started")
    if isinstance(started, str) and started.endswith("UTC"):
        upgraded["started"] = started[: -len("UTC")]
    return upgraded


class Store:
    """In-memory copy of the record file.

    Loaded once at startup and rewritten in full by flush() after every
    mutation. Only the mutation engine should change the entry lists.
    """

    def __init__(self, path: Path, data: StoreFile | None = None):
        self.path = Path(path)
        self.data = data if data is not None else StoreFile()

    @classmethod
    def load(cls, path: Path) -> "Store":
        """Load the store from path, or return an empty store if it does not exist.

        Raises:
            ReadError: the file exists but cannot be read.
            ParseError: the file content is not a valid record file.
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"No record file at {path}, starting with empty lists")
            return cls(path)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(path, str(e)) from e

        try:
            raw = json.loads(text) if text.strip() else {}
            # The single-list format only ever held anime
            if isinstance(raw, list):
                raw = {"anime": [upgrade_legacy_entry(record) for record in raw]}
            data = StoreFile.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ParseError(path, str(e)) from e

        logger.info(
            f"Loaded {len(data.anime)} anime and {len(data.manga)} manga entries from {path}"
        )
        return cls(path, data)

    def flush(self) -> None:
        """Rewrite the whole record file atomically (temp file + rename).

        Raises:
            PersistError: the file could not be written. The in-memory
                store is left as it is.
        """
        payload = self.data.model_dump_json(indent=2) + "\n"
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".tmp_", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp, self._file_mode())
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp and os.path.exists(tmp):
                os.unlink(tmp)
            logger.error(f"Failed to save {self.path}: {e}")
            raise PersistError(self.path, str(e)) from e
        logger.debug(f"Saved record file {self.path}")

    def _file_mode(self) -> int:
        """Permissions for the rewritten file: the current ones, else the umask default."""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def entries(self, kind: ListKind) -> list[Entry]:
        """The full, unfiltered list for a kind."""
        return self.data.entries(kind)

    def filtered(self, kind: ListKind, category: Category) -> list[tuple[int, Entry]]:
        """Entries of a list shown under a category, paired with their store index."""
        return [
            (index, entry)
            for index, entry in enumerate(self.entries(kind))
            if entry.status.matches(category)
        ]

    def filtered_len(self, kind: ListKind, category: Category) -> int:
        return len(self.filtered(kind, category))

    def counts(self, kind: ListKind) -> dict[Category, int]:
        """Number of entries shown under each category."""
        by_status = Counter(entry.status.value for entry in self.entries(kind))
        counts = {category: by_status.get(category.value, 0) for category in Category}
        counts[Category.ALL] = len(self.entries(kind))
        return counts

    def __eq__(self, other) -> bool:
        if not isinstance(other, Store):
            return NotImplemented
        return self.data == other.data

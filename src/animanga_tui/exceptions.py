"""Error types raised by the store, the mutation engine and the terminal layer."""

from pathlib import Path
from typing import Optional


class AnimangaError(Exception):
    """Base class for application errors."""


class ReadError(AnimangaError):
    """The record file exists but could not be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"error reading the record file {path}: {reason}")


class ParseError(AnimangaError):
    """The record file content is malformed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"error parsing the record file {path}: {reason}")


class PersistError(AnimangaError):
    """Flushing the store to disk failed. The in-memory store is kept."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"could not save {path}: {reason}")


class NotFound(AnimangaError):
    """An operation targeted an empty selection."""

    def __init__(self, message: str = "no entry selected"):
        super().__init__(message)


class InputError(AnimangaError):
    """Reading from the terminal failed; the application cannot continue."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)

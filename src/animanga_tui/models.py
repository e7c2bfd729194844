"""Data models for watch-list entries."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import MAX_SCORE, Category, ListKind


class WatchStatus(str, Enum):
    """Watch (or read) status of an entry."""

    WATCHING = "watching"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    DROPPED = "dropped"
    PLAN_TO_WATCH = "plan_to_watch"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

    @classmethod
    def parse(cls, text: str) -> "WatchStatus":
        """Parse a status from its value or display label.

        "On Hold", "on-hold" and "on_hold" all resolve to ON_HOLD.
        """
        key = text.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown status: {text!r}") from None

    def matches(self, category: Category) -> bool:
        """Check if this status is shown under a category filter."""
        return category is Category.ALL or category.value == self.value


class Entry(BaseModel):
    """One tracked anime or manga title."""

    name: str = Field(min_length=1)
    year: Optional[int] = Field(default=None, ge=0)

    # Progress in episodes (anime) or chapters (manga); 0 total means unknown
    total_units: int = Field(default=0, ge=0)
    completed_units: int = Field(default=0, ge=0)

    status: WatchStatus = WatchStatus.PLAN_TO_WATCH
    rating: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    score: int = Field(default=0, ge=0, le=MAX_SCORE)
    started: date = Field(default_factory=date.today)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        """Accept display labels as well as stored values."""
        if isinstance(v, str) and not isinstance(v, WatchStatus):
            return WatchStatus.parse(v)
        return v

    @model_validator(mode="after")
    def check_progress(self):
        if self.total_units and self.completed_units > self.total_units:
            raise ValueError(
                f"completed_units ({self.completed_units}) exceeds "
                f"total_units ({self.total_units})"
            )
        return self

    @property
    def progress(self) -> str:
        total = self.total_units or "?"
        return f"{self.completed_units}/{total}"


class EntryUpdate(BaseModel):
    """Partial set of entry fields for an edit. Unset fields stay as they are."""

    name: Optional[str] = None
    year: Optional[int] = None
    total_units: Optional[int] = None
    completed_units: Optional[int] = None
    status: Optional[WatchStatus] = None
    rating: Optional[float] = Field(default=None, allow_inf_nan=False)
    score: Optional[int] = None
    started: Optional[date] = None

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        if isinstance(v, str) and not isinstance(v, WatchStatus):
            return WatchStatus.parse(v)
        return v

    def apply_to(self, entry: Entry) -> Entry:
        """Return a new, validated entry with this update merged in."""
        changes = self.model_dump(exclude_unset=True)
        return Entry.model_validate({**entry.model_dump(), **changes})


class StoreFile(BaseModel):
    """On-disk layout of the record file."""

    anime: list[Entry] = Field(default_factory=list)
    manga: list[Entry] = Field(default_factory=list)

    def entries(self, kind: ListKind) -> list[Entry]:
        return self.anime if kind is ListKind.ANIME else self.manga

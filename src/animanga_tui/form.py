"""Line editor used to collect entry fields for edit and add."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from .models import Entry, EntryUpdate, WatchStatus

# (field name, label) in display order
FORM_FIELDS = [
    ("name", "Name"),
    ("year", "Year"),
    ("total_units", "Total"),
    ("completed_units", "Done"),
    ("status", "Status"),
    ("rating", "Rating"),
    ("score", "Score"),
    ("started", "Started"),
]

STATUS_FIELD = "status"
# Fields an edit can clear by leaving them blank
CLEARABLE_FIELDS = ("year",)
STATUS_CYCLE = list(WatchStatus)


class FormOutcome(str, Enum):
    PENDING = "pending"
    SUBMIT = "submit"
    CANCEL = "cancel"


@dataclass
class EditForm:
    """Text buffers for every entry field, edited one field at a time."""

    title: str
    values: dict[str, str]
    focus: int = 0
    error: Optional[str] = None
    creating: bool = False

    @classmethod
    def for_entry(cls, entry: Entry) -> "EditForm":
        """Form pre-filled with an existing entry."""
        values = {
            "name": entry.name,
            "year": "" if entry.year is None else str(entry.year),
            "total_units": str(entry.total_units),
            "completed_units": str(entry.completed_units),
            "status": entry.status.label,
            "rating": str(entry.rating),
            "score": str(entry.score),
            "started": entry.started.isoformat(),
        }
        return cls(title=f"Edit {entry.name}", values=values)

    @classmethod
    def blank(cls, today: Optional[date] = None) -> "EditForm":
        """Empty form for a new entry."""
        values = {name: "" for name, _ in FORM_FIELDS}
        values["status"] = WatchStatus.PLAN_TO_WATCH.label
        values["started"] = (today or date.today()).isoformat()
        return cls(title="New entry", values=values, creating=True)

    @property
    def focused_field(self) -> str:
        return FORM_FIELDS[self.focus][0]

    def handle_key(self, key: str) -> FormOutcome:
        """Apply one key press to the form."""
        name = self.focused_field
        if key == "esc":
            return FormOutcome.CANCEL
        if key == "enter":
            if self.focus == len(FORM_FIELDS) - 1:
                return FormOutcome.SUBMIT
            self.focus += 1
        elif key in ("tab", "down"):
            self.focus = (self.focus + 1) % len(FORM_FIELDS)
        elif key == "up":
            self.focus = (self.focus - 1) % len(FORM_FIELDS)
        elif key in ("left", "right") and name == STATUS_FIELD:
            self._cycle_status(1 if key == "right" else -1)
        elif key == "backspace":
            self.values[name] = self.values[name][:-1]
        elif len(key) == 1:
            self.values[name] += key
        return FormOutcome.PENDING

    def _cycle_status(self, step: int) -> None:
        try:
            current = STATUS_CYCLE.index(WatchStatus.parse(self.values[STATUS_FIELD]))
        except ValueError:
            current = -1 if step > 0 else 0
        self.values[STATUS_FIELD] = STATUS_CYCLE[(current + step) % len(STATUS_CYCLE)].label

    def _filled(self) -> dict[str, str]:
        return {name: value.strip() for name, value in self.values.items() if value.strip()}

    def to_update(self) -> EntryUpdate:
        """Fields typed into the form as an update.

        A blank clearable field (year) is set to None; other blank fields
        are left out and keep their current value.
        """
        values: dict[str, Optional[str]] = dict(self._filled())
        for name in CLEARABLE_FIELDS:
            values.setdefault(name, None)
        return EntryUpdate.model_validate(values)

    def to_entry(self) -> Entry:
        """Build a complete new entry from the form."""
        return Entry.model_validate(self._filled())

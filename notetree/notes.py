"""
Note types.

There are two kinds of note:

- ShortNote: a one-line task with an optional due date.
- LongNote: a detailed note with an optional description and its own
  collection of sub-notes, which may again be short or long.

Both share the same metadata (title, creation date, due date, state) and the
same interface: create() asks the user for a new note, render() builds the
label shown in menus and trees, update() runs the note's edit menu.
"""

import copy
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .colors import Colors, paint
from .tree import TreeItem

logger = logging.getLogger(__name__)

NOTE_TYPES = ["Shorthand note", "Detailed note"]


class NoteState(Enum):
    """Progress of a note. Any state may follow any other."""

    PENDING = "Pending"
    STARTED = "Started"
    FINISHED = "Finished"
    DEPRIORITISED = "Deprioritised"

    def render(self) -> str:
        return paint(self.value, _STATE_COLORS[self])


_STATE_COLORS = {
    NoteState.PENDING: Colors.YELLOW,
    NoteState.STARTED: Colors.BLUE,
    NoteState.FINISHED: Colors.GREEN,
    NoteState.DEPRIORITISED: Colors.WHITE,
}


def format_due_at(due_at: date, today: Optional[date] = None) -> str:
    """Due date text, painted red once the date has passed."""
    today = today or date.today()
    if due_at < today:
        return paint(due_at.isoformat(), Colors.RED)
    return due_at.isoformat()


@dataclass
class BaseNote(TreeItem):
    """Fields and behaviour shared by both kinds of note."""

    title: str
    created_at: date = field(default_factory=date.today)
    due_at: Optional[date] = None
    state: NoteState = NoteState.PENDING

    # (menu label, method name) pairs offered by update()
    UPDATE_CHOICES = [
        ("Change Title", "update_title"),
        ("Update or Set Due", "update_due"),
        ("Update State", "update_state"),
    ]

    def render(self, today: Optional[date] = None) -> str:
        """
        Build the note's label.

        Format is ``<state>: <title>: <created_at>`` followed by
        `` due: <due_at>`` when a due date is set.
        """
        text = f"{self.state.render()}: {self.title}: {self.created_at.isoformat()}"
        if self.due_at is not None:
            text += f" due: {format_due_at(self.due_at, today)}"
        return text

    def label(self) -> str:
        return self.render()

    def update(self, prompter) -> None:
        """
        Show the edit menu and apply the chosen change in place.

        Raises:
            Cancelled: If the user backs out; the note is left unchanged
        """
        labels = [label for label, _ in self.UPDATE_CHOICES]
        choice = prompter.select("Choose how to update", labels)
        _, method = self.UPDATE_CHOICES[choice]
        getattr(self, method)(prompter)

    def update_title(self, prompter) -> None:
        self.title = prompter.text("Enter new title:", default=self.title)

    def update_due(self, prompter) -> None:
        if prompter.confirm("Have due date?"):
            self.due_at = prompter.date("Choose due date:", default=self.due_at)
        else:
            self.due_at = None

    def update_state(self, prompter) -> None:
        states = list(NoteState)
        choice = prompter.select("Choose new state", [state.render() for state in states])
        self.state = states[choice]


@dataclass
class ShortNote(BaseNote):
    """A one-line note. Never has children."""

    @classmethod
    def create(cls, prompter) -> "ShortNote":
        """Ask for a title and an optional due date."""
        title = prompter.text("Enter note text:")
        due_at = None
        if prompter.confirm("With due date?"):
            due_at = prompter.date("Choose due date:")
        return cls(title=title, due_at=due_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "created_at": self.created_at.isoformat(),
            "due_at": _date_to_str(self.due_at),
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShortNote":
        return cls(
            title=data["title"],
            created_at=date.fromisoformat(data["created_at"]),
            due_at=_date_from_str(data.get("due_at")),
            state=NoteState(data["state"]),
        )


@dataclass
class LongNote(BaseNote):
    """
    A detailed note.

    ``sub_notes`` is None whenever the note has no sub-notes; it is never an
    empty list.
    """

    description: Optional[str] = None
    sub_notes: Optional[List["Note"]] = None

    UPDATE_CHOICES = [
        ("Change Title", "update_title"),
        ("View Description", "view_description"),
        ("Update or Set Description", "update_description"),
        ("Update or Set Due", "update_due"),
        ("Update State", "update_state"),
        ("View and Update sub Notes", "update_sub_notes"),
    ]

    @classmethod
    def create(cls, prompter) -> "LongNote":
        """Ask for a title, an optional description and an optional due date."""
        title = prompter.text("Enter note title:")
        description = None
        if prompter.confirm("Add description?"):
            description = prompter.editor("Enter description") or None
        due_at = None
        if prompter.confirm("Add due at?"):
            due_at = prompter.date("Select due at")
        return cls(title=title, description=description, due_at=due_at)

    def children(self) -> Sequence["Note"]:
        return self.sub_notes or []

    def view_description(self, prompter) -> None:
        print(self.render())
        if self.description is not None:
            print(self.description)

    def update_description(self, prompter) -> None:
        text = prompter.editor("Update description", text=self.description or "")
        self.description = text or None

    def update_sub_notes(self, prompter) -> None:
        """Run a nested view over a copy of the sub-notes, then store the result."""
        from .view import View

        view = View(self.title, copy.deepcopy(self.sub_notes) or [])
        print(f"Viewing sub notes of: {self.render()}")
        logger.debug("Entering sub note view of %r", self.title)
        view.run(prompter)
        self.sub_notes = view.notes or None
        print(f"Exiting sub note view of: {self.render()}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
            "due_at": _date_to_str(self.due_at),
            "sub_notes": [note_to_dict(n) for n in self.sub_notes] if self.sub_notes else None,
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LongNote":
        sub_notes = data.get("sub_notes")
        return cls(
            title=data["title"],
            description=data.get("description"),
            created_at=date.fromisoformat(data["created_at"]),
            due_at=_date_from_str(data.get("due_at")),
            state=NoteState(data["state"]),
            sub_notes=[note_from_dict(n) for n in sub_notes] if sub_notes else None,
        )


Note = Union[ShortNote, LongNote]

# Tag used for each note kind in the notes file
NOTE_TAGS: List[Tuple[str, type]] = [("Short", ShortNote), ("Long", LongNote)]

_CREATORS: List[Callable[[Any], Note]] = [ShortNote.create, LongNote.create]


def create_note(prompter) -> Note:
    """
    Ask which kind of note to make, then run its prompt sequence.

    Raises:
        Cancelled: At any step; nothing is created
    """
    choice = prompter.select("Choose note type:", NOTE_TYPES)
    return _CREATORS[choice](prompter)


def note_to_dict(note: Note) -> Dict[str, Any]:
    """Serialize a note as ``{"Short": {...}}`` or ``{"Long": {...}}``."""
    for tag, cls in NOTE_TAGS:
        if isinstance(note, cls):
            return {tag: note.to_dict()}
    raise TypeError(f"Not a note: {note!r}")


def note_from_dict(data: Dict[str, Any]) -> Note:
    """
    Rebuild a note from its tagged dictionary.

    Raises:
        ValueError: If the tag is unknown or the payload is malformed
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"Expected a single tagged note, got {data!r}")
    (tag, payload), = data.items()
    for known_tag, cls in NOTE_TAGS:
        if tag == known_tag:
            return cls.from_dict(payload)
    raise ValueError(f"Unknown note type: {tag!r}")


def _date_to_str(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _date_from_str(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None

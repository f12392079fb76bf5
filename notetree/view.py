"""
The menu loop.

A View owns an ordered list of notes and the screen currently shown. run()
keeps moving between screens until the user exits or backs out of the main
menu:

    Main -> Add | View | Tree | Remove | Exit
    View -> Update(index) -> Main
    Add, Remove, Tree -> Main

Backing out of any prompt (Escape, Ctrl-C) is never an error: the current
screen is abandoned and the menu is shown again. Other errors propagate out of
run() untouched.

Editing a long note's sub-notes runs a second View over a copy of them, so the
same loop serves every level of the tree.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .colors import Colors
from .errors import Cancelled
from .notes import Note, create_note, note_from_dict, note_to_dict
from .tree import TreeItem, print_tree

logger = logging.getLogger(__name__)


class ViewState(Enum):
    MAIN = "Main"
    ADD = "Add"
    VIEW = "View"
    TREE = "Tree"
    REMOVE = "Remove"
    EXIT = "Exit"


@dataclass(frozen=True)
class Update:
    """Screen for editing the note at ``index``."""

    index: int


State = Union[ViewState, Update]

MENU_LABELS = {
    ViewState.ADD: "Add note",
    ViewState.REMOVE: "Delete note",
    ViewState.VIEW: "View notes",
    ViewState.TREE: "View note tree",
    ViewState.EXIT: "Exit",
}


class View(TreeItem):
    """A named collection of notes together with its menu state."""

    def __init__(self, name: str, notes: Optional[List[Note]] = None,
                 state: State = ViewState.MAIN, store=None):
        """
        Args:
            name: Label of the collection, shown as the root of the tree
            notes: Initial notes, the view takes ownership of the list
            state: Screen to start on
            store: NoteStore used on Exit; sub-note views have none
        """
        self.name = name
        self.notes: List[Note] = notes if notes is not None else []
        self.state: State = state
        self.store = store
        self._renderers = {
            ViewState.ADD: self._render_add_note,
            ViewState.VIEW: self._render_view_notes,
            ViewState.TREE: self._render_tree,
            ViewState.REMOVE: self._render_remove_note,
        }

    def label(self) -> str:
        return self.name

    def children(self) -> List[Note]:
        return self.notes

    def menu_options(self) -> List[ViewState]:
        """Actions offered on the main menu."""
        options: List[ViewState] = []
        # don't show the option to view notes if we don't have any
        if self.notes:
            options.extend([ViewState.VIEW, ViewState.TREE])
        options.extend([ViewState.ADD, ViewState.REMOVE, ViewState.EXIT])
        return options

    def run(self, prompter) -> None:
        """
        Drive the menu until Exit, or until the main menu prompt is dismissed.

        Raises:
            NoteTreeError: If a prompt or the store fails
        """
        while self.state is not ViewState.EXIT:
            logger.debug("View %r: %s", self.name, self.state)
            if self.state is ViewState.MAIN:
                try:
                    self.state = self._choose_action(prompter)
                except Cancelled:
                    logger.debug("Main menu of %r dismissed", self.name)
                    return
            elif isinstance(self.state, Update):
                self._render_update_note(prompter, self.state.index)
            else:
                self._renderers[self.state](prompter)
        self._render_exit()

    def _choose_action(self, prompter) -> ViewState:
        options = self.menu_options()
        choice = prompter.select("Choose action", [MENU_LABELS[o] for o in options])
        return options[choice]

    def _to_menu(self) -> None:
        self.state = ViewState.MAIN

    def _render_add_note(self, prompter) -> None:
        try:
            note = create_note(prompter)
        except Cancelled:
            logger.debug("Note creation cancelled")
        else:
            self.notes.append(note)
            logger.info("Added note %r to %r", note.title, self.name)
        self._to_menu()

    def _render_view_notes(self, prompter) -> None:
        labels = [note.render() for note in self.notes]
        try:
            index = prompter.select("Select Note to update or press esc to return", labels)
        except Cancelled:
            self._to_menu()
        else:
            self.state = Update(index)

    def _render_remove_note(self, prompter) -> None:
        labels = [note.render() for note in self.notes]
        try:
            index = prompter.select("Select Note to remove or press esc to return", labels)
        except Cancelled:
            logger.debug("Removal cancelled")
        else:
            removed = self.notes.pop(index)
            logger.info("Removed note %r from %r", removed.title, self.name)
        self._to_menu()

    def _render_update_note(self, prompter, index: int) -> None:
        if not 0 <= index < len(self.notes):
            logger.warning("Ignoring update of missing note %d in %r", index, self.name)
            print(f"{Colors.YELLOW}That note no longer exists.{Colors.END}")
        else:
            try:
                self.notes[index].update(prompter)
            except Cancelled:
                logger.debug("Update of note %d cancelled", index)
        self._to_menu()

    def _render_tree(self, prompter) -> None:
        print_tree(self)
        self._to_menu()

    def _render_exit(self) -> None:
        if self.store is not None:
            self.store.save(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "notes": [note_to_dict(note) for note in self.notes],
            "state": state_to_json(self.state),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], store=None) -> "View":
        """
        Rebuild a view from its dictionary.

        The stored state is validated but never resumed: a loaded view always
        starts on the main menu.

        Raises:
            ValueError: If the data is malformed
        """
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object for the notes view")
        notes = data.get("notes")
        if not isinstance(notes, list):
            raise ValueError("Expected 'notes' to be a list")
        if "state" in data:
            state_from_json(data["state"])
        return cls(
            name=str(data["name"]),
            notes=[note_from_dict(n) for n in notes],
            state=ViewState.MAIN,
            store=store,
        )


def state_to_json(state: State) -> Any:
    """``"Main"`` style names, or ``{"Update": index}``."""
    if isinstance(state, Update):
        return {"Update": state.index}
    return state.value


def state_from_json(value: Any) -> State:
    if isinstance(value, dict) and set(value) == {"Update"}:
        return Update(int(value["Update"]))
    return ViewState(value)

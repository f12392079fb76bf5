"""
Interactive prompts built on prompt_toolkit.

Every prompt either returns a value or raises one of the two cancellation
signals from notetree.errors:

    Escape / Ctrl-D   -> OperationCanceled
    Ctrl-C            -> OperationInterrupted

Anything else that goes wrong while talking to the terminal is raised as
PromptError.
"""

import logging
import os
import subprocess
import tempfile
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Third-party imports
from prompt_toolkit import Application, PromptSession
from prompt_toolkit.formatted_text import ANSI, FormattedText, to_formatted_text
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout.containers import HSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import Validator

from .colors import Colors
from .config import Config, DEFAULT_CONFIG, get_editor, validate_editor
from .errors import Cancelled, OperationCanceled, OperationInterrupted, PromptError

logger = logging.getLogger(__name__)

DATE_HINT = "YYYY-MM-DD, 'today' or 'tomorrow'"


def parse_date(text: str, today: Optional[date] = None) -> date:
    """
    Parse a date typed by the user.

    Args:
        text: ISO date, or one of the words 'today' / 'tomorrow'
        today: Reference day for the relative words

    Returns:
        The parsed date

    Raises:
        ValueError: If the text is not a valid date
    """
    today = today or date.today()
    value = text.strip().lower()
    if value == "today":
        return today
    if value == "tomorrow":
        return today + timedelta(days=1)
    return date.fromisoformat(value)


def _is_date(text: str) -> bool:
    try:
        parse_date(text)
    except ValueError:
        return False
    return True


def _cancel_bindings(escape: bool = True) -> KeyBindings:
    """Key bindings that turn Escape and Ctrl-C into cancellation signals."""
    kb = KeyBindings()

    if escape:
        @kb.add("escape", eager=True)
        def cancel(event):
            """Dismiss the prompt."""
            event.app.exit(exception=OperationCanceled())

    @kb.add("c-c", eager=True)
    def interrupt(event):
        """Interrupt the prompt."""
        event.app.exit(exception=OperationInterrupted())

    return kb


class Prompter:
    """Ask-the-user primitives used by the notes and views."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config if config is not None else dict(DEFAULT_CONFIG)

    def _run(self, ask) -> Any:
        """Run a prompt and normalize its failure modes."""
        try:
            return ask()
        except Cancelled:
            raise
        except KeyboardInterrupt:
            raise OperationInterrupted()
        except EOFError:
            raise OperationCanceled()
        except (OSError, RuntimeError) as e:
            logger.exception("Prompt failed")
            raise PromptError(f"Prompt failed: {e}") from e

    def text(self, message: str, default: str = "") -> str:
        """Ask for a single line of text."""
        session = PromptSession(key_bindings=_cancel_bindings())
        return self._run(lambda: session.prompt(f"{message} ", default=default))

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; answers on a single key press."""
        return self._keypress(message, " (y/n) ", {"y": True, "Y": True, "n": False, "N": False})

    def date(self, message: str, default: Optional[date] = None) -> date:
        """Ask for a date, pre-filled with ``default`` (today if omitted)."""
        default = default or date.today()
        validator = Validator.from_callable(
            _is_date,
            error_message=f"Enter a date: {DATE_HINT}",
            move_cursor_to_end=True,
        )
        session = PromptSession(key_bindings=_cancel_bindings(), validator=validator)
        answer = self._run(lambda: session.prompt(f"{message} ", default=default.isoformat()))
        return parse_date(answer)

    def select(self, message: str, options: Sequence[str]) -> int:
        """
        Let the user pick one entry from a list.

        Args:
            message: Question shown above the list
            options: Labels to choose from, may contain ANSI colors

        Returns:
            Index of the chosen label in options
        """
        if not options:
            print(f"{Colors.YELLOW}Nothing to choose from.{Colors.END}")
            raise OperationCanceled()
        return self._run(lambda: SelectList(message, options).run())

    def editor(self, message: str, text: str = "") -> str:
        """
        Ask for multi-line text, starting from ``text``.

        Uses the configured external editor when it is allowed, otherwise an
        inline multi-line prompt.
        """
        if self.config.get("external_editor", True):
            editor = get_editor(self.config)
            if validate_editor(editor):
                self._keypress(message, " (enter to open editor, esc to cancel) ", {"enter": True})
                return self._external_edit(editor, text)
            print(f"{Colors.RED}Security Error: Editor '{editor}' is not in the allowed list.{Colors.END}")
            print(f"{Colors.YELLOW}Falling back to the inline editor.{Colors.END}")

        session = PromptSession(key_bindings=_cancel_bindings(escape=False))
        return self._run(lambda: session.prompt(
            f"{message}\n",
            default=text,
            multiline=True,
            bottom_toolbar=" Esc+Enter: save   Ctrl-C: cancel ",
        ))

    def _keypress(self, message: str, suffix: str, answers: Dict[str, Any]) -> Any:
        """Wait for one of the keys in ``answers`` and return its value."""
        kb = _cancel_bindings()

        for key, value in answers.items():
            def answer(event, value=value):
                event.app.exit(result=value)
            kb.add(key)(answer)

        @kb.add("<any>")
        def _ignore(event):
            """Disallow inserting other text."""

        if "enter" not in answers:
            # the session would otherwise accept the empty line
            kb.add("enter", eager=True)(_ignore)

        session = PromptSession(key_bindings=kb)
        return self._run(lambda: session.prompt(f"{message}{suffix}"))

    def _external_edit(self, editor: str, text: str) -> str:
        fd, tmp_name = tempfile.mkstemp(suffix=".md", prefix="notetree-")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            subprocess.run([editor, str(tmp_path)], check=True)
            return tmp_path.read_text(encoding="utf-8").rstrip("\n")
        except FileNotFoundError as e:
            raise PromptError(
                f"Editor '{editor}' not found. Please check your $EDITOR environment variable."
            ) from e
        except subprocess.CalledProcessError as e:
            raise PromptError(f"Error running {editor}: {e}") from e
        finally:
            tmp_path.unlink(missing_ok=True)


class SelectList:
    """A single-choice list: arrow keys to move, enter to pick."""

    def __init__(self, message: str, options: Sequence[str]):
        self.message = message
        self.options: List[str] = list(options)
        self.selected_index = 0
        self.kb = KeyBindings()
        self._setup_key_bindings()

    def _setup_key_bindings(self) -> None:
        """Set up all key bindings for the list."""

        @self.kb.add("c-c", eager=True)
        @self.kb.add("c-q", eager=True)
        def interrupt(event):
            """Interrupt the prompt."""
            event.app.exit(exception=OperationInterrupted())

        @self.kb.add("escape", eager=True)
        def cancel(event):
            """Dismiss the list without choosing."""
            event.app.exit(exception=OperationCanceled())

        @self.kb.add("down")
        def move_down(event):
            """Move selection down."""
            self.selected_index = (self.selected_index + 1) % len(self.options)

        @self.kb.add("up")
        def move_up(event):
            """Move selection up."""
            self.selected_index = (self.selected_index - 1 + len(self.options)) % len(self.options)

        @self.kb.add("enter", eager=True)
        def choose(event):
            """Pick the highlighted entry."""
            event.app.exit(result=self.selected_index)

    def _get_options_text(self) -> FormattedText:
        """
        Create formatted text for the options list.

        Returns:
            List of (style, text) tuples for display
        """
        result: List[Tuple[str, str]] = []
        for i, option in enumerate(self.options):
            is_selected = i == self.selected_index
            marker = "> " if is_selected else "  "
            style = "class:selected" if is_selected else ""
            result.append((style, marker))
            result.extend(to_formatted_text(ANSI(option), style=style))
            result.append(("", "\n"))
        return FormattedText(result)

    def _create_layout(self) -> Layout:
        """Create the list layout."""
        return Layout(HSplit([
            Window(FormattedTextControl([("class:question", f"? {self.message}")]), height=1),
            Window(FormattedTextControl(self._get_options_text, focusable=True)),
            Window(FormattedTextControl("[↑/↓ to move, enter to select, esc to cancel]"),
                   height=1, style="class:help"),
        ]))

    def _create_style(self) -> Style:
        """Create the list styling."""
        return Style.from_dict({
            'question': 'bold',
            'selected': 'bg:#0055aa #ffffff bold',
            'help': 'fg:#888888 italic',
        })

    def run(self) -> int:
        """Show the list and block until an entry is chosen."""
        app = Application(
            layout=self._create_layout(),
            key_bindings=self.kb,
            full_screen=False,
            style=self._create_style(),
        )
        return app.run()

"""
Note Tree - a terminal note manager.

Usage:
    notetree
    python -m notetree

Configuration:
    - Config file: ~/.notetree_config.json (or $NOTETREE_CONFIG)
    - Notes file: ./notes_view.json unless "notes_file" is configured
    - Editor: "editor" config key, else $EDITOR (defaults to vim)
"""

import logging
import os

from .colors import Colors
from .config import get_config_path, get_notes_path, load_config, save_config, setup_logging
from .errors import Cancelled, NoteTreeError
from .prompts import Prompter
from .storage import NoteStore
from .view import View, ViewState

logger = logging.getLogger(__name__)

DEFAULT_VIEW_NAME = "Notes"


def clear_screen() -> None:
    """Clear the terminal screen."""
    os.system('cls' if os.name == 'nt' else 'clear')


def show_info() -> None:
    """Display the welcome banner shown when a new notes file is started."""
    info_text = f"""
{Colors.CYAN}╔══════════════════════════════════════════════════════════════╗{Colors.END}
{Colors.CYAN}║                    {Colors.BOLD}Welcome to Note Tree{Colors.END}{Colors.CYAN}                      ║{Colors.END}
{Colors.CYAN}╚══════════════════════════════════════════════════════════════╝{Colors.END}

{Colors.YELLOW}MAIN MENU:{Colors.END}
  {Colors.CYAN}Add note{Colors.END}          Create a shorthand or detailed note
  {Colors.CYAN}View notes{Colors.END}        Pick a note to edit its title, due date or state
  {Colors.CYAN}View note tree{Colors.END}    Show every note and sub-note as a tree
  {Colors.CYAN}Delete note{Colors.END}       Remove a note and its sub-notes
  {Colors.CYAN}Exit{Colors.END}              Save and quit

{Colors.YELLOW}KEYS:{Colors.END}
  {Colors.CYAN}↑/↓ Arrow Keys{Colors.END}    Move through a list
  {Colors.CYAN}Enter{Colors.END}             Choose
  {Colors.CYAN}Esc / Ctrl-C{Colors.END}      Back out to the menu

{Colors.YELLOW}TIPS:{Colors.END}
  {Colors.GREEN}•{Colors.END} Detailed notes can hold their own sub-notes, as deep as you like
  {Colors.GREEN}•{Colors.END} Overdue dates are shown in {Colors.RED}red{Colors.END}
"""
    print(info_text)


def load_or_create(store: NoteStore, prompter: Prompter) -> View:
    """
    Load the saved view, or ask for a name and start an empty one.

    Raises:
        Cancelled: If the name prompt is dismissed
        StorageError: If the notes file exists but can't be loaded
    """
    view = store.load()
    if view is not None:
        return view

    clear_screen()
    show_info()
    name = prompter.text("Enter name for notes:").strip() or DEFAULT_VIEW_NAME
    logger.info("Starting new notes file %s named %r", store.path, name)
    return View(name, store=store)


def run_view(view: View, prompter: Prompter) -> int:
    """
    Run the menu loop, then save whatever state the notes are in.

    Returns:
        Process exit status
    """
    status = 0
    try:
        view.run(prompter)
    except NoteTreeError as e:
        logger.exception("Render loop failed")
        print(f"\n{Colors.RED}Encountered error: {e}{Colors.END}")
        status = 1
    except KeyboardInterrupt:
        print("\n\nGoodbye! 👋")

    if view.state is ViewState.EXIT and status == 0:
        # already saved on the way out
        return status
    try:
        view.store.save(view)
    except NoteTreeError as e:
        logger.exception("Final save failed")
        print(f"{Colors.RED}Failed to save notes: {e}{Colors.END}")
        status = 1
    return status


def main() -> int:
    """Main entry point for the Note Tree application."""
    config_path = get_config_path()
    config = load_config(config_path)
    if not config_path.exists():
        # first run: leave a config file the user can edit
        save_config(config, config_path)
    setup_logging(config["log_level"], config["log_file"])
    prompter = Prompter(config)
    store = NoteStore(get_notes_path(config))

    try:
        view = load_or_create(store, prompter)
    except Cancelled:
        print("\n\nGoodbye! 👋")
        return 0
    except NoteTreeError as e:
        logger.exception("Could not open notes")
        print(f"\n{Colors.RED}An error occurred: {e}{Colors.END}")
        print("Please check your configuration and try again.")
        return 1

    return run_view(view, prompter)

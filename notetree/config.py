"""
Configuration for Note Tree.

Settings live in a small JSON file (``~/.notetree_config.json`` unless
``$NOTETREE_CONFIG`` points elsewhere). Every key is optional; missing keys
fall back to DEFAULT_CONFIG.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .colors import Colors

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
CONFIG_ENV_VAR = "NOTETREE_CONFIG"
DEFAULT_CONFIG_FILE = Path.home() / ".notetree_config.json"
DEFAULT_EDITOR = "vim"
DEFAULT_CONFIG: Dict[str, Any] = {
    "notes_file": "./notes_view.json",
    "editor": None,
    "external_editor": True,
    "log_file": str(Path.home() / ".notetree.log"),
    "log_level": "WARNING",
}

# Whitelist of safe editors
ALLOWED_EDITORS = [
    'vim', 'nvim', 'nano', 'code', 'subl', 'atom',
    'notepad', 'notepad++', 'gedit', 'kate', 'mousepad'
]

Config = Dict[str, Any]


def get_config_path() -> Path:
    """Return the config file location, honouring $NOTETREE_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load configuration from JSON file.

    Args:
        path: Config file to read, defaults to get_config_path()

    Returns:
        Dict with every key of DEFAULT_CONFIG. Returns the defaults if the
        file doesn't exist or is invalid.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Ignoring unreadable config %s: %s", config_path, e)
            return config
        if isinstance(loaded, dict):
            config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
        else:
            logger.warning("Ignoring config %s: expected a JSON object", config_path)
    return config


def save_config(config: Config, path: Optional[Path] = None) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: Configuration dictionary to save
        path: Destination, defaults to get_config_path()
    """
    config_path = path or get_config_path()
    try:
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=4)
    except IOError as e:
        print(f"{Colors.RED}Error saving config: {e}{Colors.END}")


def get_notes_path(config: Config) -> Path:
    """Location of the notes file."""
    return Path(config["notes_file"]).expanduser()


def get_editor(config: Config) -> str:
    """
    Get the preferred text editor.

    Returns:
        The configured editor, else $EDITOR, else DEFAULT_EDITOR
    """
    return config.get("editor") or os.environ.get("EDITOR", DEFAULT_EDITOR)


def validate_editor(editor: str) -> bool:
    """
    Validate editor command is safe.

    Args:
        editor: The editor command to validate

    Returns:
        True if the editor is allowed, False otherwise
    """
    return editor.lower() in ALLOWED_EDITORS


def setup_logging(log_level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Log records go to a file only; the terminal is reserved for prompts.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: Log file path, logging is disabled when None
    """
    if not log_file:
        logging.getLogger().addHandler(logging.NullHandler())
        return

    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(log_path, encoding="utf-8")],
    )

"""
Reading and writing the notes file.

The whole root view is stored as one JSON document:

    {
        "name": "Work",
        "notes": [
            {"Short": {"title": ..., "created_at": "2024-05-01", "due_at": null, "state": "Pending"}},
            {"Long": {"title": ..., "description": ..., "sub_notes": [...], ...}}
        ],
        "state": "Main"
    }
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .errors import StorageError
from .view import View

logger = logging.getLogger(__name__)


def _replace_file(path: Path, data: bytes) -> None:
    """Write data beside path, fsync it, then swap it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp-{os.getpid()}")
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


class NoteStore:
    """Loads and saves the root view at a fixed path."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[View]:
        """
        Read the stored view.

        Returns:
            The view, bound to this store and reset to the main menu, or None
            if nothing has been saved yet

        Raises:
            StorageError: If the file can't be read or parsed
        """
        if not self.exists():
            logger.info("No notes file at %s", self.path)
            return None
        try:
            data = json.loads(self.path.read_bytes())
            view = View.from_dict(data, store=self)
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            raise StorageError(f"Malformed notes file {self.path}: {e}") from e
        logger.info("Loaded %d notes from %s", len(view.notes), self.path)
        return view

    def save(self, view: View) -> None:
        """
        Write the view, replacing the previous file atomically.

        Raises:
            StorageError: If the file can't be written
        """
        data = json.dumps(view.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")
        try:
            _replace_file(self.path, data)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        logger.info("Saved %d notes to %s", len(view.notes), self.path)

"""Exceptions raised by the prompt and persistence gateways."""


class Cancelled(Exception):
    """The user aborted a prompt. Not an error: callers return to the menu."""


class OperationCanceled(Cancelled):
    """Raised when a prompt is dismissed with Escape or Ctrl-D."""


class OperationInterrupted(Cancelled):
    """Raised when a prompt is interrupted with Ctrl-C."""


class NoteTreeError(Exception):
    """Base class for failures that abort the render loop."""


class PromptError(NoteTreeError):
    """The terminal prompt could not be shown or read."""


class StorageError(NoteTreeError):
    """The notes file could not be read, parsed or written."""

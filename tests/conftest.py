"""Shared fixtures: a prompter that replays a scripted conversation."""

import pytest

from notetree.colors import strip_ansi


class ScriptedPrompter:
    """
    Stands in for notetree.prompts.Prompter.

    Each prompt consumes the next scripted answer. An exception (class or
    instance) in the script is raised instead of answering. For select(), the
    answer may be an index or a label; labels match the option with ANSI codes
    stripped, exactly or by prefix.
    """

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = []

    def _next(self, kind, message):
        self.calls.append((kind, message))
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException) or (
            isinstance(answer, type) and issubclass(answer, BaseException)
        ):
            raise answer
        return answer

    def text(self, message, default=""):
        return self._next("text", message)

    def confirm(self, message):
        return self._next("confirm", message)

    def date(self, message, default=None):
        return self._next("date", message)

    def editor(self, message, text=""):
        return self._next("editor", message)

    def select(self, message, options):
        answer = self._next("select", message)
        if isinstance(answer, int):
            return answer
        plain = [strip_ansi(option) for option in options]
        if answer in plain:
            return plain.index(answer)
        for i, option in enumerate(plain):
            if option.startswith(answer):
                return i
        raise AssertionError(f"{answer!r} not offered by {message!r}: {plain}")

    @property
    def finished(self):
        return not self.answers


@pytest.fixture
def scripted():
    """Factory for ScriptedPrompter."""
    return ScriptedPrompter

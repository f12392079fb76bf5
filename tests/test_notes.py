from datetime import date, timedelta

import pytest

from notetree.colors import Colors, strip_ansi
from notetree.errors import OperationCanceled, OperationInterrupted
from notetree.notes import (
    LongNote,
    NoteState,
    ShortNote,
    create_note,
    note_from_dict,
    note_to_dict,
)

TODAY = date.today()
YESTERDAY = TODAY - timedelta(days=1)
TOMORROW = TODAY + timedelta(days=1)


def test_render_without_due_date():
    note = ShortNote("buy milk", created_at=date(2024, 3, 1))
    assert strip_ansi(note.render()) == "Pending: buy milk: 2024-03-01"


def test_render_with_due_date():
    note = LongNote("report", created_at=date(2024, 3, 1), due_at=date(2024, 3, 9),
                    state=NoteState.FINISHED)
    assert strip_ansi(note.render(today=date(2024, 3, 2))) == "Finished: report: 2024-03-01 due: 2024-03-09"


def test_overdue_date_is_flagged():
    note = ShortNote("late", due_at=YESTERDAY)
    assert f"{Colors.RED}{YESTERDAY.isoformat()}" in note.render()


def test_future_date_is_not_flagged():
    note = ShortNote("soon", due_at=TOMORROW)
    assert Colors.RED not in note.render()


def test_due_today_is_not_flagged():
    note = ShortNote("now", due_at=TODAY)
    assert Colors.RED not in note.render()


def test_states_have_distinct_colors():
    rendered = {state.render() for state in NoteState}
    assert len(rendered) == len(NoteState)


def test_short_note_has_no_children():
    assert ShortNote("x").children() == []


def test_long_note_children():
    child = ShortNote("child")
    assert LongNote("parent").children() == []
    assert LongNote("parent", sub_notes=[child]).children() == [child]


class TestCreate:
    def test_short_without_due(self, scripted):
        prompter = scripted("Shorthand note", "buy milk", False)
        note = create_note(prompter)
        assert note == ShortNote("buy milk", created_at=TODAY)
        assert note.state is NoteState.PENDING
        assert prompter.finished

    def test_short_with_due(self, scripted):
        note = create_note(scripted("Shorthand note", "pay rent", True, TOMORROW))
        assert note.due_at == TOMORROW

    def test_long_with_everything(self, scripted):
        note = create_note(scripted("Detailed note", "trip", True, "pack bags", True, TOMORROW))
        assert isinstance(note, LongNote)
        assert note.title == "trip"
        assert note.description == "pack bags"
        assert note.due_at == TOMORROW
        assert note.sub_notes is None

    def test_long_with_empty_description(self, scripted):
        note = create_note(scripted("Detailed note", "trip", True, "", False))
        assert note.description is None

    @pytest.mark.parametrize("answers", [
        (OperationCanceled,),
        ("Shorthand note", OperationCanceled),
        ("Shorthand note", "title", OperationInterrupted),
        ("Shorthand note", "title", True, OperationCanceled),
        ("Detailed note", "title", True, OperationInterrupted),
        ("Detailed note", "title", False, True, OperationCanceled),
    ])
    def test_cancelling_any_step_creates_nothing(self, scripted, answers):
        with pytest.raises((OperationCanceled, OperationInterrupted)):
            create_note(scripted(*answers))


class TestUpdate:
    def test_change_title(self, scripted):
        note = ShortNote("old")
        note.update(scripted("Change Title", "new"))
        assert note.title == "new"

    def test_change_state(self, scripted):
        note = ShortNote("x")
        note.update(scripted("Update State", "Deprioritised"))
        assert note.state is NoteState.DEPRIORITISED

    def test_set_and_clear_due(self, scripted):
        note = ShortNote("x")
        note.update(scripted("Update or Set Due", True, TOMORROW))
        assert note.due_at == TOMORROW
        note.update(scripted("Update or Set Due", False))
        assert note.due_at is None

    def test_cancelled_update_leaves_note_unchanged(self, scripted):
        note = ShortNote("x", due_at=TOMORROW)
        with pytest.raises(OperationCanceled):
            note.update(scripted("Update or Set Due", True, OperationCanceled))
        assert note.due_at == TOMORROW

    def test_short_note_menu(self, scripted):
        with pytest.raises(AssertionError, match="not offered"):
            ShortNote("x").update(scripted("View Description"))

    def test_description_edit(self, scripted):
        note = LongNote("x", description="before")
        note.update(scripted("Update or Set Description", "after"))
        assert note.description == "after"

    def test_empty_description_is_stored_as_none(self, scripted):
        note = LongNote("x", description="before")
        note.update(scripted("Update or Set Description", ""))
        assert note.description is None

    def test_view_description(self, scripted, capsys):
        note = LongNote("x", created_at=date(2024, 1, 2), description="line one\nline two")
        note.update(scripted("View Description"))
        out = strip_ansi(capsys.readouterr().out)
        assert out == "Pending: x: 2024-01-02\nline one\nline two\n"


class TestSubNotes:
    def test_added_then_removed_sub_note_leaves_none(self, scripted):
        note = LongNote("project")
        prompter = scripted(
            "View and Update sub Notes",
            "Add note", "Shorthand note", "step", False,
            "Delete note", "Pending: step",
            "Exit",
        )
        note.update(prompter)
        assert note.sub_notes is None
        assert prompter.finished

    def test_added_sub_note_is_kept(self, scripted, capsys):
        note = LongNote("project")
        note.update(scripted(
            "View and Update sub Notes",
            "Add note", "Detailed note", "phase 1", False, False,
            "Exit",
        ))
        assert note.sub_notes == [LongNote("phase 1", created_at=TODAY)]
        out = strip_ansi(capsys.readouterr().out)
        assert "Viewing sub notes of: Pending: project" in out
        assert "Exiting sub note view of: Pending: project" in out

    def test_sub_notes_nest(self, scripted):
        inner = LongNote("inner")
        outer = LongNote("outer", sub_notes=[inner])
        outer.update(scripted(
            "View and Update sub Notes",
            "View notes", "Pending: inner", "View and Update sub Notes",
            "Add note", "Shorthand note", "leaf", False,
            "Exit",
            "Exit",
        ))
        assert outer.sub_notes[0].sub_notes == [ShortNote("leaf", created_at=TODAY)]
        # the original object was copied, not edited in place
        assert inner.sub_notes is None

    def test_dismissing_sub_view_menu_keeps_changes(self, scripted):
        note = LongNote("project")
        note.update(scripted(
            "View and Update sub Notes",
            "Add note", "Shorthand note", "step", False,
            OperationCanceled,
        ))
        assert [n.title for n in note.sub_notes] == ["step"]


class TestSerialization:
    def test_tagged_layout(self):
        data = note_to_dict(ShortNote("x", created_at=date(2024, 1, 2)))
        assert data == {"Short": {"title": "x", "created_at": "2024-01-02", "due_at": None, "state": "Pending"}}

    def test_long_note_with_children(self):
        note = LongNote(
            "parent",
            description="text",
            due_at=date(2024, 5, 1),
            state=NoteState.STARTED,
            sub_notes=[ShortNote("a"), LongNote("b", sub_notes=[ShortNote("c")])],
        )
        assert note_from_dict(note_to_dict(note)) == note

    @pytest.mark.parametrize("data", [
        {"Medium": {"title": "x"}},
        {"Short": {}, "Long": {}},
        ["Short"],
    ])
    def test_malformed(self, data):
        with pytest.raises((ValueError, KeyError, TypeError)):
            note_from_dict(data)

"""Tests for ui.components.notes — the "My Notes" page.

The page runs under Streamlit's ``AppTest`` harness with every ``ui.api``
call patched, so each test can script the API's answers and check which
requests the page sends.
"""

from __future__ import annotations

from unittest.mock import DEFAULT, patch

import pytest
import requests
from streamlit.testing.v1 import AppTest

from ui.components import notes

APP_PATH = "../ui/app.py"

NOTE = {
    "id": 1,
    "title": "Shopping",
    "content": "Buy milk and eggs",
    "date": "05/01/24",
    "created_at": "2024-05-01T12:00:00+00:00",
}


@pytest.fixture()
def api_calls():
    with patch.multiple(
        "ui.api",
        list_notes=DEFAULT,
        create_note=DEFAULT,
        update_note=DEFAULT,
        delete_note=DEFAULT,
        summarize=DEFAULT,
        get_health=DEFAULT,
    ) as mocks:
        mocks["list_notes"].return_value = [dict(NOTE)]
        mocks["get_health"].return_value = {"status": "healthy", "backend": "memory"}
        yield mocks


@pytest.fixture()
def at(api_calls) -> AppTest:
    app = AppTest.from_file(APP_PATH, default_timeout=10)
    app.run()
    assert not app.exception
    return app


def _button(at: AppTest, label: str):
    return next(b for b in at.button if b.label == label)


def _markdown(at: AppTest) -> list[str]:
    return [m.value for m in at.markdown]


def _fill(at: AppTest, title: str, content: str) -> None:
    at.text_input(key="title_input").input(title)
    at.text_area(key="content_input").input(content)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_first_run_fetches_listing(self, at: AppTest, api_calls):
        api_calls["list_notes"].assert_called_once_with()
        assert at.session_state["notes"] == [NOTE]
        assert "**1 notes**" in _markdown(at)
        assert not at.error

    def test_empty_listing_shows_hint(self, api_calls):
        api_calls["list_notes"].return_value = []
        at = AppTest.from_file(APP_PATH, default_timeout=10)
        at.run()

        assert "**0 notes**" in _markdown(at)
        assert at.info[0].value == "No notes yet. Add one above."

    def test_refresh_failure_keeps_previous_listing(self, at: AppTest, api_calls):
        api_calls["list_notes"].side_effect = requests.ConnectionError("refused")

        _button(at, "Refresh").click()
        at.run()

        assert api_calls["list_notes"].call_count == 2
        assert at.session_state["notes"] == [NOTE]
        assert "**1 notes**" in _markdown(at)
        assert "Cannot reach the notes API" in at.error[0].value


# ---------------------------------------------------------------------------
# Editor
# ---------------------------------------------------------------------------


class TestSubmit:
    @pytest.mark.parametrize(
        ("title", "content"),
        [("", "body"), ("   ", "body"), ("Title", ""), ("Title", "\n\t ")],
    )
    def test_blank_fields_send_nothing(self, at: AppTest, api_calls, title, content):
        _fill(at, title, content)
        _button(at, "Add Note").click()
        at.run()

        api_calls["create_note"].assert_not_called()
        assert api_calls["list_notes"].call_count == 1

    def test_create_then_refetch(self, at: AppTest, api_calls):
        created = {**NOTE, "id": 2, "title": "Ideas", "content": "Build an app"}
        api_calls["list_notes"].return_value = [created, dict(NOTE)]

        _fill(at, "Ideas", "Build an app")
        _button(at, "Add Note").click()
        at.run()

        api_calls["create_note"].assert_called_once_with("Ideas", "Build an app")
        assert api_calls["list_notes"].call_count == 2
        assert "**2 notes**" in _markdown(at)
        assert at.text_input(key="title_input").value == ""
        assert at.text_area(key="content_input").value == ""

    def test_create_failure_keeps_form(self, at: AppTest, api_calls):
        api_calls["create_note"].side_effect = requests.ConnectionError("refused")

        _fill(at, "Ideas", "Build an app")
        _button(at, "Add Note").click()
        at.run()

        assert "Cannot reach the notes API" in at.error[0].value
        assert api_calls["list_notes"].call_count == 1
        assert at.text_input(key="title_input").value == "Ideas"

    def test_edit_fills_form_and_update_refetches(self, at: AppTest, api_calls):
        at.button(key="edit_1").click()
        at.run()

        assert at.text_input(key="title_input").value == "Shopping"
        assert at.text_area(key="content_input").value == "Buy milk and eggs"
        assert at.session_state["editing_id"] == 1

        at.text_input(key="title_input").input("Groceries")
        _button(at, "Update Note").click()
        at.run()

        api_calls["update_note"].assert_called_once_with(1, "Groceries", "Buy milk and eggs")
        api_calls["create_note"].assert_not_called()
        assert api_calls["list_notes"].call_count == 2
        assert at.session_state["editing_id"] is None

    def test_cancel_edit_clears_form(self, at: AppTest, api_calls):
        at.button(key="edit_1").click()
        at.run()

        _button(at, "Cancel Edit").click()
        at.run()

        assert at.session_state["editing_id"] is None
        assert at.text_input(key="title_input").value == ""
        assert [b.label for b in at.button if b.label == "Add Note"] == ["Add Note"]
        api_calls["update_note"].assert_not_called()


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class TestDelete:
    def test_delete_then_refetch(self, at: AppTest, api_calls):
        api_calls["list_notes"].return_value = []

        at.button(key="delete_1").click()
        at.run()

        api_calls["delete_note"].assert_called_once_with(1)
        assert api_calls["list_notes"].call_count == 2
        assert "**0 notes**" in _markdown(at)

    def test_deleting_note_being_edited_clears_form(self, at: AppTest, api_calls):
        at.button(key="edit_1").click()
        at.run()
        api_calls["list_notes"].return_value = []

        at.button(key="delete_1").click()
        at.run()

        assert at.session_state["editing_id"] is None
        assert at.text_input(key="title_input").value == ""
        assert at.text_area(key="content_input").value == ""

    def test_delete_failure_shows_error(self, at: AppTest, api_calls):
        api_calls["delete_note"].side_effect = requests.HTTPError("502 Server Error")

        at.button(key="delete_1").click()
        at.run()

        assert at.error
        assert api_calls["list_notes"].call_count == 1
        assert at.session_state["notes"] == [NOTE]


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


class TestSummaryText:
    def test_returns_summary(self):
        with patch("ui.api.summarize", return_value="Buy milk and eggs...") as summarize:
            assert notes._summary_text("Buy milk and eggs") == "Buy milk and eggs..."
        summarize.assert_called_once_with("Buy milk and eggs")

    @pytest.mark.parametrize(
        "error",
        [requests.ConnectionError("refused"), requests.HTTPError("500 Server Error")],
    )
    def test_failure_text(self, error):
        with patch("ui.api.summarize", side_effect=error):
            assert notes._summary_text("Buy milk") == "Failed to generate summary"

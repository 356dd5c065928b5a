"""Notes page: editor form, note grid, and summary dialog.

The current listing lives in ``st.session_state`` for this browser session
only and is re-fetched from the API after every create, update, or delete.
API calls run in button callbacks, which Streamlit executes before the
rerun that redraws the page.
"""

from __future__ import annotations

from typing import Any

import requests
import streamlit as st

from ui import api

_GRID_COLUMNS = 3
_SUMMARY_FAILED = "Failed to generate summary"

_STATE_DEFAULTS: dict[str, Any] = {
    "notes": [],
    "notes_loaded": False,
    "editing_id": None,
    "title_input": "",
    "content_input": "",
    "notice": None,
}


def _ensure_state() -> None:
    """Initialize session state on first load."""
    for key, value in _STATE_DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _refresh() -> None:
    """Re-fetch the listing. On failure the previous listing is kept."""
    try:
        st.session_state.notes = api.list_notes()
        st.session_state.notes_loaded = True
    except requests.RequestException as e:
        st.session_state.notice = api.error_message(e)


def _clear_form() -> None:
    st.session_state.title_input = ""
    st.session_state.content_input = ""
    st.session_state.editing_id = None


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------


def _submit() -> None:
    """Create a note, or update the one being edited."""
    title = st.session_state.title_input
    content = st.session_state.content_input
    if not title.strip() or not content.strip():
        return

    editing_id = st.session_state.editing_id
    try:
        if editing_id is not None:
            api.update_note(editing_id, title, content)
        else:
            api.create_note(title, content)
    except requests.RequestException as e:
        st.session_state.notice = api.error_message(e)
        return

    _clear_form()
    _refresh()


def _start_edit(note: dict[str, Any]) -> None:
    st.session_state.title_input = note["title"]
    st.session_state.content_input = note["content"]
    st.session_state.editing_id = note["id"]


def _delete(note_id: int) -> None:
    try:
        api.delete_note(note_id)
    except requests.RequestException as e:
        st.session_state.notice = api.error_message(e)
        return

    if st.session_state.editing_id == note_id:
        _clear_form()
    _refresh()


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _summary_text(content: str) -> str:
    """Summary of *content*, or the failure text if the API call fails."""
    try:
        return api.summarize(content)
    except requests.RequestException:
        return _SUMMARY_FAILED


@st.dialog("Summary")
def _show_summary(note: dict[str, Any]) -> None:
    """Transient dialog with the summary of one note."""
    st.subheader(note["title"])
    with st.spinner("Summarizing..."):
        summary = _summary_text(note["content"])
    st.write(summary)


def _render_editor() -> None:
    editing = st.session_state.editing_id is not None

    st.text_input("Title", key="title_input", placeholder="Note Title")
    st.text_area(
        "Content",
        key="content_input",
        placeholder="Write your note here...",
        height=120,
    )
    st.button(
        "Update Note" if editing else "Add Note",
        on_click=_submit,
        type="primary",
        use_container_width=True,
    )
    if editing:
        st.button("Cancel Edit", on_click=_clear_form, use_container_width=True)


def _render_grid(notes: list[dict[str, Any]]) -> None:
    if not notes:
        st.info("No notes yet. Add one above.")
        return

    cols = st.columns(_GRID_COLUMNS)
    for i, note in enumerate(notes):
        with cols[i % _GRID_COLUMNS]:
            with st.container(border=True):
                st.subheader(note["title"])
                st.caption(note["date"])
                st.text(note["content"])

                edit_col, delete_col, summary_col = st.columns(3)
                with edit_col:
                    st.button(
                        "Edit",
                        key=f"edit_{note['id']}",
                        on_click=_start_edit,
                        args=(note,),
                    )
                with delete_col:
                    st.button(
                        "Delete",
                        key=f"delete_{note['id']}",
                        on_click=_delete,
                        args=(note["id"],),
                    )
                with summary_col:
                    if st.button("Summarize", key=f"summary_{note['id']}"):
                        _show_summary(note)


def render() -> None:
    """Render the notes page."""
    _ensure_state()

    st.title("📝 My Notes")

    if not st.session_state.notes_loaded:
        with st.spinner("Loading notes..."):
            _refresh()

    if st.session_state.notice:
        st.error(st.session_state.notice)
        st.session_state.notice = None

    _render_editor()
    st.divider()

    header_col, refresh_col = st.columns([5, 1])
    with header_col:
        st.markdown(f"**{len(st.session_state.notes)} notes**")
    with refresh_col:
        st.button("Refresh", on_click=_refresh, use_container_width=True)

    _render_grid(st.session_state.notes)

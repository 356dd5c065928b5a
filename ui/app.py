"""Notes — Streamlit interface.

Run with:
    streamlit run ui/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so `ui.*` imports resolve
# regardless of the working directory Streamlit uses.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

st.set_page_config(
    page_title="My Notes",
    page_icon="📝",
    layout="wide",
)

from ui import api  # noqa: E402
from ui.components import notes  # noqa: E402

notes.render()

# Footer
st.divider()
try:
    _backend = api.get_health().get("backend", "unknown")
except Exception:
    _backend = "unavailable"
st.caption(f"Notes API at {api.BASE_URL} | store: {_backend}")

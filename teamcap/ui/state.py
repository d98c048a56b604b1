"""
Streamlit session keys shared across pages: report month, project and role.
"""
import streamlit as st
from datetime import date
from typing import Any, Dict


def _defaults() -> Dict[str, Any]:
    today = date.today()
    return {
        "report_year": today.year,
        "report_month": today.month,
        "selected_project": None,
        "role_filter": "Lead",
    }


def init_state():
    """Seed any key the session does not have yet."""
    for key, value in _defaults().items():
        st.session_state.setdefault(key, value)


def get_state(key: str) -> Any:
    init_state()
    return st.session_state[key] if key in st.session_state else _defaults().get(key)


def set_state(key: str, value: Any):
    st.session_state[key] = value


def reset_state():
    """Back to the current month, no project, Lead role."""
    st.session_state.update(_defaults())

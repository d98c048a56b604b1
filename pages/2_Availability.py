"""
Availability Page

Find workers free for a proposed installation window.
"""
from __future__ import annotations

import streamlit as st
from datetime import datetime, time, timedelta
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from teamcap.data.loader import load_snapshot
from teamcap.data.snapshot import RoleCategory
from teamcap.exports import export_dataframe_csv, format_export_filename
from teamcap.metrics.availability import availability_frame
from teamcap.ui.state import init_state, get_state, set_state


st.set_page_config(page_title="Availability", page_icon="A", layout="wide")

init_state()


def main():
    st.title("Availability")
    
    workers, jobs = load_snapshot()
    
    projects = sorted({(j.project_id, j.project_name or j.project_id) for j in jobs}, key=lambda p: p[1])
    project_labels = {pid: name for pid, name in projects}
    
    col1, col2, col3 = st.columns(3)
    with col1:
        start_day = st.date_input("Start", value=datetime.now().date())
        start_time = st.time_input("Start time", value=time(8, 0))
    with col2:
        end_day = st.date_input("End", value=datetime.now().date() + timedelta(days=2))
        end_time = st.time_input("End time", value=time(18, 0))
    with col3:
        roles = [r.value for r in RoleCategory]
        role_value = st.selectbox("Role", roles, index=roles.index(get_state("role_filter")))
        set_state("role_filter", role_value)
        project_ids = [None] + [pid for pid, _ in projects]
        project_id = st.selectbox(
            "Project being scheduled",
            project_ids,
            format_func=lambda pid: "—" if pid is None else project_labels[pid],
        )
        set_state("selected_project", project_id)
    
    window_start = datetime.combine(start_day, start_time)
    window_end = datetime.combine(end_day, end_time)
    
    if window_end < window_start:
        st.warning("End is before start.")
        return
    
    table = availability_frame(
        workers, jobs, window_start, window_end,
        role_filter=RoleCategory(role_value),
        project_id=project_id,
    )
    
    free = int(table["is_available"].sum()) if len(table) > 0 else 0
    st.metric("Available", f"{free} of {len(table)}")
    st.dataframe(table, use_container_width=True, hide_index=True)
    
    csv_bytes, filename = export_dataframe_csv(table, format_export_filename("availability"))
    st.download_button("Download CSV", csv_bytes, file_name=filename, mime="text/csv")


main()

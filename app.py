"""
Installation Team Capacity & Production

Streamlit home page: snapshot health and a team headline. Detail lives in
pages/.
"""
import streamlit as st
from pathlib import Path
from datetime import datetime

st.set_page_config(
    page_title="Team Capacity & Production",
    page_icon="🛠️",
    layout="wide",
    initial_sidebar_state="expanded",
)

import sys
sys.path.insert(0, str(Path(__file__).parent))

from teamcap.config import config, REQUIRED_COLUMNS
from teamcap.data.loader import load_snapshot, get_data_status
from teamcap.data.schema import SchemaValidationError
from teamcap.logging_config import setup_logging
from teamcap.metrics.assignment_status import classify_team, team_status_summary
from teamcap.ui.state import init_state, reset_state


PAGES = [
    ("pages/1_Team_Status.py", "Team Status", "👷"),
    ("pages/2_Availability.py", "Availability", "📅"),
    ("pages/3_Project_Workload.py", "Project Workload", "⚖️"),
    ("pages/4_Monthly_Production.py", "Monthly Production", "💰"),
]


def render_missing_tables(missing):
    st.error(f"Missing snapshot tables: {', '.join(missing)}")
    lines = [f"- `{name}` (.parquet or .csv): {', '.join(cols)}" for name, cols in REQUIRED_COLUMNS.items()]
    st.markdown(
        f"Put the tables in `{config.processed_dir}`:\n\n" + "\n".join(lines)
        + "\n\nThen run `python scripts/validate_inputs.py` and refresh."
    )


def render_file_table(files):
    rows = []
    for name, path in files.items():
        stat = path.stat()
        rows.append({
            "table": name,
            "file": path.name,
            "size_kb": round(stat.st_size / 1024, 1),
            "modified": datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M"),
        })
    st.dataframe(rows, use_container_width=True, hide_index=True)


def main():
    setup_logging()
    init_state()

    st.title("Team Capacity & Production")
    st.caption("Availability → Assignments → Workload → Monthly Production")

    files = get_data_status()
    missing = [name for name, path in files.items() if path is None]
    if missing:
        render_missing_tables(missing)
        return

    with st.expander("Snapshot files", expanded=False):
        render_file_table(files)

    try:
        with st.spinner("Loading snapshot..."):
            workers, jobs = load_snapshot()
    except SchemaValidationError as e:
        st.error(str(e))
        return

    st.markdown("---")
    nav, overview = st.columns([1, 4])

    with nav:
        for path, label, icon in PAGES:
            st.page_link(path, label=label, icon=icon)
        if st.button("Reset filters"):
            reset_state()
            st.rerun()

    with overview:
        summary = team_status_summary(classify_team(workers, jobs, datetime.now()))
        for col, (label, key) in zip(
            st.columns(4),
            [("Team", "total"), ("On site", "active"), ("Available", "available"), ("Finishing", "finishing")],
        ):
            col.metric(label, f"{summary[key]:,}")

        open_jobs = [j for j in jobs if not j.is_closed]
        p1, p2, p3 = st.columns(3)
        p1.metric("Projects", f"{len({j.project_id for j in jobs}):,}")
        p2.metric("Jobs", f"{len(jobs):,}")
        p3.metric("Open jobs", f"{len(open_jobs):,}")


if __name__ == "__main__":
    main()

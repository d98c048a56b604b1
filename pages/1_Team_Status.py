"""
Team Status Page

Who is on site now, who is booked next, and which assignments are overdue.
"""
from __future__ import annotations

import streamlit as st
from datetime import datetime
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from teamcap.data.loader import load_snapshot
from teamcap.data.snapshot import RoleCategory
from teamcap.metrics.assignment_status import (
    classify_team,
    compute_team_status,
    group_workers_by_role,
    team_status_summary,
)
from teamcap.exports import export_team_status_csv
from teamcap.ui.charts import team_status_donut
from teamcap.ui.formatting import fmt_percent, status_dot
from teamcap.ui.state import init_state


st.set_page_config(page_title="Team Status", page_icon="T", layout="wide")

init_state()


def _status_key(status) -> str:
    if status.active is None:
        return "overdue" if status.overdue else "available"
    return "finishing" if status.is_finishing else "busy"


def main():
    st.title("Team Status")
    
    workers, jobs = load_snapshot()
    now = datetime.now()
    statuses = {s.worker.id: s for s in classify_team(workers, jobs, now)}
    summary = team_status_summary(list(statuses.values()))
    
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Team", summary["total"])
    c2.metric("Active", summary["active"])
    c3.metric("Available", summary["available"])
    c4.metric("Finishing", summary["finishing"])
    c5.metric("Busy", summary["busy"])
    
    st.plotly_chart(team_status_donut(summary), use_container_width=True)
    
    st.markdown("---")
    
    for role, members in group_workers_by_role(workers).items():
        if not members:
            continue
        st.subheader(f"{role.value}s ({len(members)})")
        for worker in members:
            status = statuses[worker.id]
            line = f"{status_dot(_status_key(status))} **{worker.name}**"
            if status.active is not None:
                line += (
                    f" · on *{status.active.project_name} / {status.active.name}*"
                    f" ({fmt_percent(status.active.progress_pct, 0)})"
                )
            elif status.scheduled is not None:
                start = status.scheduled.scheduled_start
                line += f" · next: *{status.scheduled.name}* from {start:%d/%m}"
            if status.overdue:
                line += f" · {len(status.overdue)} overdue"
            if role is RoleCategory.HELPER and status.overdue:
                line += " (visibility only)"
            st.markdown(line, unsafe_allow_html=True)
    
    st.markdown("---")
    st.subheader("Status table")
    status_df = compute_team_status(workers, jobs, now)
    st.dataframe(status_df, use_container_width=True, hide_index=True)
    
    csv_bytes, filename = export_team_status_csv(status_df)
    st.download_button("Download CSV", csv_bytes, file_name=filename, mime="text/csv")


main()

"""
Project Workload Page

Weighted completion of a project and each worker's share of it.
"""
from __future__ import annotations

import streamlit as st
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from teamcap.data.loader import load_snapshot
from teamcap.exports import export_dataframe_csv, format_export_filename
from teamcap.metrics.workload import aggregate_workload, progress_breakdown, workload_frame
from teamcap.ui.charts import kpi_gauge, workload_share_chart
from teamcap.ui.formatting import format_metric_df
from teamcap.ui.state import init_state, get_state, set_state


st.set_page_config(page_title="Project Workload", page_icon="W", layout="wide")

init_state()


def main():
    st.title("Project Workload")
    
    workers, jobs = load_snapshot()
    
    projects = sorted({(j.project_id, j.project_name or j.project_id) for j in jobs}, key=lambda p: p[1])
    if not projects:
        st.info("No projects in the snapshot.")
        return
    
    project_ids = [pid for pid, _ in projects]
    labels = dict(projects)
    current = get_state("selected_project")
    index = project_ids.index(current) if current in project_ids else 0
    project_id = st.selectbox("Project", project_ids, index=index, format_func=labels.get)
    set_state("selected_project", project_id)
    
    result = aggregate_workload(jobs, project_id)
    counts = progress_breakdown(jobs, project_id)
    
    col1, col2 = st.columns([1, 2])
    with col1:
        st.plotly_chart(kpi_gauge(result.total_pct, title="Weighted completion"), use_container_width=True)
        st.metric("Jobs", counts["total"])
        st.caption(
            f"{counts['completed']} completed · {counts['in_progress']} in progress · "
            f"{counts['not_started']} not started"
        )
    
    table = workload_frame(result, workers)
    with col2:
        if len(table) == 0:
            st.info("No weighted jobs for this project (service calls are excluded).")
        else:
            st.plotly_chart(workload_share_chart(table), use_container_width=True)
    
    if len(table) > 0:
        st.dataframe(
            format_metric_df(table.drop(columns=["is_unassigned"])),
            use_container_width=True,
            hide_index=True,
        )
        csv_bytes, filename = export_dataframe_csv(table, format_export_filename(f"workload_{project_id}"))
        st.download_button("Download CSV", csv_bytes, file_name=filename, mime="text/csv")


main()

"""
Monthly Production Page

Value produced per worker in a calendar month, with advance, balance and
completion settlements.
"""
from __future__ import annotations

import calendar

import streamlit as st
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from teamcap.data.loader import load_snapshot
from teamcap.exports import export_production_csv, export_production_excel
from teamcap.metrics.production import (
    accrue_production,
    month_activity_summary,
    production_frame,
    production_summary_frame,
)
from teamcap.ui.charts import production_by_worker_chart
from teamcap.ui.formatting import fmt_currency, fmt_percent, format_metric_df
from teamcap.ui.state import init_state, get_state, set_state


st.set_page_config(page_title="Monthly Production", page_icon="$", layout="wide")

init_state()


def main():
    st.title("Monthly Production")
    
    workers, jobs = load_snapshot()
    
    col1, col2 = st.columns(2)
    with col1:
        year = st.number_input("Year", min_value=2000, max_value=2100,
                               value=int(get_state("report_year")), step=1)
    with col2:
        month = st.selectbox("Month", list(range(1, 13)),
                             index=int(get_state("report_month")) - 1,
                             format_func=lambda m: calendar.month_name[m])
    set_state("report_year", int(year))
    set_state("report_month", int(month))
    
    report = accrue_production(jobs, workers, int(year), int(month))
    activity = month_activity_summary(jobs, workers, int(year), int(month))
    
    m1, m2, m3 = st.columns(3)
    m1.metric("Total produced", fmt_currency(report.grand_total, decimals=2))
    m2.metric("Jobs in month", activity["total_tasks"])
    m3.metric("Completed", fmt_percent(activity["completion_rate"]))
    
    st.caption(
        "Values assume each job's previously recognized percentage was updated "
        "after the prior month was closed."
    )
    
    if not report.per_worker:
        st.info("No production recorded for this month.")
        return
    
    st.plotly_chart(production_by_worker_chart(production_summary_frame(report)), use_container_width=True)
    
    lines = production_frame(report)
    for worker_id, production in report.per_worker.items():
        with st.expander(f"{production.worker.name} · {fmt_currency(production.total, decimals=2)}"):
            worker_lines = lines[lines["worker_id"] == worker_id].drop(columns=["worker_id", "worker_name"])
            st.dataframe(format_metric_df(worker_lines), use_container_width=True, hide_index=True)
    
    c1, c2 = st.columns(2)
    with c1:
        csv_bytes, filename = export_production_csv(report)
        st.download_button("Download CSV", csv_bytes, file_name=filename, mime="text/csv")
    with c2:
        xlsx_bytes, filename = export_production_excel(report, activity)
        st.download_button(
            "Download Excel", xlsx_bytes, file_name=filename,
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )


main()

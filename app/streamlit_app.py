"""
Claims Triangle — Loss Development Dashboard
============================================

Pick a folder of claim listings, see which files loaded, and view the
resulting loss development triangle (accident year x maturity).

Run: streamlit run app/streamlit_app.py
"""

from __future__ import annotations

import io
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

try:
    import altair as alt
    _HAS_ALTAIR = True
except ImportError:
    alt = None
    _HAS_ALTAIR = False

# ---------------------------------------------------------------------------
# Make project root importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import TriangleConfig
from core.schema import SchemaError
from data_prep.loader import list_claim_files
from pipeline.runner import run_pipeline
from triangle.builder import Triangle
from triangle.development import MaturityError

# ---------------------------------------------------------------------------
# Data directories
# ---------------------------------------------------------------------------
DATA_DIR = PROJECT_ROOT / "data" / "raw"

VALUE_OPTIONS = ["paid"]
AGG_OPTIONS = ["sum", "mean", "median", "max", "count"]


# ---------------------------------------------------------------------------
# Cached pipeline
# ---------------------------------------------------------------------------
@st.cache_data(show_spinner="Building triangle...")
def _run(directory: str, file_key: tuple, value_col: str, agg: str, months: int):
    """file_key (names + mtimes) invalidates the cache when the folder changes."""
    cfg = TriangleConfig(
        required_columns=tuple(dict.fromkeys(["file_year", "accident_year", value_col])),
        value_column=value_col,
        aggregation_function=agg,
        months_per_period=months,
    )
    result = run_pipeline(directory, cfg)
    return result.triangle, result.load_report(), result.validation


def _file_key(paths) -> tuple:
    return tuple((p.name, p.stat().st_mtime) for p in paths)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------
def _fmt_amount(val):
    """Format amount with commas; blank for undeveloped cells."""
    return "" if pd.isna(val) else f"{val:,.0f}"


def _plot_development(triangle: Triangle, *, title, y_title, height=320):
    frame = triangle.to_frame()
    if frame.empty:
        st.info("No data to plot.")
        return
    if not _HAS_ALTAIR:
        st.markdown(f"**{title}**")
        st.line_chart(frame.T)
        return
    long = (
        frame.reset_index()
        .melt(id_vars=[triangle.origin_name], var_name=triangle.development_name, value_name="value")
        .dropna(subset=["value"])
    )
    chart = (
        alt.Chart(long).mark_line(point=True)
        .encode(
            x=alt.X(f"{triangle.development_name}:Q", title="Maturity (months)"),
            y=alt.Y("value:Q", title=y_title, axis=alt.Axis(format=",.0f")),
            color=alt.Color(f"{triangle.origin_name}:N", title="Accident Year"),
        )
        .properties(title=title, height=height)
    )
    st.altair_chart(chart, use_container_width=True)


def _to_excel_bytes(frame: pd.DataFrame) -> bytes:
    bio = io.BytesIO()
    with pd.ExcelWriter(bio, engine="openpyxl") as xw:
        frame.to_excel(xw, sheet_name="triangle")
    return bio.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════════
st.set_page_config(page_title="Claims Triangle", layout="wide")
st.title("Claims Triangle")
st.caption("Loss development triangle from a folder of claim listings")

# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR — Folder and Triangle Options
# ═══════════════════════════════════════════════════════════════════════════
with st.sidebar:
    st.header("Claim Listings")
    folder = Path(st.text_input("Folder", value=str(DATA_DIR)))

    try:
        files = list_claim_files(folder)
    except FileNotFoundError as e:
        st.error(str(e))
        st.stop()
    if not files:
        st.error(f"No claim files found in {folder}")
        st.stop()
    st.caption(f"{len(files)} file(s) found")

    st.header("Triangle")
    value_col = st.selectbox("Value", options=VALUE_OPTIONS, index=0)
    agg = st.selectbox("Aggregation", options=AGG_OPTIONS, index=0)
    months = st.number_input("Months per year of age", min_value=1, value=12, step=1)
    view = st.radio("View", options=["Cumulative", "Incremental"], horizontal=True)

# ═══════════════════════════════════════════════════════════════════════════
# BUILD
# ═══════════════════════════════════════════════════════════════════════════
try:
    triangle, load_report, validation = _run(
        str(folder), _file_key(files), value_col, agg, int(months)
    )
except (SchemaError, MaturityError) as e:
    st.error(f"Triangle could not be built: {e}")
    st.stop()

if view == "Incremental":
    triangle = triangle.to_incremental()

# ═══════════════════════════════════════════════════════════════════════════
# FILES
# ═══════════════════════════════════════════════════════════════════════════
n_loaded = int((load_report["status"] == "loaded").sum())
c1, c2, c3 = st.columns(3)
c1.metric("Files Loaded", f"{n_loaded} / {len(load_report)}")
c2.metric("Claim Rows", f"{int(load_report['rows'].sum()):,}")
c3.metric("Accident Years", str(len(triangle.origins)))

with st.expander("Per-file load status", expanded=n_loaded < len(load_report)):
    st.dataframe(load_report, use_container_width=True, hide_index=True)

if not validation.is_valid:
    st.error("Claim validation failed:\n" + validation.summary())
elif validation.has_warnings:
    st.warning(validation.summary())

# ═══════════════════════════════════════════════════════════════════════════
# TRIANGLE
# ═══════════════════════════════════════════════════════════════════════════
st.divider()
st.subheader(f"{view} {value_col.title()} Triangle")

frame = triangle.to_frame()
st.dataframe(frame.map(_fmt_amount), use_container_width=True)

_plot_development(triangle, title=f"{view} {value_col.title()} by Maturity", y_title=value_col.title())

latest = triangle.latest_diagonal()
with st.expander("Latest diagonal", expanded=False):
    st.dataframe(latest.map(_fmt_amount).to_frame(), use_container_width=True)

st.download_button(
    "Download triangle (.xlsx)",
    data=_to_excel_bytes(frame),
    file_name=f"{value_col}_triangle.xlsx",
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)

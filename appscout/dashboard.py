"""
App Scout: dashboard for searching both app stores and downloading the combined list.
Run with: streamlit run appscout/dashboard.py
"""

import streamlit as st
import plotly.graph_objects as go

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from appscout.config import EXPORT_NAME, OUTPUT_DIR, SEARCH_LIMIT
from appscout.exporter import to_dataframe
from appscout.models import APPLE_APP_STORE, GOOGLE_PLAY, STORE_TITLES
from appscout.pipeline import run_pipeline
from appscout.terms import collect_terms, split_input_terms

# ============================================================
# PAGE CONFIG
# ============================================================
st.set_page_config(
    page_title="App Scout",
    page_icon="◆",
    layout="wide",
)

CUSTOM_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');
html, body, [class*="css"] { font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif; }
footer {visibility: hidden;}

:root {
    --bg-elevated: #2d2b26;
    --border: rgba(255,235,205,0.08);
    --text-primary: #e8e0d5;
    --text-secondary: #9c9588;
    --accent: #d97757;
}

[data-testid="stMetric"] {
    background: var(--bg-elevated);
    border: 1px solid var(--border); border-radius: 14px;
    padding: 18px 22px;
}
[data-testid="stMetric"] label {
    color: var(--text-secondary) !important; font-size: 0.72rem;
    text-transform: uppercase; letter-spacing: 0.06em;
}
.stButton > button[kind="primary"] {
    background: var(--accent) !important; color: #fff !important; border: none;
}
.stTabs [aria-selected="true"] { border-bottom: 2px solid var(--accent) !important; }
</style>
"""

st.markdown(CUSTOM_CSS, unsafe_allow_html=True)


def apply_chart_style(fig):
    fig.update_layout(
        font=dict(family="Inter, sans-serif", color="#9c9588"),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        title_font=dict(size=14, color="#e8e0d5"),
        yaxis=dict(gridcolor="rgba(255,235,205,0.04)"),
        margin=dict(l=40, r=20, t=45, b=35),
    )
    return fig


# ============================================================
# TERM INPUT
# ============================================================
def render_term_input() -> list[str]:
    """Uploaded file + typed terms, then a multiselect (all selected by default)."""
    c1, c2 = st.columns(2)
    with c1:
        uploaded = st.file_uploader("Terms file (one per line)", type=["txt"], key="terms_file")
    with c2:
        typed = st.text_area("More search terms", placeholder="fitness, yoga, meditation",
                             help="Comma separated", key="terms_typed")

    file_terms = []
    if uploaded is not None:
        file_terms = uploaded.getvalue().decode("utf-8-sig").splitlines()

    terms = collect_terms(file_terms, split_input_terms(typed or ""))
    if not terms:
        st.caption("Add at least one search term to get started.")
        return []

    return st.multiselect("Search terms to scrape", terms, default=terms, key="terms_selected")


def limit_bounds(search_limit: int) -> tuple[int, int, int]:
    """(min, max, step) for the result limit slider. SEARCH_LIMIT may be set below 10 in .env."""
    low = max(1, min(10, search_limit))
    high = max(low, search_limit)
    step = 10 if (high - low) % 10 == 0 and high > low else 1
    return low, high, step


# ============================================================
# CHARTS
# ============================================================
def chart_store_coverage(report):
    """How many apps are Google-only, Apple-only or in both stores."""
    google_only = sum(1 for a in report.apps if a.title_google is not None and a.title_apple is None)
    apple_only = sum(1 for a in report.apps if a.title_apple is not None and a.title_google is None)
    both = report.in_both_stores
    fig = go.Figure(go.Bar(
        x=["Google Play only", "Apple only", "Both stores"], y=[google_only, apple_only, both],
        marker_color=["#8aad6e", "#b8856c", "#d97757"],
        text=[google_only, apple_only, both], textposition="outside",
        textfont=dict(color="#9c9588", size=11),
    ))
    fig.update_layout(title=f"Store coverage ({len(report.apps):,} apps)", height=360, yaxis_title="Apps")
    apply_chart_style(fig)
    st.plotly_chart(fig, use_container_width=True)


def chart_duplicates(report):
    stores = [GOOGLE_PLAY, APPLE_APP_STORE]
    fig = go.Figure()
    fig.add_trace(go.Bar(x=[STORE_TITLES[s] for s in stores], y=[report.remaining.get(s, 0) for s in stores],
                         name="Unique", marker_color="#5a9e6f"))
    fig.add_trace(go.Bar(x=[STORE_TITLES[s] for s in stores], y=[report.removed(s) for s in stores],
                         name="Duplicates", marker_color="#c45c4a"))
    fig.update_layout(title="Results per store", barmode="stack", height=360, yaxis_title="Apps",
                      legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="center", x=0.5))
    apply_chart_style(fig)
    st.plotly_chart(fig, use_container_width=True)


# ============================================================
# RESULTS
# ============================================================
def render_results(report):
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Found in total", f"{report.total_found:,}")
    m2.metric("Duplicates removed", f"{report.removed(GOOGLE_PLAY) + report.removed(APPLE_APP_STORE):,}")
    m3.metric("Unique apps", f"{len(report.apps):,}")
    m4.metric("In both stores", f"{report.in_both_stores:,}")

    if report.failures:
        st.warning(f"{len(report.failures)} search(es) failed and were skipped: " + ", ".join(
            f"{STORE_TITLES[f.source]} / '{f.term}'" for f in report.failures))

    tab_table, tab_charts = st.tabs(["📋 Apps", "📊 Charts"])

    with tab_table:
        df = to_dataframe(app.to_row() for app in report.apps)
        only_both = st.checkbox("Only apps in both stores", value=False, key="only_both")
        shown = df[df["bothAppStores"] == True] if only_both else df  # noqa: E712
        st.dataframe(shown, use_container_width=True, hide_index=True)

        if report.csv_path and os.path.exists(report.csv_path):
            with open(report.csv_path, "rb") as f:
                st.download_button("⬇ Download CSV", f.read(), file_name=os.path.basename(report.csv_path),
                                   mime="text/csv", use_container_width=True)

    with tab_charts:
        c1, c2 = st.columns(2)
        with c1:
            chart_store_coverage(report)
        with c2:
            chart_duplicates(report)


# ============================================================
# MAIN
# ============================================================
def main():
    st.markdown("""
    <div style="display:flex; align-items:center; gap:10px; margin-bottom:0.2rem;">
        <span style="font-size:1.3rem; color:#d97757;">◆</span>
        <span style="font-size:1.3rem; font-weight:700; color:#e8e0d5;">App Scout</span>
        <span style="color:#6b6560; font-size:0.8rem; margin-left:auto;">Google Play × App Store</span>
    </div>""", unsafe_allow_html=True)

    terms = render_term_input()
    low, high, step = limit_bounds(SEARCH_LIMIT)
    if low < high:
        limit = st.slider("Max apps per store per term", low, high, high, step, key="limit")
    else:
        limit = high
        st.caption(f"Max apps per store per term: {limit}")

    if st.button("⬇ Scrape app stores", use_container_width=True, type="primary",
                 disabled=not terms, key="btn_scrape"):
        progress = st.progress(0, text="Starting...")

        def cb(cur, tot, msg):
            progress.progress(int((cur / tot) * 100) if tot else 0, text=msg)

        try:
            st.session_state.report = run_pipeline(terms, export_name=EXPORT_NAME, output_dir=OUTPUT_DIR,
                                                   count=limit, progress_callback=cb)
            progress.progress(100, text="Done!")
        except OSError as e:
            st.error(f"Export failed: {e}")

    if "report" in st.session_state:
        st.markdown("---")
        render_results(st.session_state.report)


if __name__ == "__main__":
    main()

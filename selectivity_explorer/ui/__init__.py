"""Streamlit application shell."""

from __future__ import annotations


def render_app() -> None:
    import streamlit as st

    # set_page_config() must be the first streamlit command of the run
    st.set_page_config(page_title="SPARQL Selectivity Explorer", layout="wide")

    from selectivity_explorer.config import CONFIG
    from selectivity_explorer.ui.panels import render_panels
    from selectivity_explorer.ui.sidebar import init_session_state, render_sidebar

    st.markdown(
        f"""
        <style>
        :root {{
            --panel: {CONFIG["PANEL_BACKGROUND"]};
            --panel-border: {CONFIG["PANEL_BORDER"]};
            --ink-1: {CONFIG["PANEL_INK"]};
            --ink-2: #C9CED6;
            --accent-1: {CONFIG["SCALE_ACTIVE_COLOR"]};
            --radius-md: 14px;
        }}
        .stApp {{
            background: #121212;
            color: var(--ink-1);
        }}
        h1, h2, h3, p, li, label, span {{
            color: var(--ink-1);
        }}
        div[data-testid="stMarkdownContainer"] table {{
            background: var(--panel);
            border-radius: 6px;
        }}
        div[data-testid="stMarkdownContainer"] th {{
            text-align: left;
            background: rgba(255, 255, 255, 0.06);
        }}
        .legend-card {{
            background: var(--panel);
            border: 1px solid var(--panel-border);
            border-radius: var(--radius-md);
            padding: 1rem 1.2rem;
            margin-top: 0.75rem;
        }}
        .legend-title {{
            font-weight: 700;
            margin-bottom: 0.6rem;
            color: var(--ink-1);
        }}
        .legend-grid {{
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
            gap: 0.5rem 0.75rem;
        }}
        .legend-item {{
            display: flex;
            align-items: center;
            gap: 0.6rem;
            color: var(--ink-2);
            font-size: 0.95rem;
        }}
        .legend-swatch {{
            width: 14px;
            height: 14px;
            border-radius: 999px;
            display: inline-block;
            flex-shrink: 0;
        }}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.title("SPARQL Selectivity Explorer")
    st.caption(
        "Query a SPARQL endpoint and inspect molecule, parent molecule and target relationships "
        "as a table, a force-directed graph, or a per-molecule selectivity chart."
    )

    init_session_state()
    render_sidebar()
    render_panels()

"""Result panels (table, graph, selectivity chart) and their view controls."""

from __future__ import annotations

import json
import logging
from typing import Dict

import streamlit as st
import streamlit.components.v1 as components

from selectivity_explorer.config import GRAPH_CARD_HEIGHT, MAX_LAYOUT_NODES, VIEW_LABELS
from selectivity_explorer.data_processing import result_to_dataframe
from selectivity_explorer.models import GraphData
from selectivity_explorer.session import SCALE_MODES, VIEWS, SessionState
from selectivity_explorer.ui.sidebar import get_controller, get_view_manager
from selectivity_explorer.visualizer import (
    Position,
    build_graph,
    build_graph_html,
    build_selectivity_chart,
    create_node_type_legend,
    render_error_html,
    render_table_html,
    seed_positions,
)


@st.cache_data(show_spinner=False)
def _layout_positions(graph: GraphData) -> Dict[str, Position]:
    return seed_positions(graph)


def _on_view_change() -> None:
    get_view_manager().select_view(st.session_state.view_selector)


def _on_group_change() -> None:
    key = st.session_state.group_selector
    if key:
        get_controller().select_group(key)


def _on_scale_click(mode: str) -> None:
    if get_view_manager().set_scale_mode(mode):
        logging.debug("Redrawing chart in %s scale", mode)
    else:
        logging.debug("Recorded %s scale for the next result", mode)


def render_table_panel(state: SessionState) -> None:
    if state.error is not None:
        st.markdown(render_error_html(str(state.error)), unsafe_allow_html=True)
        return
    if state.table is None:
        st.info("Enter an endpoint and a query in the sidebar, then press **Run query**.")
        return

    st.markdown(render_table_html(state.table), unsafe_allow_html=True)
    if not state.table.empty:
        c1, c2 = st.columns(2)
        c1.download_button(
            "Download results as CSV",
            data=result_to_dataframe(state.last_result).to_csv(index=False).encode("utf-8"),
            file_name="sparql_results.csv",
            mime="text/csv",
        )
        c2.download_button(
            "Download raw SPARQL JSON",
            data=json.dumps(state.last_result, indent=2),
            file_name="sparql_results.json",
            mime="application/sparql-results+json",
        )


def render_graph_panel(state: SessionState) -> None:
    if not state.graph.nodes:
        st.info("No molecule, parent or target bindings in the last result.")
        return

    m1, m2 = st.columns(2)
    m1.metric("Nodes", len(state.graph.nodes))
    m2.metric("Links", len(state.graph.links))
    if len(state.graph.nodes) > MAX_LAYOUT_NODES:
        st.info(f"Layout cap applied: {len(state.graph.nodes)} nodes are laid out in the browser only.")
    try:
        with st.spinner("Generating Network Graph..."):
            positions = _layout_positions(state.graph)
            net = build_graph(state.graph, positions)
            components.html(build_graph_html(net), height=GRAPH_CARD_HEIGHT, scrolling=False)
    except Exception as exc:
        logging.error("Graph generation failed: %s", exc)
        st.error(f"Graph generation failed: {exc}")
    st.markdown(create_node_type_legend(), unsafe_allow_html=True)


def render_chart_panel(state: SessionState) -> None:
    controller = get_controller()
    options = controller.group_options()
    if state.active_group in options:
        st.session_state.group_selector = state.active_group
    elif "group_selector" in st.session_state:
        del st.session_state["group_selector"]

    col_select, col_linear, col_log = st.columns([4, 1, 1])
    col_select.selectbox(
        "Parent molecule",
        options=list(options.keys()),
        format_func=lambda key: options.get(key, key),
        key="group_selector",
        on_change=_on_group_change,
        disabled=not options,
    )
    for column, mode in zip((col_linear, col_log), SCALE_MODES):
        column.button(
            mode.title(),
            key=f"scale_{mode}",
            type="primary" if state.scale_mode == mode else "secondary",
            on_click=_on_scale_click,
            args=(mode,),
            use_container_width=True,
        )

    fig = build_selectivity_chart(controller.chart_points(), state.scale_mode)
    st.plotly_chart(fig, use_container_width=True)


_PANEL_RENDERERS = {
    "table": render_table_panel,
    "graph": render_graph_panel,
    "chart": render_chart_panel,
}


def render_panels() -> None:
    state = st.session_state.explorer_state
    st.session_state.view_selector = state.visible_panel
    st.selectbox(
        "View",
        options=list(VIEWS),
        format_func=lambda view: VIEW_LABELS.get(view, view),
        key="view_selector",
        on_change=_on_view_change,
    )

    for view, visible in get_view_manager().visible_panels().items():
        if visible:
            with st.container(border=True):
                _PANEL_RENDERERS[view](state)

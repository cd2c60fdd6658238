"""Sidebar query form and session state initialization."""

from __future__ import annotations

import logging

import streamlit as st

from selectivity_explorer.config import (
    AUTO_RUN_ON_LOAD,
    PRESET_QUERIES,
    SPARQL_ENDPOINT,
    SPARQL_QUERY,
    SPARQL_TIMEOUT,
)
from selectivity_explorer.session import QuerySessionController, SessionState, ViewStateManager
from selectivity_explorer.sparql_client import SPARQLClient

_CUSTOM_PRESET = "Custom"


def init_session_state() -> None:
    if "explorer_state" not in st.session_state:
        st.session_state.explorer_state = SessionState()
    if "sparql_client" not in st.session_state:
        st.session_state.sparql_client = SPARQLClient(timeout=SPARQL_TIMEOUT)
    if "endpoint_input" not in st.session_state:
        st.session_state.endpoint_input = SPARQL_ENDPOINT
    if "query_input" not in st.session_state:
        st.session_state.query_input = SPARQL_QUERY
    if "preset_query" not in st.session_state:
        st.session_state.preset_query = _CUSTOM_PRESET
    if "auto_run_done" not in st.session_state:
        st.session_state.auto_run_done = False


def get_controller() -> QuerySessionController:
    return QuerySessionController(st.session_state.explorer_state, st.session_state.sparql_client)


def get_view_manager() -> ViewStateManager:
    return ViewStateManager(st.session_state.explorer_state)


def _apply_preset() -> None:
    preset = PRESET_QUERIES.get(st.session_state.preset_query)
    if not preset:
        return
    st.session_state.query_input = preset["query"]
    if preset["endpoint"]:
        st.session_state.endpoint_input = preset["endpoint"]


def _run_query() -> bool:
    with st.spinner("Loading…"):
        return get_controller().run(st.session_state.endpoint_input, st.session_state.query_input)


def render_sidebar() -> None:
    st.sidebar.header("SPARQL Endpoint")
    st.sidebar.text_input(
        "Endpoint URL",
        key="endpoint_input",
        placeholder="https://example.org/sparql",
        help="SPARQL 1.1 endpoint that answers GET requests with JSON results.",
    )
    st.sidebar.selectbox(
        "Preset queries",
        options=[_CUSTOM_PRESET] + list(PRESET_QUERIES.keys()),
        key="preset_query",
        on_change=_apply_preset,
    )
    st.sidebar.text_area("SPARQL Query", key="query_input", height=280)
    run_clicked = st.sidebar.button("Run query", use_container_width=True)

    if run_clicked:
        _run_query()
    elif AUTO_RUN_ON_LOAD and not st.session_state.auto_run_done:
        st.session_state.auto_run_done = True
        logging.info("Running configured query on first load")
        if _run_query():
            get_view_manager().select_view("graph")

    state = st.session_state.explorer_state
    if state.has_result:
        st.sidebar.caption(
            f"Last result: {len(state.table.rows) if state.table else 0} row(s), "
            f"{len(state.graph.nodes)} node(s), {len(state.groups)} parent molecule(s)."
        )

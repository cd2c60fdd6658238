"""Query session state, the controller that runs queries, and the view toggles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from selectivity_explorer.data_processing import (
    build_graph_from_sparql,
    build_table_model,
    extract_selectivity_points,
    group_by_parent_molecule,
)
from selectivity_explorer.errors import InputError, InvalidEndpointError, QueryError
from selectivity_explorer.models import ChartPoint, GraphData, MoleculeGroup, SparqlResult, TableModel
from selectivity_explorer.sparql_client import SPARQLClient
from selectivity_explorer.utils import is_http_url

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"

VIEWS = ("table", "graph", "chart")
SCALE_MODES = ("linear", "log")


@dataclass
class SessionState:
    last_result: Optional[SparqlResult] = None
    table: Optional[TableModel] = None
    graph: GraphData = field(default_factory=GraphData)
    groups: List[MoleculeGroup] = field(default_factory=list)
    active_group: Optional[str] = None
    scale_mode: str = "linear"
    visible_panel: str = "table"
    status: str = STATUS_IDLE
    error: Optional[QueryError] = None
    request_seq: int = 0

    @property
    def has_result(self) -> bool:
        return self.last_result is not None


class QuerySessionController:
    """
    Runs queries against the endpoint and keeps the single last-result slot.

    A run moves the state through ``idle|success|failure -> loading ->
    success|failure``. Each started request gets a sequence number and only the
    latest one may commit, so a response that arrives after a newer run was
    started is discarded. A failed run leaves the previous result and its
    views in place.
    """

    def __init__(self, state: Optional[SessionState] = None, client: Optional[SPARQLClient] = None):
        self.state = state if state is not None else SessionState()
        self.client = client if client is not None else SPARQLClient()

    def run(self, endpoint: Optional[str], query: Optional[str]) -> bool:
        endpoint = (endpoint or "").strip()
        query = (query or "").strip()
        try:
            ticket = self.begin(endpoint, query)
        except QueryError as exc:
            self._record_failure(exc)
            return False

        try:
            result = self.client.query(endpoint, query)
        except QueryError as exc:
            return self.fail(ticket, exc)
        return self.complete(ticket, result)

    def begin(self, endpoint: str, query: str) -> int:
        if not endpoint or not query:
            raise InputError("Endpoint and query required.")
        if not is_http_url(endpoint):
            raise InvalidEndpointError("Invalid endpoint URL.")
        self.state.request_seq += 1
        self.state.status = STATUS_LOADING
        self.state.error = None
        logging.debug("Started request #%s", self.state.request_seq)
        return self.state.request_seq

    def complete(self, ticket: int, result: SparqlResult) -> bool:
        if ticket != self.state.request_seq:
            logging.info("Discarding response #%s superseded by #%s", ticket, self.state.request_seq)
            return False
        self.load_result(result)
        return True

    def fail(self, ticket: int, exc: QueryError) -> bool:
        if ticket != self.state.request_seq:
            logging.info("Ignoring failure of superseded request #%s: %s", ticket, exc)
            return False
        self._record_failure(exc)
        return False

    def load_result(self, result: SparqlResult) -> None:
        table = build_table_model(result)
        graph = build_graph_from_sparql(result)
        groups = group_by_parent_molecule(result)

        self.state.last_result = result
        self.state.table = table
        self.state.graph = graph
        self.state.groups = groups
        self.state.active_group = groups[0].key if groups else None
        self.state.visible_panel = "table"
        self.state.status = STATUS_SUCCESS
        self.state.error = None

    def _record_failure(self, exc: QueryError) -> None:
        logging.error("SPARQL error: %s", exc)
        self.state.status = STATUS_FAILURE
        self.state.error = exc

    def group_options(self) -> Dict[str, str]:
        return {group.key: group.label for group in self.state.groups}

    def select_group(self, key: str) -> None:
        if key not in self.group_options():
            raise ValueError(f"Unknown molecule group: {key}")
        self.state.active_group = key

    def chart_points(self) -> List[ChartPoint]:
        if not self.state.has_result or not self.state.active_group:
            return []
        return extract_selectivity_points(self.state.last_result, self.state.active_group)


class ViewStateManager:
    """Which panel is visible and which chart scale is active; nothing else."""

    def __init__(self, state: SessionState):
        self.state = state

    def select_view(self, view: str) -> None:
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self.state.visible_panel = view

    def visible_panels(self) -> Dict[str, bool]:
        return {view: view == self.state.visible_panel for view in VIEWS}

    def set_scale_mode(self, mode: str) -> bool:
        """Record ``mode``; returns True when the chart must be redrawn now."""
        if mode not in SCALE_MODES:
            raise ValueError(f"Unknown scale mode: {mode}")
        self.state.scale_mode = mode
        return self.state.has_result and bool(self.state.active_group)

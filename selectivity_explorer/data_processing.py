"""Pure transforms from a SPARQL JSON result to table, graph and chart data."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

import pandas as pd

from selectivity_explorer.errors import ParseError
from selectivity_explorer.models import (
    ChartPoint,
    GraphData,
    GraphLink,
    GraphNode,
    MoleculeGroup,
    Row,
    SparqlResult,
    TableCell,
    TableModel,
)
from selectivity_explorer.utils import (
    binding_text,
    binding_value,
    escape_html,
    is_http_url,
    parse_float,
    profile_time,
)


def get_bindings(result: Optional[SparqlResult]) -> List[Row]:
    """Rows of ``result``; a result without ``results.bindings`` has none."""
    if not isinstance(result, dict):
        return []
    results = result.get("results")
    if not isinstance(results, dict):
        return []
    bindings = results.get("bindings")
    if not isinstance(bindings, list):
        return []
    return [row for row in bindings if isinstance(row, dict)]


def get_variables(result: Optional[SparqlResult]) -> List[str]:
    """Column names: ``head.vars`` verbatim, else the keys of the first row."""
    head = result.get("head") if isinstance(result, dict) else None
    if isinstance(head, dict) and isinstance(head.get("vars"), list):
        return [str(var) for var in head["vars"]]
    bindings = get_bindings(result)
    if bindings:
        return list(bindings[0].keys())
    return []


def validate_result_shape(payload: Any) -> SparqlResult:
    """Check that a decoded body looks like a SPARQL JSON result."""
    if not isinstance(payload, dict):
        raise ParseError(f"Expected a JSON object, got {type(payload).__name__}")
    if "results" not in payload and "boolean" not in payload:
        raise ParseError("Expected 'results' or 'boolean' in a SPARQL JSON result")
    head = payload.get("head")
    if head is not None and not isinstance(head, dict):
        raise ParseError("'head' must be an object")
    if isinstance(head, dict) and "vars" in head and not isinstance(head["vars"], list):
        raise ParseError("'head.vars' must be a list")
    results = payload.get("results")
    if results is not None:
        if not isinstance(results, dict):
            raise ParseError("'results' must be an object")
        bindings = results.get("bindings")
        if bindings is not None and not isinstance(bindings, list):
            raise ParseError("'results.bindings' must be a list")
    return payload


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

def build_table_model(result: Optional[SparqlResult]) -> TableModel:
    bindings = get_bindings(result)
    if not bindings:
        return TableModel(empty=True)

    columns = get_variables(result)
    rows: List[List[TableCell]] = []
    for row in bindings:
        cells = []
        for var in columns:
            cell = row.get(var)
            value = binding_text(row, var)
            href = None
            if isinstance(cell, dict) and cell.get("type") == "uri" and is_http_url(value):
                href = escape_html(value)
            cells.append(TableCell(text=escape_html(value), href=href))
        rows.append(cells)
    return TableModel(columns=[escape_html(var) for var in columns], rows=rows)


def result_to_dataframe(result: Optional[SparqlResult]) -> pd.DataFrame:
    columns = get_variables(result)
    records = [{var: binding_text(row, var) for var in columns} for row in get_bindings(result)]
    return pd.DataFrame(records, columns=columns)


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------

@profile_time
def build_graph_from_sparql(result: Optional[SparqlResult]) -> GraphData:
    node_map: Dict[str, GraphNode] = {}
    links: List[GraphLink] = []

    def add_node(node_id: Optional[str], label: Optional[str], node_type: str) -> Optional[GraphNode]:
        if not node_id:
            return None
        if node_id not in node_map:
            node_map[node_id] = GraphNode(id=node_id, label=label or node_id, type=node_type)
        return node_map[node_id]

    for row in get_bindings(result):
        molecule = add_node(binding_value(row, "molecule"), binding_value(row, "molName"), "molecule")
        parent = add_node(binding_value(row, "molecule2"), binding_value(row, "mol2Name"), "parent")
        target = add_node(binding_value(row, "target"), binding_value(row, "targetName"), "target")

        if molecule and parent:
            links.append(GraphLink(source=molecule.id, target=parent.id, relation="hasParentMolecule"))
        if parent and target:
            links.append(GraphLink(source=parent.id, target=target.id, relation="hasTarget"))

    logging.debug("Built graph with %s node(s) and %s link(s)", len(node_map), len(links))
    return GraphData(nodes=list(node_map.values()), links=links)


# ---------------------------------------------------------------------------
# Selectivity
# ---------------------------------------------------------------------------

def group_by_parent_molecule(result: Optional[SparqlResult]) -> List[MoleculeGroup]:
    groups: Dict[str, MoleculeGroup] = {}
    for row in get_bindings(result):
        parent_uri = binding_value(row, "molecule2")
        if not parent_uri:
            continue
        if parent_uri not in groups:
            label = binding_value(row, "mol2Name") or parent_uri
            groups[parent_uri] = MoleculeGroup(key=parent_uri, label=label)
        groups[parent_uri].rows.append(row)
    return list(groups.values())


def invert_selectivity(raw: Optional[str]) -> float:
    """Turn a Ki/KiBest ratio into "times more selective than best"; zero stays zero."""
    selectivity = parse_float(raw)
    if not math.isnan(selectivity) and selectivity != 0:
        selectivity = 1 / selectivity
    return selectivity


@profile_time
def extract_selectivity_points(result: Optional[SparqlResult], group_key: Optional[str]) -> List[ChartPoint]:
    points: List[ChartPoint] = []
    if not group_key:
        return points
    for row in get_bindings(result):
        if binding_value(row, "molecule2") != group_key:
            continue
        selectivity = invert_selectivity(binding_value(row, "Selectivity_vs_best"))
        if not math.isfinite(selectivity):
            logging.debug("Dropping row without numeric selectivity for %s", group_key)
            continue
        points.append(
            ChartPoint(
                target_name=binding_value(row, "targetName") or binding_value(row, "target") or "unknown",
                selectivity=selectivity,
                ki=parse_float(binding_value(row, "Ki")),
                ki_best=parse_float(binding_value(row, "KiBest")),
            )
        )
    return points

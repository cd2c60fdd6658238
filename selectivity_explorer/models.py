"""Data models for SPARQL results, graph structures and chart series."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SparqlResult = Dict[str, Any]
Row = Dict[str, Dict[str, Any]]


@dataclass
class GraphNode:
    id: str
    label: str
    type: str


@dataclass
class GraphLink:
    source: str
    target: str
    relation: str


@dataclass
class GraphData:
    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)


@dataclass
class ChartPoint:
    target_name: str
    selectivity: float
    ki: float
    ki_best: float


@dataclass
class MoleculeGroup:
    key: str
    label: str
    rows: List[Row] = field(default_factory=list)


@dataclass
class TableCell:
    text: str
    href: Optional[str] = None


@dataclass
class TableModel:
    columns: List[str] = field(default_factory=list)
    rows: List[List[TableCell]] = field(default_factory=list)
    empty: bool = False

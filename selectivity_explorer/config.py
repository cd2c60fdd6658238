"""Application configuration and environment overrides."""

from __future__ import annotations

import os


def _read_env(key: str, default: str = "") -> str:
    return str(os.getenv(key, default) or "").strip()


def _read_env_float(key: str, default: float) -> float:
    raw = _read_env(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _read_env_flag(key: str, default: bool = False) -> bool:
    raw = _read_env(key).lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


SELECTIVITY_QUERY = """PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
PREFIX ex: <http://example.org/selectivity#>

SELECT ?molecule ?molName ?molecule2 ?mol2Name ?target ?targetName
       ?Ki ?KiBest ?Selectivity_vs_best
WHERE {
  ?molecule ex:hasParentMolecule ?molecule2 .
  OPTIONAL { ?molecule rdfs:label ?molName . }
  OPTIONAL { ?molecule2 rdfs:label ?mol2Name . }
  ?activity ex:molecule ?molecule2 ;
            ex:target ?target ;
            ex:Ki ?Ki .
  OPTIONAL { ?target rdfs:label ?targetName . }
  {
    SELECT ?molecule2 (MIN(?ki) AS ?KiBest) WHERE {
      ?a ex:molecule ?molecule2 ; ex:Ki ?ki .
    } GROUP BY ?molecule2
  }
  BIND(?Ki / ?KiBest AS ?Selectivity_vs_best)
}
ORDER BY ?molecule2 ?Selectivity_vs_best
"""

WIKIDATA_CATS_QUERY = """SELECT ?item ?itemLabel WHERE {
  ?item wdt:P31 wd:Q146 .  # Instance of: domestic cat
  SERVICE wikibase:label { bd:serviceParam wikibase:language "en". }
}
LIMIT 10
"""

PRESET_QUERIES = {
    "Selectivity vs best Ki": {
        "endpoint": "",
        "query": SELECTIVITY_QUERY,
    },
    "Wikidata: domestic cats": {
        "endpoint": "https://query.wikidata.org/sparql",
        "query": WIKIDATA_CATS_QUERY,
    },
}

SPARQL_ENDPOINT = _read_env("SPARQL_ENDPOINT")
SPARQL_QUERY = _read_env("SPARQL_QUERY") or SELECTIVITY_QUERY
SPARQL_TIMEOUT = _read_env_float("SPARQL_TIMEOUT", 60.0)
AUTO_RUN_ON_LOAD = _read_env_flag("AUTO_RUN_ON_LOAD", default=bool(SPARQL_ENDPOINT))
LOG_LEVEL = _read_env("LOG_LEVEL", "INFO").upper()

SPARQL_ACCEPT = "application/sparql-results+json"
USER_AGENT = "SelectivityExplorer/1.0"

GRAPH_CANVAS_WIDTH = 960
GRAPH_CANVAS_HEIGHT = 600
GRAPH_CARD_HEIGHT = GRAPH_CANVAS_HEIGHT + 40
MAX_LAYOUT_NODES = 300
CHART_HEIGHT = 520

VIEW_LABELS = {
    "table": "Table",
    "graph": "Graph",
    "chart": "Selectivity chart",
}

CONFIG = {
    "NODE_TYPE_COLORS": {
        "molecule": "#ffcc00",
        "parent": "#66ccff",
        "target": "#ff6699",
    },
    "NODE_TYPE_LABELS": {
        "molecule": "Molecule (molName)",
        "parent": "Parent Molecule (mol2Name)",
        "target": "Target (targetName)",
    },
    "DEFAULT_NODE_COLOR": "#A9A9A9",
    "LINK_COLOR": "#aaaaaa",
    "LINK_DISTANCE": 80.0,
    "CHARGE_STRENGTH": -120.0,
    "CENTER_PULL_STRENGTH": 0.05,
    "DRAG_ALPHA_TARGET": 0.3,
    "ALPHA_MIN": 0.001,
    "ALPHA_DECAY": 1 - 0.001 ** (1 / 300),
    "MAX_LAYOUT_TICKS": 300,
    "MAX_LAYOUT_STEP": 10.0,
    "NODE_RADIUS": 8,
    "CHART_BAR_COLOR": "#66ccff",
    "CHART_TITLE": "Target selectivity for chosen parent molecule",
    "CHART_Y_LABEL": "Selectivity_vs_best",
    "CHART_EMPTY_MESSAGE": "No selectivity data for this molecule.",
    "PANEL_BACKGROUND": "#1E1E1E",
    "PANEL_INK": "#FFFFFF",
    "PANEL_BORDER": "#555555",
    "LINK_INK": "#7fc5ff",
    "SCALE_ACTIVE_COLOR": "#66ccff",
    "SCALE_INACTIVE_COLOR": "#dddddd",
}

"""SPARQL Selectivity Explorer: query an endpoint, view results as a table, graph and chart."""

__version__ = "1.0.0"

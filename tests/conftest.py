"""Shared fixtures: SPARQL JSON results shaped like the selectivity query output."""

import pytest

EX = "http://example.org/"


def _uri(value):
    return {"type": "uri", "value": value}


def _lit(value, datatype=None):
    cell = {"type": "literal", "value": value}
    if datatype:
        cell["datatype"] = datatype
    return cell


@pytest.fixture
def selectivity_result():
    """Two parent molecules; the first has three targets, one with a bad ratio."""
    rows = [
        {
            "molecule": _uri(EX + "mol/1"),
            "molName": _lit("Mol One"),
            "molecule2": _uri(EX + "parent/A"),
            "mol2Name": _lit("Parent A"),
            "target": _uri(EX + "target/T1"),
            "targetName": _lit("Target 1"),
            "Ki": _lit("5"),
            "KiBest": _lit("5"),
            "Selectivity_vs_best": _lit("1"),
        },
        {
            "molecule": _uri(EX + "mol/1"),
            "molName": _lit("Mol One (dup)"),
            "molecule2": _uri(EX + "parent/A"),
            "mol2Name": _lit("Parent A"),
            "target": _uri(EX + "target/T2"),
            "targetName": _lit("Target 2"),
            "Ki": _lit("10"),
            "KiBest": _lit("5"),
            "Selectivity_vs_best": _lit("2"),
        },
        {
            "molecule": _uri(EX + "mol/2"),
            "molecule2": _uri(EX + "parent/B"),
            "target": _uri(EX + "target/T1"),
            "Selectivity_vs_best": _lit("4"),
        },
        {
            "molecule2": _uri(EX + "parent/A"),
            "target": _uri(EX + "target/T3"),
            "Selectivity_vs_best": _lit("n/a"),
        },
    ]
    return {
        "head": {
            "vars": [
                "molecule", "molName", "molecule2", "mol2Name", "target",
                "targetName", "Ki", "KiBest", "Selectivity_vs_best",
            ]
        },
        "results": {"bindings": rows},
    }


@pytest.fixture
def empty_result():
    return {"head": {"vars": ["molecule"]}, "results": {"bindings": []}}


@pytest.fixture
def no_parent_result():
    """Rows that bind molecules and targets but never molecule2."""
    return {
        "head": {"vars": ["molecule", "target"]},
        "results": {
            "bindings": [
                {"molecule": _uri(EX + "mol/1"), "target": _uri(EX + "target/T1")},
                {"target": _uri(EX + "target/T2"), "targetName": _lit("Target 2")},
            ]
        },
    }

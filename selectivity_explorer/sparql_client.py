"""HTTP transport for SPARQL SELECT queries.

Usage:
    from selectivity_explorer.sparql_client import SPARQLClient

    client = SPARQLClient(timeout=30)
    result = client.query("https://query.wikidata.org/sparql", "SELECT * WHERE { ?s ?p ?o } LIMIT 5")
    print(result["head"]["vars"])
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from selectivity_explorer.config import SPARQL_ACCEPT, SPARQL_TIMEOUT, USER_AGENT
from selectivity_explorer.data_processing import get_bindings, validate_result_shape
from selectivity_explorer.errors import InvalidEndpointError, NetworkError, ParseError
from selectivity_explorer.models import SparqlResult
from selectivity_explorer.utils import is_http_url


def create_session(user_agent: str = USER_AGENT) -> requests.Session:
    """
    Create a requests Session with the SPARQL JSON Accept header.

    No retry adapter is mounted: a failed run is reported once and the user
    decides whether to run it again.
    """
    session = requests.Session()
    session.headers.update({
        "User-Agent": user_agent,
        "Accept": SPARQL_ACCEPT,
    })
    return session


class SPARQLClient:
    """
    Sends one SPARQL query per call as a GET request and returns the decoded
    SPARQL 1.1 JSON result.

    Raises:
        InvalidEndpointError: the endpoint is not an http(s) URL
        NetworkError: transport failure, timeout or non-ok status
        ParseError: the body is not JSON or not a SPARQL result object
    """

    def __init__(self, timeout: Optional[float] = SPARQL_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._http_session = session

    @property
    def _session(self) -> requests.Session:
        if self._http_session is None:
            self._http_session = create_session()
        return self._http_session

    def query(self, endpoint: str, sparql: str) -> SparqlResult:
        if not is_http_url(endpoint):
            raise InvalidEndpointError(f"Invalid endpoint URL: {endpoint}")

        logging.info("Sending SPARQL request to: %s", endpoint)
        try:
            response = self._session.get(
                endpoint,
                params={"query": sparql, "format": "json"},
                headers={"Accept": SPARQL_ACCEPT},
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise NetworkError(f"Request timed out after {self.timeout}s: {exc}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Request failed: {exc}") from exc

        logging.info("Response status: %s", response.status_code)
        if not response.ok:
            raise NetworkError(f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(f"Response is not valid JSON: {exc}") from exc

        result = validate_result_shape(payload)
        logging.info("SPARQL JSON result with %s row(s)", len(get_bindings(result)))
        return result

#!/usr/bin/env python
"""
SPARQL Selectivity Explorer - Streamlit entrypoint.

Run with: streamlit run app.py
"""

from selectivity_explorer.ui import render_app


def main() -> None:
    render_app()


if __name__ == "__main__":
    main()

"""PyVis, Plotly and HTML generation helpers for the three result panels."""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Set, Tuple

import networkx as nx
import numpy as np
import plotly.graph_objects as go
from pyvis.network import Network

from selectivity_explorer.config import (
    CHART_HEIGHT,
    CONFIG,
    GRAPH_CANVAS_HEIGHT,
    GRAPH_CANVAS_WIDTH,
    MAX_LAYOUT_NODES,
)
from selectivity_explorer.models import ChartPoint, GraphData, TableModel
from selectivity_explorer.utils import escape_html

Position = Tuple[float, float]
TickCallback = Callable[[Dict[str, Position]], None]

_GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))


def node_color(node_type: str, node_type_colors: Optional[Dict[str, str]] = None) -> str:
    palette = node_type_colors or CONFIG["NODE_TYPE_COLORS"]
    return palette.get(node_type, CONFIG["DEFAULT_NODE_COLOR"])


# ---------------------------------------------------------------------------
# Force layout
# ---------------------------------------------------------------------------

class ForceLayout:
    """
    Iterative force-directed layout over a ``GraphData``.

    Each tick runs one Fruchterman-Reingold step of ``networkx.spring_layout``
    (repulsion between all pairs, attraction along links towards
    ``link_distance``), scales the move by the current energy ``alpha``, adds a
    soft pull towards the canvas centre on both axes and re-centres the free
    nodes. A node moves at most ``max_step`` pixels per tick and free nodes
    are kept inside the canvas. Pinned nodes stay where they were put.
    ``alpha`` decays towards ``alpha_target`` and the layout is settled once
    it drops below ``alpha_min``.

    In the page the layout only seeds the starting positions of the PyVis
    network; live dragging is handled by vis-network in the browser. The
    ``drag_*`` methods and ``on_tick`` callbacks drive the same pin/release
    cycle for headless use.
    """

    def __init__(
        self,
        graph: GraphData,
        width: float = GRAPH_CANVAS_WIDTH,
        height: float = GRAPH_CANVAS_HEIGHT,
        link_distance: float = CONFIG["LINK_DISTANCE"],
        center_strength: float = CONFIG["CENTER_PULL_STRENGTH"],
        max_step: float = CONFIG["MAX_LAYOUT_STEP"],
        seed: int = 0,
    ) -> None:
        self.center = np.array([width / 2, height / 2], dtype=float)
        margin = min(CONFIG["NODE_RADIUS"], width / 2, height / 2)
        self._lower = np.array([margin, margin], dtype=float)
        self._upper = np.array([width - margin, height - margin], dtype=float)
        self.link_distance = link_distance
        self.center_strength = center_strength
        self.max_step = max_step
        self.seed = seed
        self.alpha = 1.0
        self.alpha_target = 0.0
        self.alpha_min = CONFIG["ALPHA_MIN"]
        self.alpha_decay = CONFIG["ALPHA_DECAY"]
        self.ticks = 0

        self._graph = nx.MultiGraph()
        self._graph.add_nodes_from(node.id for node in graph.nodes)
        self._graph.add_edges_from((link.source, link.target) for link in graph.links)
        self._positions: Dict[str, np.ndarray] = {}
        for idx, node in enumerate(graph.nodes):
            radius = 10 * math.sqrt(0.5 + idx)
            angle = idx * _GOLDEN_ANGLE
            self._positions[node.id] = self.center + radius * np.array([math.cos(angle), math.sin(angle)])
        self._pins: Dict[str, np.ndarray] = {}
        self._callbacks: List[TickCallback] = []

    @property
    def positions(self) -> Dict[str, Position]:
        return {node_id: (float(pos[0]), float(pos[1])) for node_id, pos in self._positions.items()}

    @property
    def pinned(self) -> Set[str]:
        return set(self._pins)

    @property
    def settled(self) -> bool:
        return self.alpha < self.alpha_min

    def on_tick(self, callback: TickCallback) -> None:
        self._callbacks.append(callback)

    def tick(self) -> Dict[str, Position]:
        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
        self.ticks += 1

        if self._positions:
            stepped = self._physics_step()
            free_ids = [node_id for node_id in self._positions if node_id not in self._pins]
            for node_id in free_ids:
                current = self._positions[node_id]
                step = stepped[node_id] - current
                length = float(np.linalg.norm(step))
                if length > self.max_step:
                    step = step * (self.max_step / length)
                moved = current + step * self.alpha
                moved += (self.center - moved) * self.center_strength * self.alpha
                self._positions[node_id] = moved
            for node_id, pin in self._pins.items():
                self._positions[node_id] = pin.copy()
            if free_ids:
                mean = np.mean(np.stack(list(self._positions.values())), axis=0)
                shift = self.center - mean
                for node_id in free_ids:
                    self._positions[node_id] = np.clip(
                        self._positions[node_id] + shift, self._lower, self._upper
                    )

        positions = self.positions
        for callback in self._callbacks:
            callback(positions)
        return positions

    def _physics_step(self) -> Dict[str, np.ndarray]:
        if len(self._positions) == 1:
            return dict(self._positions)
        layout = nx.spring_layout(
            self._graph,
            k=self.link_distance,
            pos={node_id: tuple(pos) for node_id, pos in self._positions.items()},
            fixed=list(self._pins) or None,
            iterations=1,
            scale=None,
            center=tuple(self.center),
            seed=self.seed,
        )
        return {node_id: np.asarray(pos, dtype=float) for node_id, pos in layout.items()}

    def run(self, max_ticks: int = CONFIG["MAX_LAYOUT_TICKS"]) -> Dict[str, Position]:
        count = 0
        while not self.settled and count < max_ticks:
            self.tick()
            count += 1
        logging.debug("Layout ran %s tick(s), alpha=%.4f", count, self.alpha)
        return self.positions

    def drag_start(self, node_id: str) -> None:
        self.alpha_target = CONFIG["DRAG_ALPHA_TARGET"]
        self._pins[node_id] = self._positions[node_id].copy()

    def drag(self, node_id: str, x: float, y: float) -> None:
        self._pins[node_id] = np.array([x, y], dtype=float)
        self._positions[node_id] = self._pins[node_id].copy()

    def drag_end(self, node_id: str) -> None:
        self.alpha_target = 0.0
        self._pins.pop(node_id, None)


def seed_positions(graph: GraphData, max_nodes: int = MAX_LAYOUT_NODES) -> Dict[str, Position]:
    """Starting positions for the network, or none above ``max_nodes``."""
    if len(graph.nodes) > max_nodes:
        logging.info(
            "Skipping layout seeding for %s node(s) (cap %s); vis-network lays out alone",
            len(graph.nodes),
            max_nodes,
        )
        return {}
    return ForceLayout(graph).run()


# ---------------------------------------------------------------------------
# Graph panel
# ---------------------------------------------------------------------------

_DRAG_RELEASE_JS = """
<script type="text/javascript">
  if (typeof network !== "undefined") {
    network.on("dragEnd", function (params) {
      if (params.nodes && params.nodes.length) {
        network.startSimulation();
      }
    });
  }
</script>
"""


def build_graph(
    graph: GraphData,
    positions: Optional[Dict[str, Position]] = None,
    node_type_colors: Optional[Dict[str, str]] = None,
) -> Network:
    net = Network(
        height=f"{GRAPH_CANVAS_HEIGHT}px",
        width="100%",
        directed=True,
        notebook=False,
        bgcolor=CONFIG["PANEL_BACKGROUND"],
        font_color=CONFIG["PANEL_INK"],
    )
    positions = positions or {}

    for node in graph.nodes:
        options = {}
        if node.id in positions:
            options["x"], options["y"] = positions[node.id]
        net.add_node(
            node.id,
            label=node.label,
            title=node.label,
            color=node_color(node.type, node_type_colors),
            size=CONFIG["NODE_RADIUS"],
            font={"color": CONFIG["PANEL_INK"], "size": 10},
            node_type=node.type,
            **options,
        )

    for link in graph.links:
        net.add_edge(
            link.source,
            link.target,
            title=link.relation,
            label=link.relation,
            relation=link.relation,
            font={"color": CONFIG["PANEL_INK"], "size": 8, "strokeWidth": 0},
            color=CONFIG["LINK_COLOR"],
            width=1,
        )

    net.barnes_hut(
        gravity=CONFIG["CHARGE_STRENGTH"] * 20,
        central_gravity=CONFIG["CENTER_PULL_STRENGTH"],
        spring_length=CONFIG["LINK_DISTANCE"],
    )
    logging.debug("Built network with %s node(s) and %s edge(s)", len(net.nodes), len(net.edges))
    return net


def build_graph_html(net: Network) -> str:
    html = net.generate_html()
    return html.replace("</body>", _DRAG_RELEASE_JS + "</body>", 1)


def create_node_type_legend(
    node_colors: Optional[Dict[str, str]] = None,
    node_labels: Optional[Dict[str, str]] = None,
) -> str:
    colors = node_colors or CONFIG["NODE_TYPE_COLORS"]
    labels = node_labels or CONFIG["NODE_TYPE_LABELS"]
    node_items = "".join(
        f"<div class='legend-item'><span class='legend-swatch' style='background:{escape_html(color)};'></span>"
        f"<span>{escape_html(labels.get(ntype, ntype))}</span></div>"
        for ntype, color in colors.items()
    )
    return (
        "<div class='legend-card'>"
        "<div class='legend-title'>Node Types</div>"
        f"<div class='legend-grid'>{node_items}</div>"
        "</div>"
    )


# ---------------------------------------------------------------------------
# Table panel
# ---------------------------------------------------------------------------

NO_RESULTS_HTML = "<p>No results.</p>"


def render_table_html(model: TableModel) -> str:
    if model.empty:
        return NO_RESULTS_HTML

    border = f"border:1px solid {CONFIG['PANEL_BORDER']}; padding:4px;"
    parts = [
        f"<table style=\"border-collapse:collapse; color:{CONFIG['PANEL_INK']}; font-size:0.9rem;\">",
        "<thead><tr>",
    ]
    parts.extend(f'<th style="{border}">{column}</th>' for column in model.columns)
    parts.append("</tr></thead><tbody>")
    for row in model.rows:
        parts.append("<tr>")
        for cell in row:
            content = cell.text
            if cell.href:
                content = (
                    f'<a href="{cell.href}" target="_blank" rel="noopener noreferrer" '
                    f'style="color:{CONFIG["LINK_INK"]};">{cell.href}</a>'
                )
            parts.append(f'<td style="{border}">{content}</td>')
        parts.append("</tr>")
    parts.append("</tbody></table>")
    return "".join(parts)


def render_error_html(message: str) -> str:
    return f'<p style="color:red;">Error: {escape_html(message)}</p>'


# ---------------------------------------------------------------------------
# Chart panel
# ---------------------------------------------------------------------------

def compute_y_domain(points: List[ChartPoint], scale_mode: str) -> Tuple[float, float]:
    values = [point.selectivity for point in points]
    if scale_mode == "log":
        positives = [value for value in values if value > 0]
        low = min(positives) if positives else 0.1
        high = max(values) if values else 0.0
        if high <= 0:
            high = 100.0
        return low, high
    high = max(values) if values else 0.0
    return 0.0, (high or 1.0)


def _empty_chart(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        showarrow=False,
        font=dict(color=CONFIG["PANEL_INK"], size=14),
    )
    fig.update_layout(
        height=CHART_HEIGHT,
        template="plotly_dark",
        paper_bgcolor=CONFIG["PANEL_BACKGROUND"],
        plot_bgcolor=CONFIG["PANEL_BACKGROUND"],
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
    )
    return fig


def build_selectivity_chart(
    points: List[ChartPoint],
    scale_mode: str = "linear",
    title: str = CONFIG["CHART_TITLE"],
) -> go.Figure:
    if not points:
        return _empty_chart(CONFIG["CHART_EMPTY_MESSAGE"])

    low, high = compute_y_domain(points, scale_mode)
    fig = go.Figure(
        go.Bar(
            x=[point.target_name for point in points],
            y=[point.selectivity for point in points],
            marker=dict(color=CONFIG["CHART_BAR_COLOR"]),
            customdata=np.stack(
                [[point.ki for point in points], [point.ki_best for point in points]], axis=-1
            ),
            hovertemplate=(
                "<b>%{x}</b><br>Selectivity: %{y:.4g}"
                "<br>Ki: %{customdata[0]}<br>KiBest: %{customdata[1]}<extra></extra>"
            ),
        )
    )
    if scale_mode == "log":
        if high <= low:
            high = low * 10
        fig.update_yaxes(type="log", range=[math.log10(low), math.log10(high)])
    else:
        fig.update_yaxes(type="linear", range=[low, high])

    fig.update_layout(
        title=dict(text=title, x=0.5),
        height=CHART_HEIGHT,
        margin=dict(l=60, r=20, t=60, b=100),
        template="plotly_dark",
        paper_bgcolor=CONFIG["PANEL_BACKGROUND"],
        plot_bgcolor=CONFIG["PANEL_BACKGROUND"],
        font=dict(color=CONFIG["PANEL_INK"]),
        yaxis_title=CONFIG["CHART_Y_LABEL"],
        xaxis_title="",
    )
    fig.update_xaxes(type="category", tickangle=-45, linecolor=CONFIG["PANEL_INK"])
    fig.update_yaxes(linecolor=CONFIG["PANEL_INK"])
    return fig

"""Unit tests for the layout engine, the graph network and the selectivity chart."""

import math

import pytest

from selectivity_explorer.config import CONFIG, MAX_LAYOUT_NODES
from selectivity_explorer.data_processing import build_graph_from_sparql
from selectivity_explorer.models import ChartPoint, GraphData, GraphLink, GraphNode
from selectivity_explorer.visualizer import (
    ForceLayout,
    build_graph,
    build_graph_html,
    build_selectivity_chart,
    compute_y_domain,
    create_node_type_legend,
    node_color,
    render_error_html,
    seed_positions,
)


def _points(*values):
    return [ChartPoint(target_name=f"T{idx}", selectivity=value, ki=math.nan, ki_best=math.nan)
            for idx, value in enumerate(values)]


def _chain_graph():
    return GraphData(
        nodes=[
            GraphNode(id="m", label="m", type="molecule"),
            GraphNode(id="p", label="p", type="parent"),
            GraphNode(id="t", label="t", type="target"),
        ],
        links=[
            GraphLink(source="m", target="p", relation="hasParentMolecule"),
            GraphLink(source="p", target="t", relation="hasTarget"),
        ],
    )


# ---------------------------------------------------------------------------
# Colors and legend
# ---------------------------------------------------------------------------

class TestNodeColors:

    def test_three_fixed_categories(self):
        assert node_color("molecule") == "#ffcc00"
        assert node_color("parent") == "#66ccff"
        assert node_color("target") == "#ff6699"

    def test_unknown_type_uses_default(self):
        assert node_color("other") == CONFIG["DEFAULT_NODE_COLOR"]

    def test_legend_lists_all_categories(self):
        legend = create_node_type_legend()
        for label in CONFIG["NODE_TYPE_LABELS"].values():
            assert label in legend
        for color in CONFIG["NODE_TYPE_COLORS"].values():
            assert color in legend


# ---------------------------------------------------------------------------
# Force layout
# ---------------------------------------------------------------------------

class TestForceLayout:

    def test_tick_reports_every_node(self):
        layout = ForceLayout(_chain_graph())
        seen = []
        layout.on_tick(seen.append)
        layout.tick()
        assert len(seen) == 1
        assert set(seen[0]) == {"m", "p", "t"}
        assert all(len(pos) == 2 for pos in seen[0].values())

    def test_free_nodes_are_centered(self):
        layout = ForceLayout(_chain_graph(), width=400, height=200)
        positions = layout.tick()
        mean_x = sum(x for x, _ in positions.values()) / 3
        mean_y = sum(y for _, y in positions.values()) / 3
        assert mean_x == pytest.approx(200)
        assert mean_y == pytest.approx(100)

    def test_single_node_sits_at_center(self):
        layout = ForceLayout(GraphData(nodes=[GraphNode(id="x", label="x", type="target")]), width=100, height=50)
        x, y = layout.tick()["x"]
        assert x == pytest.approx(50)
        assert y == pytest.approx(25)

    def test_empty_graph(self):
        layout = ForceLayout(GraphData())
        assert layout.tick() == {}
        assert layout.run(max_ticks=5) == {}

    def test_run_settles(self):
        layout = ForceLayout(_chain_graph())
        layout.run(max_ticks=500)
        assert layout.settled
        assert layout.alpha < CONFIG["ALPHA_MIN"]

    def test_unlinked_nodes_stay_on_canvas(self):
        graph = GraphData(nodes=[GraphNode(id=f"t{idx}", label=f"t{idx}", type="target") for idx in range(10)])
        layout = ForceLayout(graph, width=960, height=600)
        positions = layout.run()
        assert layout.settled
        for x, y in positions.values():
            assert 0 <= x <= 960
            assert 0 <= y <= 600

    def test_unlinked_nodes_stay_on_canvas_every_tick(self):
        graph = GraphData(nodes=[GraphNode(id=f"t{idx}", label=f"t{idx}", type="target") for idx in range(10)])
        layout = ForceLayout(graph, width=300, height=200)
        for _ in range(50):
            for x, y in layout.tick().values():
                assert 0 <= x <= 300
                assert 0 <= y <= 200

    def test_drag_pins_and_release(self):
        layout = ForceLayout(_chain_graph())
        layout.run(max_ticks=500)
        layout.drag_start("p")
        assert layout.alpha_target == CONFIG["DRAG_ALPHA_TARGET"]
        assert layout.pinned == {"p"}

        layout.drag("p", 10.0, 20.0)
        for _ in range(5):
            positions = layout.tick()
            assert positions["p"] == (10.0, 20.0)
        assert layout.alpha > CONFIG["ALPHA_MIN"]

        layout.drag_end("p")
        assert layout.alpha_target == 0.0
        assert layout.pinned == set()


class TestSeedPositions:

    def test_small_graph_is_seeded(self):
        positions = seed_positions(_chain_graph(), max_nodes=3)
        assert set(positions) == {"m", "p", "t"}

    def test_graph_above_cap_is_not_seeded(self):
        assert seed_positions(_chain_graph(), max_nodes=2) == {}

    def test_default_cap(self):
        star = GraphData(
            nodes=[GraphNode(id="hub", label="hub", type="parent")]
            + [GraphNode(id=f"t{idx}", label=f"t{idx}", type="target") for idx in range(MAX_LAYOUT_NODES)],
            links=[GraphLink(source="hub", target=f"t{idx}", relation="hasTarget") for idx in range(MAX_LAYOUT_NODES)],
        )
        assert seed_positions(star) == {}
        assert build_graph(star, seed_positions(star)).nodes[0].get("x") is None


# ---------------------------------------------------------------------------
# Graph network
# ---------------------------------------------------------------------------

class TestBuildGraph:

    def test_nodes_colored_by_type(self, selectivity_result):
        graph = build_graph_from_sparql(selectivity_result)
        net = build_graph(graph)
        colors = {node["id"]: node["color"] for node in net.nodes}
        for node in graph.nodes:
            assert colors[node.id] == node_color(node.type)

    def test_parallel_edges_kept(self, selectivity_result):
        graph = build_graph_from_sparql(selectivity_result)
        net = build_graph(graph)
        assert len(net.edges) == len(graph.links)

    def test_edges_labelled_by_relation(self):
        net = build_graph(_chain_graph())
        assert [(edge["label"], edge["title"]) for edge in net.edges] == [
            ("hasParentMolecule", "hasParentMolecule"),
            ("hasTarget", "hasTarget"),
        ]

    def test_positions_seed_nodes(self):
        net = build_graph(_chain_graph(), positions={"m": (1.0, 2.0)})
        by_id = {node["id"]: node for node in net.nodes}
        assert (by_id["m"]["x"], by_id["m"]["y"]) == (1.0, 2.0)
        assert "x" not in by_id["t"]

    def test_html_includes_drag_release(self):
        html = build_graph_html(build_graph(_chain_graph()))
        assert "dragEnd" in html
        assert html.index("dragEnd") < html.index("</body>")


# ---------------------------------------------------------------------------
# Chart
# ---------------------------------------------------------------------------

class TestYDomain:

    def test_log_uses_actual_bounds(self):
        assert compute_y_domain(_points(4, 16), "log") == (4, 16)

    def test_log_ignores_non_positive_minimum(self):
        assert compute_y_domain(_points(0, 2, 8), "log") == (2, 8)

    def test_log_fallbacks(self):
        assert compute_y_domain([], "log") == (0.1, 100.0)
        assert compute_y_domain(_points(0), "log") == (0.1, 100.0)

    def test_linear(self):
        assert compute_y_domain(_points(0.5, 3), "linear") == (0.0, 3)

    def test_linear_fallback(self):
        assert compute_y_domain([], "linear") == (0.0, 1.0)
        assert compute_y_domain(_points(0), "linear") == (0.0, 1.0)


class TestSelectivityChart:

    def test_one_bar_per_point(self):
        fig = build_selectivity_chart(_points(1, 0.5, 0.25))
        assert len(fig.data) == 1
        assert list(fig.data[0].x) == ["T0", "T1", "T2"]
        assert list(fig.data[0].y) == [1, 0.5, 0.25]
        assert fig.layout.xaxis.tickangle == -45

    def test_log_axis_range(self):
        fig = build_selectivity_chart(_points(4, 16), "log")
        assert fig.layout.yaxis.type == "log"
        assert list(fig.layout.yaxis.range) == pytest.approx([math.log10(4), math.log10(16)])

    def test_linear_axis_range(self):
        fig = build_selectivity_chart(_points(4, 16), "linear")
        assert fig.layout.yaxis.type == "linear"
        assert list(fig.layout.yaxis.range) == pytest.approx([0, 16])

    def test_empty_state_message(self):
        fig = build_selectivity_chart([])
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == CONFIG["CHART_EMPTY_MESSAGE"]


def test_error_html_is_escaped():
    html = render_error_html("<img src=x onerror=alert(1)>")
    assert "<img" not in html
    assert "&lt;img" in html

import pytest

from santra.models.graph import GraphData, GraphLink, GraphNode
from santra.services.graph_renderer import MAX_SCALE, RenderContext, truncate_label


def _graph(titles, links=()) -> GraphData:
    nodes = [
        GraphNode(id=f"n{index}", title=title, x=120.0 * (index + 1), y=120.0)
        for index, title in enumerate(titles)
    ]
    return GraphData(nodes=nodes, links=[GraphLink(source=s, target=t) for s, t in links])


@pytest.fixture
def context() -> RenderContext:
    ctx = RenderContext()
    ctx.render(_graph(["Apple Orchard Plan", "Banana Market", "Cherry"], [("n0", "n1"), ("n1", "n2")]))
    return ctx


def test_summary_labels(context: RenderContext) -> None:
    assert context.summary() == ("3 nodes", "2 connections")


def test_summary_singular_and_empty() -> None:
    ctx = RenderContext()
    assert ctx.summary() == ("0 nodes", "0 connections")

    ctx.render(_graph(["Solo"]))
    assert ctx.summary() == ("1 node", "0 connections")


def test_render_empty_graph_clears_previous_view(context: RenderContext) -> None:
    context.render(GraphData())

    assert context.node_elements == []
    assert context.link_elements == []
    assert context.simulation is None


def test_render_replaces_previous_state(context: RenderContext) -> None:
    context.highlight_node("n0")

    context.render(_graph(["Other"]))

    assert [element.id for element in context.node_elements] == ["n0"]
    assert context.highlighted_id is None
    assert not context.node_elements[0].highlighted


def test_links_with_unknown_endpoints_are_dropped() -> None:
    ctx = RenderContext()
    ctx.render(_graph(["A", "B"], [("n0", "n1"), ("n0", "ghost")]))

    assert len(ctx.link_elements) == 1


def test_render_settles_layout(context: RenderContext) -> None:
    assert context.simulation.settled
    link = context.link_elements[0]
    source = context.node_elements[link.source]
    assert (link.x1, link.y1) == (source.x, source.y)


def test_tick_updates_elements() -> None:
    ctx = RenderContext()
    ctx.render(_graph(["A", "B"], [("n0", "n1")]), settle=False)
    assert (ctx.node_elements[0].x, ctx.node_elements[0].y) == (120.0, 120.0)

    ctx.simulation.tick()

    assert (ctx.node_elements[0].x, ctx.node_elements[0].y) == ctx.simulation.position(0)


def test_highlight_exactly_one_node(context: RenderContext) -> None:
    assert context.highlight_node("n0")
    assert context.highlight_node("n2")

    assert [element.highlighted for element in context.node_elements] == [False, False, True]
    assert context.highlighted_id == "n2"


def test_highlight_unknown_node_clears_highlight(context: RenderContext) -> None:
    context.highlight_node("n1")

    assert context.highlight_node("missing") is False
    assert not any(element.highlighted for element in context.node_elements)


def test_drag_lifecycle(context: RenderContext) -> None:
    context.drag_start("n1")
    assert context.node_elements[1].dragging
    assert context.simulation.alpha >= 0.3

    context.drag("n1", 40.0, 50.0)
    element = context.node_elements[1]
    assert (element.x, element.y) == (40.0, 50.0)

    context.drag_end("n1")
    assert not context.node_elements[1].dragging
    assert context.simulation.fx[1] is None
    assert context.simulation.alpha_target == 0.0
    assert context.simulation.settled


def test_drag_unknown_node_raises(context: RenderContext) -> None:
    with pytest.raises(KeyError):
        context.drag_start("missing")


def test_zoom_in_out_and_reset(context: RenderContext) -> None:
    context.zoom_in()
    assert context.scale == pytest.approx(1.2)
    assert context.translate_x == pytest.approx(400 - 400 * 1.2)

    context.zoom_out()
    assert context.scale == pytest.approx(1.0)
    assert context.translate_x == pytest.approx(0.0)

    for _ in range(30):
        context.zoom_in()
    assert context.scale == MAX_SCALE

    context.reset_view()
    assert (context.scale, context.translate_x, context.translate_y) == (1.0, 0.0, 0.0)


def test_truncate_label() -> None:
    assert truncate_label("Cherry") == "Cherry"
    assert truncate_label("Apple Orchard Plan") == "Apple Orchar..."


def test_svg_output(context: RenderContext) -> None:
    context.highlight_node("n0")

    svg = context.to_svg()

    assert svg.startswith("<svg")
    assert 'data-nodes="3 nodes"' in svg
    assert 'data-links="2 connections"' in svg
    assert svg.count('<line class="link"') == 2
    assert svg.count("<circle") == 3
    assert "Apple Orchar...</text>" in svg
    assert "<title>Apple Orchard Plan</title>" in svg
    assert 'class="node highlighted" data-id="n0"' in svg


def test_svg_escapes_titles() -> None:
    ctx = RenderContext()
    ctx.render(_graph(["<b>&</b>"]))

    svg = ctx.to_svg()

    assert "<b>" not in svg
    assert "&lt;b&gt;&amp;&lt;/b&gt;" in svg

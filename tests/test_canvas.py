"""End-to-end tests for the Canvas API."""

import asyncio

from canvasflow.graph.node_types import NodeType
from canvasflow.graph.predicates import is_image


def test_generate_from_connected_image(canvas, service, image_media):
    m1 = canvas.add_media_node(image_media, (0, 0))
    g1 = canvas.add_generation_node(NodeType.GENERATE, (400, 0))
    canvas.connect(m1.id, g1.id)
    canvas.update_node_data(g1.id, {"prompt": "a sunrise"})

    assert canvas.resolve_inputs(g1.id, is_image) == [m1]

    result = asyncio.run(canvas.generate(g1.id))

    assert result.succeeded
    data = canvas.get_node(g1.id).data
    assert data.output_url == "https://x/out.mp4"
    assert data.is_generating is False
    assert len(service.calls) == 1


def test_removing_media_disconnects_it(canvas, image_media):
    m1 = canvas.add_media_node(image_media, (0, 0))
    g1 = canvas.add_generation_node(NodeType.GENERATE, (400, 0))
    canvas.connect(m1.id, g1.id)
    canvas.update_node_data(g1.id, {"prompt": "a sunrise"})

    canvas.remove_node(m1.id)

    assert canvas.edges == ()
    assert canvas.resolve_inputs(g1.id, is_image) == []


def test_generate_without_inputs_is_local_failure(canvas, service):
    g1 = canvas.add_generation_node(NodeType.GENERATE, (400, 0))
    canvas.update_node_data(g1.id, {"prompt": "a sunrise"})

    result = asyncio.run(canvas.generate(g1.id))

    assert not result.submitted
    assert service.calls == []
    data = canvas.get_node(g1.id).data
    assert data.error == "Connect a start frame image"
    assert data.is_generating is False


def test_edge_order_not_position(canvas, make_media):
    low = canvas.add_media_node(make_media(name="low.png"), (0, 500))
    high = canvas.add_media_node(make_media(name="high.png"), (0, 0))
    g1 = canvas.add_generation_node(NodeType.GENERATE, (400, 0))
    canvas.connect(low.id, g1.id)
    canvas.connect(high.id, g1.id)

    assert [n.id for n in canvas.resolve_inputs(g1.id, is_image)] == [low.id, high.id]


def test_change_batches_route_through_store(canvas, image_media):
    m1 = canvas.add_media_node(image_media, (0, 0))
    section = canvas.add_section_node((-400, 0))
    canvas.apply_node_changes(
        [
            {"type": "position", "id": m1.id, "position": {"x": 10, "y": 10}},
            {"type": "remove", "id": section.id},
        ]
    )

    assert [n.id for n in canvas.nodes] == [m1.id]
    assert canvas.get_node(m1.id).position.x == 10

    g1 = canvas.add_generation_node("edit", (400, 0))
    edge = canvas.connect(m1.id, g1.id)
    canvas.apply_edge_changes([{"type": "remove", "id": edge.id}])
    assert canvas.edges == ()


def test_removing_input_after_generate_call_keeps_request(canvas, service, image_media):
    m1 = canvas.add_media_node(image_media, (0, 0))
    g1 = canvas.add_generation_node(NodeType.GENERATE, (400, 0))
    canvas.connect(m1.id, g1.id)
    canvas.update_node_data(g1.id, {"prompt": "a sunrise"})

    pending = canvas.generate(g1.id)
    canvas.remove_node(m1.id)
    result = asyncio.run(pending)

    assert result.succeeded
    _, arguments = service.calls[0]
    assert arguments["start_image_url"] == image_media.url

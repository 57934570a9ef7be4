import numpy as np

from Graph_Web.layout.force_directed import ForceDirectedLayout
from Graph_Web.view import resolve_pick, snapshot


def test_snapshot_references_layout_buffers(triangle_graph):
    layout = ForceDirectedLayout(triangle_graph, dof=3)
    triangle_graph.set_layout(layout)
    snap = snapshot(triangle_graph, frame=7)
    assert snap.frame == 7
    assert snap.positions is layout.get_node_position()
    assert snap.colors.shape == (3, 4)
    assert snap.edge_positions.shape == (2, 2, 3)
    assert snap.edge_node_index == (0, 1, 0, 2)
    assert not snap.positions.flags.writeable


def test_snapshot_survives_later_steps(triangle_graph):
    layout = ForceDirectedLayout(triangle_graph, dof=2)
    triangle_graph.set_layout(layout)
    snap = snapshot(triangle_graph)
    kept = snap.positions.copy()
    layout.step()
    np.testing.assert_array_equal(snap.positions, kept)


def test_snapshot_without_layout(triangle_graph):
    snap = snapshot(triangle_graph)
    assert snap.positions.size == 0
    assert snap.edge_node_index == ()


def test_resolve_pick(triangle_graph):
    layout = ForceDirectedLayout(triangle_graph, dof=2)
    triangle_graph.set_layout(layout)
    info = resolve_pick(triangle_graph, "nodes", 2)
    assert info.node.id == "C"
    np.testing.assert_array_equal(info.position, layout.get_node_position()[2])
    missing = resolve_pick(triangle_graph, "nodes", 9)
    assert missing.node is None and missing.position is None

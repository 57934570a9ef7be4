import threading
import time

import pytest

from Graph_Web.engine.driver import LayoutDriver
from Graph_Web.graph.node import GraphNode
from Graph_Web.layout.force_directed import ForceDirectedLayout


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def test_tick_only_steps_when_running(triangle_graph):
    layout = ForceDirectedLayout(triangle_graph, dof=2)
    triangle_graph.set_layout(layout)
    driver = LayoutDriver(triangle_graph)
    assert not driver.tick()
    triangle_graph.start_layout()
    assert driver.tick()
    assert driver.tick()
    assert driver.frames == 2
    assert layout.current_step == 2


def test_background_thread_steps_and_pauses(triangle_graph):
    layout = ForceDirectedLayout(triangle_graph, dof=3)
    triangle_graph.set_layout(layout)
    triangle_graph.start_layout()
    with LayoutDriver(triangle_graph, tick_rate=0.001) as driver:
        assert _wait_for(lambda: driver.frames >= 5)
        triangle_graph.pause_layout()
        time.sleep(0.02)
        paused_at = layout.current_step
        time.sleep(0.05)
        assert layout.current_step == paused_at
        assert driver.is_alive
    assert not driver.is_alive


def test_mismatch_pauses_layout(triangle_graph, caplog):
    triangle_graph.set_layout(ForceDirectedLayout(triangle_graph, dof=2))
    triangle_graph.start_layout()
    triangle_graph.add_node(GraphNode("D"))
    driver = LayoutDriver(triangle_graph)
    with caplog.at_level("ERROR", logger="Graph_Web.engine.driver"):
        assert not driver.tick()
    assert not triangle_graph.layout_running
    assert "layout step failed" in caplog.text


def test_overlapping_tick_is_skipped(triangle_graph):
    triangle_graph.set_layout(ForceDirectedLayout(triangle_graph, dof=2))
    triangle_graph.start_layout()
    driver = LayoutDriver(triangle_graph)
    result = {}
    # hold the step lock as if a step were in flight on another thread
    with triangle_graph._step_lock:
        worker = threading.Thread(target=lambda: result.setdefault("stepped", driver.tick()))
        worker.start()
        worker.join(timeout=1.0)
    assert result["stepped"] is False
    assert driver.frames == 0


def test_invalid_tick_rate(triangle_graph):
    with pytest.raises(ValueError):
        LayoutDriver(triangle_graph, tick_rate=0)


def test_restart_waits_for_previous_thread(triangle_graph, monkeypatch):
    entered = threading.Event()
    release = threading.Event()

    def slow_step():
        entered.set()
        release.wait(2.0)
        return True

    monkeypatch.setattr(triangle_graph, "layout_step", slow_step)
    driver = LayoutDriver(triangle_graph, tick_rate=0.001)
    driver.start()
    assert entered.wait(1.0)
    driver.stop(timeout=0.01)
    assert driver.is_alive
    with pytest.raises(RuntimeError):
        driver.start()

    release.set()
    driver.stop()
    assert not driver.is_alive
    driver.start()
    driver.stop()
    alive = [t for t in threading.enumerate() if t.name == "layout-driver"]
    assert alive == []


def test_driver_exported_from_package():
    import Graph_Web

    assert Graph_Web.LayoutDriver is LayoutDriver

import random

import numpy as np
import pytest

from Graph_Web.layout.base import GraphLayout


def test_gauss_random_moments():
    random.seed(42)
    samples = np.array([GraphLayout.gauss_random() for _ in range(20000)])
    assert abs(samples.mean()) < 0.05
    assert samples.std() == pytest.approx(1.0, abs=0.05)


def test_gauss_random_rejects_outside_disk(monkeypatch):
    # (1, 1) maps to r = 2 and is rejected; (0.75, 0.75) maps to u = v = 0.5
    draws = iter([1.0, 1.0, 0.75, 0.75])
    monkeypatch.setattr(random, "random", lambda: next(draws))
    r = 0.5
    assert GraphLayout.gauss_random() == pytest.approx(0.5 * np.sqrt(-2 * np.log(r) / r))


def test_gauss_random_rejects_origin(monkeypatch):
    draws = iter([0.5, 0.5, 0.75, 0.75])
    monkeypatch.setattr(random, "random", lambda: next(draws))
    assert np.isfinite(GraphLayout.gauss_random())


def test_randn_scales_to_mean_and_std(triangle_graph):
    class _Probe(GraphLayout):
        number_of_nodes = 0
        number_of_edges = 0

        def step(self): ...
        def reset(self): ...
        def get_node_position(self): ...
        def get_node_color(self): ...
        def get_node_size(self): ...
        def get_edge_position(self): ...
        def get_edge_color(self): ...

    probe = _Probe(triangle_graph)
    samples = probe.randn(5.0, 2.0, (4000, 2))
    assert samples.shape == (4000, 2)
    assert samples.mean() == pytest.approx(5.0, abs=0.15)
    assert samples.std() == pytest.approx(2.0, abs=0.15)
    assert isinstance(probe.randn(0.0, 1.0), float)


def test_base_is_abstract(triangle_graph):
    with pytest.raises(TypeError):
        GraphLayout(triangle_graph)

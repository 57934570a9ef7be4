# config.py

import os


class Config:
    """Global configuration for graph layout runs.

    Attributes
    ----------
    tick_rate:
        Seconds between layout ticks when a :class:`LayoutDriver` owns the
        schedule. Defaults to roughly 60 Hz.
    layout:
        Force-directed constants. ``ka`` is the axis-2 gravity, ``kr2`` the
        inverse-square repulsion, ``ks`` the edge spring, ``ks2`` the overlap
        penalty. ``dt`` starts the integration timestep which is annealed by
        ``anneal_rate`` per step after ``anneal_after`` steps until it
        reaches ``dt_max``.
    driver_category:
        Category tag used to pick an implicit subgraph seed.
    device_category:
        Category tag whose nodes get the heavy mass multiplier.
    strict_ids:
        When ``True`` duplicate node or edge ids raise instead of warning.
    strict_numerics:
        When ``True`` a non-finite position raises instead of being rolled
        back.
    log_interval:
        Number of steps between frame records in headless runs.
    """

    base_dir = os.path.abspath(os.path.dirname(__file__))
    config_file: str | None = None
    output_dir = os.path.join(base_dir, "output")

    @staticmethod
    def output_path(*parts: str) -> str:
        """Return absolute path under the output directory."""
        return os.path.join(Config.output_dir, *parts)

    tick_rate = 1.0 / 60.0

    default_num_hops = 3
    default_dof = 3
    log_interval = 100

    strict_ids = False
    strict_numerics = False

    layout = {
        "ka": 1e-3,
        "kr2": 1e-3,
        "ks": 1e-3,
        "ks2": 1e-2,
        "dt": 10.0,
        "dt_max": 50.0,
        "anneal_after": 100,
        "anneal_rate": 1.005,
        "damping": 0.95,
        "rest_length": 4.0,
        "node_size": 0.3,
    }

    driver_category = "driver"
    device_category = "device"

    # RGBA, 0-255
    node_colors = {
        "driver": [228, 26, 28, 255],
        "rider": [55, 126, 184, 255],
        "user": [128, 128, 128, 255],
        "device": [253, 191, 111, 255],
        "trip": [0, 255, 0, 255],
    }
    default_node_color = [255, 255, 255, 255]

    # Two RGBA endpoint colours per edge, already normalised
    edge_colors = {
        "user_trip": [0.0, 0.0, 1.0, 1.0, 0.0, 0.0, 1.0, 1.0],
        "user_device": [1.0, 1.0, 0.0, 1.0, 1.0, 1.0, 0.0, 1.0],
    }
    default_edge_color = [1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0]

    # Mapping of ``category`` -> enabled flag for JSON line frame records
    log_files = {
        "layout": True,
        "subgraph": True,
    }

    @classmethod
    def is_log_enabled(cls, category: str) -> bool:
        """Return ``True`` if JSON line records for ``category`` are enabled."""
        return bool(cls.log_files.get(category, False))

    @classmethod
    def load_from_file(cls, path: str) -> None:
        """Load configuration values from a JSON file.

        Only keys that already exist as attributes on ``Config`` will be
        assigned. Nested dictionaries are merged when the existing attribute
        is also a ``dict``. A relative ``output_dir`` is resolved against the
        directory containing ``path``.

        Parameters
        ----------
        path:
            Path to the JSON configuration file.
        """
        import json

        if not os.path.exists(path):
            raise FileNotFoundError(path)
        with open(path) as f:
            data = json.load(f)
        cls.config_file = os.path.abspath(path)
        base_dir = os.path.dirname(cls.config_file)

        for key, value in data.items():
            if not hasattr(cls, key):
                continue
            if key == "output_dir" and not os.path.isabs(value):
                value = os.path.abspath(os.path.join(base_dir, value))
            current = getattr(cls, key)
            if isinstance(current, dict) and isinstance(value, dict):
                current.update(value)
            else:
                setattr(cls, key, value)

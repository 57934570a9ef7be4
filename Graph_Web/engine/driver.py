"""Host-owned scheduler stepping a graph layout at a fixed cadence."""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Optional

from ..config import Config
from ..errors import GraphWebError

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..graph.model import Graph

logger = logging.getLogger(__name__)


class LayoutDriver:
    """Call :meth:`Graph.layout_step` periodically on a background thread.

    The graph itself never schedules work. Hosts with their own event loop
    call :meth:`tick` directly; others use :meth:`start` / :meth:`stop`.
    Whether a tick actually steps is decided by the graph's running flag,
    so :meth:`Graph.pause_layout` halts buffer mutation by the next tick.
    """

    def __init__(self, graph: "Graph", tick_rate: float | None = None) -> None:
        self.graph = graph
        self.tick_rate = Config.tick_rate if tick_rate is None else tick_rate
        if self.tick_rate <= 0:
            raise ValueError("tick_rate must be positive")
        self._thread: Optional[threading.Thread] = None
        # stop flag of the current thread; each thread gets a fresh one
        self._stop_event = threading.Event()
        self._stop_event.set()
        self._frames = 0
        self._frames_lock = threading.Lock()

    @property
    def frames(self) -> int:
        """Number of completed layout steps."""

        with self._frames_lock:
            return self._frames

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> bool:
        """Run one layout step synchronously.

        A :class:`~Graph_Web.errors.GraphWebError` raised by the step is
        logged and pauses the layout instead of propagating, so a render loop
        driving ticks keeps running.
        """

        try:
            stepped = self.graph.layout_step()
        except GraphWebError:
            logger.exception("layout step failed; pausing layout")
            self.graph.pause_layout()
            return False
        if stepped:
            with self._frames_lock:
                self._frames += 1
        return stepped

    def start(self) -> None:
        """Start the background thread if it is not already running.

        Raises
        ------
        RuntimeError
            If a previous thread was asked to stop but is still finishing
            its step.
        """

        if self.is_alive:
            if not self._stop_event.is_set():
                return
            raise RuntimeError("previous layout thread is still stopping")
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._run_loop, args=(stop_event,), name="layout-driver", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = 1.0) -> None:
        """Stop the background thread, letting an in-flight step finish.

        If the thread outlives ``timeout`` it stays attached so a later
        :meth:`stop` can join it.
        """

        self._stop_event.set()
        thread = self._thread
        if thread is None:
            return
        thread.join(timeout=timeout)
        if thread.is_alive():
            logger.warning("layout thread still finishing a step after %.3fs", timeout or 0.0)
        else:
            self._thread = None

    def _run_loop(self, stop_event: threading.Event) -> None:
        next_tick = time.monotonic()
        while not stop_event.is_set():
            self.tick()
            next_tick += self.tick_rate
            delay = next_tick - time.monotonic()
            if delay < 0:
                # overran the period: coalesce missed ticks
                next_tick = time.monotonic()
                delay = 0.0
            stop_event.wait(delay)

    def __enter__(self) -> "LayoutDriver":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


__all__ = ["LayoutDriver"]

"""Node identity generator - session-scoped, strictly increasing node ids.

Each editing session owns one NodeIdGenerator; there is no module-level
counter, so independent sessions never share a sequence. Nodes loaded from
YAML draw from the same generator as palette nodes, so the two never collide.

    ids = NodeIdGenerator()
    ids.next_id()   # "node-1"
    ids.next_id()   # "node-2"

reset() exists for deterministic test setup only.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger("pipeline_canvas.pipeline.node_ids")

DEFAULT_PREFIX = "node-"


class NodeIdGenerator:
    """Hands out '<prefix><n>' ids with n = 1, 2, 3, ...

    Increments are guarded by a lock so a generator shared by worker threads
    still never repeats a value. reset() must not race with next_id().
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX, start: int = 0) -> None:
        if not prefix:
            raise ValueError("prefix must be a non-empty string")
        if start < 0:
            raise ValueError(f"start must be >= 0, got {start}")
        self._prefix = prefix
        self._counter = start
        self._lock = threading.Lock()

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def current(self) -> int:
        """Counter value of the most recently issued id (0 before the first)."""
        return self._counter

    def next_id(self) -> str:
        with self._lock:
            self._counter += 1
            value = self._counter
        return f"{self._prefix}{value}"

    def reset(self) -> None:
        with self._lock:
            logger.debug("Resetting %s counter from %d", self._prefix, self._counter)
            self._counter = 0

    def __repr__(self) -> str:
        return f"NodeIdGenerator(prefix={self._prefix!r}, current={self._counter})"

"""A readiness barrier shared by the servers of an application."""

from __future__ import annotations

import threading

from springkit.gs import core


class ReadySignal(core.ReadySignal):
    """Counts servers until each is ready or intercepted, then releases them."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._count = 0
        self._ready = threading.Event()
        self._intercepted = False

    def add(self) -> None:
        """Expect one more server."""
        with self._cond:
            self._count += 1

    def _done(self) -> None:
        with self._cond:
            if self._count <= 0:
                raise ValueError("negative ready signal counter")
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def trigger_and_wait(self) -> threading.Event:
        """Report one server ready; return the event set when serving may start."""
        self._done()
        return self._ready

    def intercepted(self) -> bool:
        """Tell whether some server failed before becoming ready."""
        with self._cond:
            return self._intercepted

    def intercept(self) -> None:
        """Report one server failed before becoming ready."""
        with self._cond:
            self._intercepted = True
        self._done()

    def wait(self) -> None:
        """Block until every expected server has reported."""
        with self._cond:
            self._cond.wait_for(lambda: self._count == 0)

    def close(self) -> None:
        """Release all servers waiting to serve."""
        self._ready.set()
"""Synchronous broadcast channel used for refresh and language-change signals."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class EventChannel(Generic[T]):
    """Ordered, synchronous publish/subscribe channel.

    Every listener runs before :meth:`publish` returns. A failing listener is
    logged and does not prevent the remaining listeners from running.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Callable[[T], None]] = []
        self._lock = Lock()

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it again."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, value: T) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(value)
            except Exception:
                logger.exception("Listener %r failed while handling %s", listener, self.name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)


__all__ = ["EventChannel"]

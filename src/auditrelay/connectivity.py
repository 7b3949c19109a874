"""Online/offline state as seen by the pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

ConnectivityListener = Callable[[bool], None]
Unsubscribe = Callable[[], None]


class ConnectivityObserver(Protocol):
    """Reports current connectivity and notifies on transitions."""

    def is_online(self) -> bool: ...

    def subscribe(self, listener: ConnectivityListener) -> Unsubscribe: ...


class AlwaysOnline:
    """Observer for hosts that have no connectivity signal."""

    def is_online(self) -> bool:
        return True

    def subscribe(self, listener: ConnectivityListener) -> Unsubscribe:
        del listener
        return lambda: None


class ConnectivityMonitor:
    """Connectivity state driven by the host through ``set_online``.

    Listeners run synchronously and only on an actual transition.
    """

    def __init__(self, online: bool = True) -> None:
        self._online = online
        self._listeners: list[ConnectivityListener] = []

    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: ConnectivityListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_online(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in list(self._listeners):
            try:
                listener(online)
            except Exception:
                logger.exception("Connectivity listener failed")

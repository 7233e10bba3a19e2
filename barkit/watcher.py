"""Status notifier watcher: registry of tray hosts and items."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

log = logging.getLogger(__name__)

DEFAULT_HOST_PATH = "/StatusNotifierHost"
DEFAULT_ITEM_PATH = "/StatusNotifierItem"
_MAX_NAME_LENGTH = 255
_ELEMENT = re.compile(r"[A-Za-z0-9_-]+")


class WatcherError(Exception):
    """A registration request was rejected."""


def is_valid_bus_name(name: Optional[str]) -> bool:
    """Return whether ``name`` is a valid unique or well-known D-Bus name."""
    if not isinstance(name, str) or not name or len(name) > _MAX_NAME_LENGTH:
        return False
    unique = name.startswith(":")
    elements = (name[1:] if unique else name).split(".")
    if len(elements) < 2:
        return False
    for element in elements:
        if not _ELEMENT.fullmatch(element):
            return False
        if not unique and element[0].isdigit():
            return False
    return True


class _WatchType(enum.Enum):
    HOST = "host"
    ITEM = "item"


@dataclass(frozen=True)
class _Watch:
    type: _WatchType
    service: str
    bus_name: str
    object_path: str


def _resolve(service: str, sender: Optional[str], default_path: str):
    if service.startswith("/"):
        return sender, service
    return service, default_path


class Watcher:
    """Tracks registered hosts and items and reports changes to listeners."""

    def __init__(self) -> None:
        self._hosts: List[_Watch] = []
        self._items: List[_Watch] = []
        self.is_host_registered = False
        self.on_host_registered: List[Callable[[], None]] = []
        self.on_item_registered: List[Callable[[str], None]] = []
        self.on_item_unregistered: List[Callable[[str], None]] = []

    @staticmethod
    def _find(watches: List[_Watch], bus_name: str, object_path: str) -> Optional[_Watch]:
        return next(
            (w for w in watches if w.bus_name == bus_name and w.object_path == object_path),
            None,
        )

    def _emit_host_registered(self) -> None:
        for callback in list(self.on_host_registered):
            callback()

    def register_host(self, service: str, sender: Optional[str] = None) -> None:
        """Register a host; raise WatcherError for a bad or duplicate name."""
        bus_name, object_path = _resolve(service, sender, DEFAULT_HOST_PATH)
        if not is_valid_bus_name(bus_name):
            raise WatcherError(f"D-Bus bus name '{bus_name}' is not valid")
        if self._find(self._hosts, bus_name, object_path) is not None:
            raise WatcherError(
                f"Status Notifier Host with bus name '{bus_name}' and object path "
                f"'{object_path}' is already registered"
            )
        self._hosts.insert(0, _Watch(_WatchType.HOST, service, bus_name, object_path))
        if not self.is_host_registered:
            self.is_host_registered = True
            self._emit_host_registered()

    def register_item(self, service: str, sender: Optional[str] = None) -> bool:
        """Register an item; return False if it was already registered."""
        bus_name, object_path = _resolve(service, sender, DEFAULT_ITEM_PATH)
        if not is_valid_bus_name(bus_name):
            raise WatcherError(f"D-Bus bus name '{bus_name}' is not valid")
        if self._find(self._items, bus_name, object_path) is not None:
            log.warning(
                "Status Notifier Item with bus name '%s' and object path '%s' is already registered",
                bus_name, object_path,
            )
            return False
        self._items.insert(0, _Watch(_WatchType.ITEM, service, bus_name, object_path))
        for callback in list(self.on_item_registered):
            callback(f"{bus_name}{object_path}")
        return True

    def name_vanished(self, bus_name: str, object_path: Optional[str] = None) -> None:
        """Drop hosts and items owned by ``bus_name`` (and ``object_path`` if given)."""

        def matches(watch: _Watch) -> bool:
            return watch.bus_name == bus_name and (
                object_path is None or watch.object_path == object_path
            )

        gone_hosts = [w for w in self._hosts if matches(w)]
        for watch in gone_hosts:
            self._hosts.remove(watch)
            if not self._hosts:
                self.is_host_registered = False
                self._emit_host_registered()

        gone_items = [w for w in self._items if matches(w)]
        for watch in gone_items:
            self._items.remove(watch)
            for callback in list(self.on_item_unregistered):
                callback(f"{watch.bus_name}{watch.object_path}")

    def registered_items(self) -> List[str]:
        """Return registered items as bus name followed by object path, newest first."""
        return [f"{w.bus_name}{w.object_path}" for w in self._items]
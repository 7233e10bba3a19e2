"""Status notifier host: tracks the tray items registered with a watcher."""

from __future__ import annotations

import itertools
import os
from typing import Callable, List, Tuple

DEFAULT_ITEM_PATH = "/StatusNotifierItem"

ItemKey = Tuple[str, str]


def split_service(service: str) -> ItemKey:
    """Split a registered service into (bus name, object path)."""
    index = service.find("/")
    if index >= 0:
        return service[:index], service[index:]
    return service, DEFAULT_ITEM_PATH


class Host:
    """Keeps the list of known items and reports additions and removals."""

    _ids = itertools.count()

    def __init__(
        self,
        on_add: Callable[[ItemKey], None],
        on_remove: Callable[[ItemKey], None],
    ) -> None:
        self.host_id = next(Host._ids)
        self.bus_name = f"org.kde.StatusNotifierHost-{os.getpid()}-{self.host_id}"
        self.object_path = f"/StatusNotifierHost/{self.host_id}"
        self._on_add = on_add
        self._on_remove = on_remove
        self._items: List[ItemKey] = []

    @property
    def items(self) -> List[ItemKey]:
        """Known items as (bus name, object path) pairs, in arrival order."""
        return list(self._items)

    def add_registered_item(self, service: str) -> bool:
        """Add the item for ``service`` unless already known; True if added."""
        key = split_service(service)
        if key in self._items:
            return False
        self._items.append(key)
        self._on_add(key)
        return True

    def item_unregistered(self, service: str) -> bool:
        """Remove the item for ``service``; True if it was known."""
        key = split_service(service)
        if key not in self._items:
            return False
        self._on_remove(key)
        self._items.remove(key)
        return True

    def clear(self) -> None:
        """Forget every item, as when the watcher goes away."""
        self._items.clear()
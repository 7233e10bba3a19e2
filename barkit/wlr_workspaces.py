"""Workspaces reported by a compositor's workspace protocol: state, labels and ordering."""

from __future__ import annotations

import enum
import functools
import itertools
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

log = logging.getLogger(__name__)

DEFAULT_FORMAT = "{name}"

# State values as sent on the wire by the workspace protocol.
PROTOCOL_STATE_ACTIVE = 0
PROTOCOL_STATE_URGENT = 1
PROTOCOL_STATE_HIDDEN = 2

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_workspace_ids = itertools.count(1)


class WorkspaceState(enum.IntFlag):
    """State flags of a workspace."""

    NONE = 0
    ACTIVE = 1
    URGENT = 2
    HIDDEN = 4
    EMPTY = 8


_PROTOCOL_FLAGS = {
    PROTOCOL_STATE_ACTIVE: WorkspaceState.ACTIVE,
    PROTOCOL_STATE_URGENT: WorkspaceState.URGENT,
    PROTOCOL_STATE_HIDDEN: WorkspaceState.HIDDEN,
}


def persistent_workspace_names(
    config: Optional[Mapping[str, Any]], output_name: str, all_outputs: bool = False
) -> List[str]:
    """Return the configured persistent workspace names that belong on ``output_name``."""
    config = config or {}
    persistent = config.get("persistent_workspaces")
    if not isinstance(persistent, Mapping) or all_outputs:
        return []
    names = []
    for name in sorted(persistent):
        outputs = persistent[name]
        if isinstance(outputs, list) and outputs:
            if any(str(output) == output_name for output in outputs):
                names.append(name)
        else:
            names.append(name)
    return names


def _leading_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def sort_workspaces(
    workspaces: Iterable["Workspace"],
    sort_by_number: bool = False,
    sort_by_name: bool = True,
    sort_by_coordinates: bool = True,
) -> List["Workspace"]:
    """Return the workspaces in display order."""

    def less(lhs: Workspace, rhs: Workspace) -> bool:
        if sort_by_number:
            left, right = _leading_int(lhs.name), _leading_int(rhs.name)
            if left is not None and right is not None:
                return left < right
        if sort_by_name:
            if sort_by_coordinates and lhs.name == rhs.name:
                return lhs.coordinates < rhs.coordinates
            return lhs.name < rhs.name
        if sort_by_coordinates:
            return lhs.coordinates < rhs.coordinates
        return lhs.id < rhs.id

    def compare(lhs: Workspace, rhs: Workspace) -> int:
        if less(lhs, rhs):
            return -1
        if less(rhs, lhs):
            return 1
        return 0

    return sorted(workspaces, key=functools.cmp_to_key(compare))


class Workspace:
    """One workspace button."""

    def __init__(
        self,
        workspace_id: int,
        name: str = "",
        config: Optional[Mapping[str, Any]] = None,
        persistent: bool = False,
    ) -> None:
        self.id = workspace_id
        self.name = name
        self.config: Dict[str, Any] = dict(config or {})
        self.persistent = persistent
        self.coordinates: List[int] = []
        self.state = WorkspaceState.EMPTY if persistent else WorkspaceState.NONE
        fmt = self.config.get("format")
        self.format = fmt if isinstance(fmt, str) else DEFAULT_FORMAT
        self.with_icon = "{icon}" in self.format

    @property
    def is_active(self) -> bool:
        return bool(self.state & WorkspaceState.ACTIVE)

    @property
    def is_urgent(self) -> bool:
        return bool(self.state & WorkspaceState.URGENT)

    @property
    def is_hidden(self) -> bool:
        return bool(self.state & WorkspaceState.HIDDEN)

    @property
    def is_empty(self) -> bool:
        return bool(self.state & WorkspaceState.EMPTY)

    def handle_state(self, states: Iterable[int]) -> WorkspaceState:
        """Replace the state from a list of protocol state values."""
        state = WorkspaceState.NONE
        for value in states:
            state |= _PROTOCOL_FLAGS.get(value, WorkspaceState.NONE)
        self.state = state
        return state

    def _config_icons(self) -> Dict[str, str]:
        icons = self.config.get("format-icons")
        if not isinstance(icons, Mapping):
            return {}
        return {str(key): str(value) for key, value in icons.items()}

    def icon(self, icons: Optional[Mapping[str, str]] = None) -> str:
        """Return the icon for this workspace, falling back to its name."""
        icons = self._config_icons() if icons is None else icons
        if self.is_active and "active" in icons:
            return icons["active"]
        if self.name in icons:
            return icons[self.name]
        if self.is_empty and "persistent" in icons:
            return icons["persistent"]
        if "default" in icons:
            return icons["default"]
        return self.name

    def label(self, icons: Optional[Mapping[str, str]] = None) -> str:
        """Return the button text."""
        return self.format.format(name=self.name, icon=self.icon(icons) if self.with_icon else "")

    def css_classes(self) -> Set[str]:
        """Return the style classes of the button."""
        flags = (
            ("active", self.is_active),
            ("urgent", self.is_urgent),
            ("hidden", self.is_hidden),
            ("persistent", self.is_empty),
        )
        return {name for name, enabled in flags if enabled}

    def click_action(self, button: int) -> Optional[str]:
        """Return "activate" or "close" for a click with ``button``, or None."""
        keys = {1: "on-click", 2: "on-click-middle", 3: "on-click-right"}
        key = keys.get(button)
        action = self.config.get(key) if key else None
        if not isinstance(action, str) or not action:
            return None
        if action in ("activate", "close"):
            return action
        log.warning("Unknown action %s", action)
        return None


class WorkspaceGroup:
    """The workspaces of one group, with configured persistent placeholders."""

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        output_name: str = "",
        all_outputs: bool = False,
    ) -> None:
        self.config: Dict[str, Any] = dict(config or {})
        self.output_name = output_name
        self.all_outputs = all_outputs
        self.workspaces: List[Workspace] = []
        self.persistent_workspaces: List[str] = []
        self.need_to_sort = False
        self._persistent_created = False

    def _find(self, workspace_id: int) -> Optional[Workspace]:
        return next((w for w in self.workspaces if w.id == workspace_id), None)

    def create_workspace(self, name: str = "") -> Workspace:
        """Add a workspace announced by the compositor and return it."""
        workspace = Workspace(next(_workspace_ids), "", self.config)
        self.workspaces.append(workspace)
        log.debug("Workspace %s created", workspace.id)
        if not self._persistent_created:
            self.persistent_workspaces.extend(
                persistent_workspace_names(self.config, self.output_name, self.all_outputs)
            )
            for placeholder_name in self.persistent_workspaces:
                placeholder = Workspace(
                    next(_workspace_ids), placeholder_name, self.config, persistent=True
                )
                self.workspaces.append(placeholder)
            self._persistent_created = True
        if name:
            self.rename(workspace.id, name)
        return workspace

    def rename(self, workspace_id: int, name: str) -> Workspace:
        """Set a workspace's name; a placeholder of the same name is replaced."""
        workspace = self._find(workspace_id)
        if workspace is None:
            raise KeyError(workspace_id)
        if workspace.name != name:
            self.need_to_sort = True
        workspace.name = name
        if name in self.persistent_workspaces:
            workspace.persistent = True
        duplicate = next(
            (w for w in self.workspaces if w.name == name and w.id != workspace_id), None
        )
        if duplicate is not None:
            self.remove_workspace(duplicate.id)
        return workspace

    def remove_workspace(self, workspace_id: int) -> bool:
        """Drop a workspace; False if it is not known."""
        workspace = self._find(workspace_id)
        if workspace is None:
            log.warning("Can't find workspace with id %s", workspace_id)
            return False
        self.workspaces.remove(workspace)
        return True

    def handle_remove(self, workspace_id: int) -> bool:
        """The compositor removed a workspace: persistent ones stay, marked empty."""
        workspace = self._find(workspace_id)
        if workspace is None:
            log.warning("Can't find workspace with id %s", workspace_id)
            return False
        if workspace.persistent:
            workspace.state = WorkspaceState.EMPTY
            return False
        return self.remove_workspace(workspace_id)
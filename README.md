# barkit

barkit holds the state and formatting logic for a set of status bar modules for
sway and other wlroots compositors. It has no toolkit and draws nothing. Each
module takes the data a compositor or system service sends, as JSON text or
plain Python values, and works out what a bar would show: label text, tooltip
text, CSS classes, visibility and ordering.

## Modules

- `barkit.ipc`: a sway IPC client over a Unix socket. `Ipc` opens one
  connection for commands and one for events. `send_cmd` sends a command,
  `subscribe` subscribes to events and `handle_event` waits for one event. Each
  `IpcResponse` goes to the callbacks registered with `connect_cmd` or
  `connect_event`. `encode_message` and `decode_header` handle the wire format.
  `get_socket_path` reads `SWAYSOCK` or runs `sway --get-socketpath`. Failures
  raise `IpcError`.
- `barkit.swaybar`: `BarVisibility` works out whether the bar is shown. It
  follows bar config, mode, modifier and urgency events. `parse_bar_config`,
  `is_module_enabled` and `subscribed_events` help set it up.
- `barkit.workspaces`: `Workspaces` orders sway workspaces, persistent ones
  included. It also builds button labels, icons and CSS classes, scroll targets
  and click commands. `convert_workspace_name_to_num` and
  `trim_workspace_name` are available on their own.
- `barkit.window`: `find_focused_node` finds the focused window or workspace in
  a sway tree. `Window` computes the title and the window classes `empty`,
  `solo`, `floating`, `tabbed`, `stacked` and `tiled`.
- `barkit.mode`: `Mode` shows the binding mode. It is hidden in the default
  mode.
- `barkit.scratchpad`: `Scratchpad` shows the scratchpad window count and a
  tooltip that lists those windows.
- `barkit.user`: `User` shows the upper-cased login name, the time since boot
  and the boot time. `format_user_label` does the formatting.
- `barkit.temperature`: `Temperature` reads a hwmon or thermal-zone sensor
  file. It renders the value in Celsius, Fahrenheit and Kelvin and adds a
  `critical` class above the configured threshold.
- `barkit.upower` and `barkit.upower_tooltip`: `UPower` turns `Device`
  snapshots into the battery label, icon and status class. `tooltip_rows`
  builds the per-device tooltip rows.
- `barkit.watcher`, `barkit.host`, `barkit.item` and `barkit.tray`: the
  StatusNotifier side. `Watcher` is the host and item registry. `Host` keeps the
  host's item list. `Item` handles tray item properties, icons, scrolling and
  clicks. `Tray` holds the items in display order.
- `barkit.wlr_workspaces`: `Workspace` and `WorkspaceGroup` model the
  workspaces a compositor announces, including persistent placeholders, icons
  and state classes. `sort_workspaces` orders them.

## Example

```python
from barkit.ipc import Ipc, IpcType
from barkit.workspaces import Workspaces

workspaces = Workspaces({"format": "{name}"}, "eDP-1")

def on_cmd(response):
    if response.type == IpcType.GET_WORKSPACES:
        workspaces.on_workspaces(response.payload)

with Ipc() as ipc:
    ipc.connect_cmd(on_cmd)
    ipc.send_cmd(IpcType.GET_WORKSPACES)
```

## What barkit does not do

- It is a library. It has no command-line program and no bar window.
- It does not connect to D-Bus or to Wayland. The power, tray and workspace
  protocol modules work on values the caller passes in. Only `barkit.ipc`
  talks to the compositor.
- It has no keyboard layout module.

## Running the tests

```
pip install -e .[test]
pytest
```
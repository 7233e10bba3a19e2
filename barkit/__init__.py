"""Status bar module logic for sway and wlroots compositors: IPC, workspaces, tray and readouts."""

__version__ = "0.1.0"
"""User module: login name and uptime shown in a label."""

from __future__ import annotations

import getpass
import os
import string
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional

DEFAULT_FORMAT = "{user} {work_H}:{work_M}"
DEFAULT_INTERVAL = 60
_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_UPTIME_FILE = "/proc/uptime"


def read_uptime_seconds() -> int:
    """Return whole seconds since boot, or 0 when unknown."""
    try:
        with open(_UPTIME_FILE, encoding="ascii") as handle:
            return int(float(handle.read().split()[0]))
    except (OSError, ValueError, IndexError):
        pass
    clock = getattr(time, "CLOCK_UPTIME", None)
    if clock is not None:
        try:
            return int(time.clock_gettime(clock))
        except OSError:
            pass
    return 0


def format_user_label(
    template: str,
    login: str,
    uptime_seconds: int,
    now: Optional[datetime] = None,
) -> str:
    """Fill ``template`` with the user name, boot time and time worked."""
    if now is None:
        now = datetime.now()
    start = now - timedelta(seconds=uptime_seconds)
    return template.format(
        up_H=start.strftime("%H"),
        up_M=start.strftime("%M"),
        up_d=start.strftime("%d"),
        up_m=start.strftime("%m"),
        up_Y=start.strftime("%Y"),
        work_d=uptime_seconds // 86400,
        work_H=f"{(uptime_seconds // 3600) % 24:02d}",
        work_M=f"{(uptime_seconds // 60) % 60:02d}",
        work_S=f"{uptime_seconds % 60:02d}",
        user=login.translate(_UPPER),
    )


class User:
    """State of the user module."""

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        login: Optional[str] = None,
        uptime_source: Optional[Callable[[], int]] = None,
    ) -> None:
        self.config = dict(config or {})
        fmt = self.config.get("format")
        self.format = fmt if isinstance(fmt, str) else DEFAULT_FORMAT
        interval = self.config.get("interval")
        self.interval = interval if isinstance(interval, int) and not isinstance(interval, bool) else DEFAULT_INTERVAL
        self.login = login if login is not None else getpass.getuser()
        self._uptime_source = uptime_source or read_uptime_seconds
        self.label = ""

    def update(self, now: Optional[datetime] = None) -> str:
        """Recompute and return the label text."""
        self.label = format_user_label(self.format, self.login, self._uptime_source(), now)
        return self.label

    def open_path(self, home: Optional[str] = None) -> Optional[str]:
        """Return the URI to open on a left click, or None when disabled."""
        if self.config.get("open-on-click") is not True:
            return None
        path = home if home is not None else os.path.expanduser("~")
        custom = self.config.get("open-path")
        if isinstance(custom, str) and custom:
            path = custom
        return "file:///" + path
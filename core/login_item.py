"""
WordLoop – Launch at login
===========================
Registers the app to start with the user session by writing a per-user
autostart entry:

* Linux   – ``~/.config/autostart/<name>.desktop`` (XDG autostart)
* macOS   – ``~/Library/LaunchAgents/<bundle id>.plist``
* Windows – ``<name>.bat`` in the Startup folder

Errors are logged, never raised.
"""

from __future__ import annotations

import logging
import os
import plistlib
import shlex
import sys
from pathlib import Path
from typing import List, Optional

log = logging.getLogger(__name__)


def default_command() -> List[str]:
    """Command line that relaunches the running app."""
    if getattr(sys, "frozen", False):
        return [sys.executable]
    main_py = Path(__file__).resolve().parent.parent / "main.py"
    return [sys.executable, str(main_py)]


class LoginItem:
    def __init__(
        self,
        app_name: str = "WordLoop",
        command: Optional[List[str]] = None,
        *,
        platform: str = sys.platform,
        home: Optional[Path] = None,
    ) -> None:
        self.app_name = app_name
        self.command = command or default_command()
        self.platform = platform
        self.home = Path(home) if home else Path.home()

    @property
    def entry_path(self) -> Path:
        if self.platform == "darwin":
            label = f"com.wordloop.{self.app_name.lower()}"
            return self.home / "Library" / "LaunchAgents" / f"{label}.plist"
        if self.platform == "win32":
            appdata = Path(os.environ.get("APPDATA", self.home / "AppData" / "Roaming"))
            startup = appdata / "Microsoft" / "Windows" / "Start Menu" / "Programs" / "Startup"
            return startup / f"{self.app_name}.bat"
        config = Path(os.environ.get("XDG_CONFIG_HOME", self.home / ".config"))
        return config / "autostart" / f"{self.app_name.lower()}.desktop"

    def is_enabled(self) -> bool:
        return self.entry_path.exists()

    def set_enabled(self, enabled: bool) -> bool:
        """Create or remove the autostart entry. Returns the resulting state."""
        path = self.entry_path
        try:
            if enabled:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(self._render())
                log.info("Registered login item %s", path)
            else:
                path.unlink(missing_ok=True)
                log.info("Unregistered login item %s", path)
        except OSError as exc:
            log.error("Launch at login error: %s", exc)
        return self.is_enabled()

    # ── Entry formats ────────────────────────────────────────────────

    def _render(self) -> bytes:
        if self.platform == "darwin":
            return plistlib.dumps({
                "Label": self.entry_path.stem,
                "ProgramArguments": list(self.command),
                "RunAtLoad": True,
            })
        if self.platform == "win32":
            args = " ".join(f'"{part}"' for part in self.command)
            return f"@echo off\r\nstart \"\" {args}\r\n".encode("utf-8")
        lines = [
            "[Desktop Entry]",
            "Type=Application",
            f"Name={self.app_name}",
            f"Exec={shlex.join(self.command)}",
            "X-GNOME-Autostart-enabled=true",
            "",
        ]
        return "\n".join(lines).encode("utf-8")

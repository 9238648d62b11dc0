"""
WordLoop – Reusable CustomTkinter widgets
==========================================
Shared UI primitives for the control window.
"""

from __future__ import annotations

import customtkinter as ctk


# ---------------------------------------------------------------------------
# Colours / design tokens
# ---------------------------------------------------------------------------
class Theme:
    """Centralised colour palette – dark-mode first."""
    BG_DARK       = "#0f1117"
    BG_CARD       = "#1e2030"
    BG_CARD_HOVER = "#272a3d"
    ACCENT        = "#7c6ff5"     # purple accent
    ACCENT_HOVER  = "#6958d9"
    SUCCESS       = "#43d9a2"
    SUCCESS_HOVER = "#33b987"
    DANGER        = "#f55a6a"
    LINK          = "#5aa9f5"
    TEXT_PRIMARY   = "#e2e4f0"
    TEXT_SECONDARY = "#8b8fa8"
    TEXT_MUTED     = "#5b5f78"
    BORDER         = "#2a2d40"
    FONT_FAMILY    = "Segoe UI"


def font(size: int = 13, weight: str = "normal", slant: str = "roman") -> ctk.CTkFont:
    return ctk.CTkFont(family=Theme.FONT_FAMILY, size=size, weight=weight, slant=slant)


# ---------------------------------------------------------------------------
# Styled buttons
# ---------------------------------------------------------------------------
class AccentButton(ctk.CTkButton):
    """A consistently-styled accent button."""

    def __init__(self, master, text: str = "", command=None, **kw):
        kw.setdefault("fg_color", Theme.ACCENT)
        kw.setdefault("hover_color", Theme.ACCENT_HOVER)
        kw.setdefault("text_color", "#ffffff")
        kw.setdefault("corner_radius", 8)
        kw.setdefault("font", font(13, "bold"))
        kw.setdefault("height", 30)
        super().__init__(master, text=text, command=command, **kw)


class SuccessButton(AccentButton):
    """Green button for "Mark as Learned"."""

    def __init__(self, master, text: str = "", command=None, **kw):
        kw.setdefault("fg_color", Theme.SUCCESS)
        kw.setdefault("hover_color", Theme.SUCCESS_HOVER)
        kw.setdefault("text_color", Theme.BG_DARK)
        super().__init__(master, text=text, command=command, **kw)


class DangerButton(ctk.CTkButton):
    """Red-toned button for destructive actions."""

    def __init__(self, master, text: str = "", command=None, **kw):
        kw.setdefault("fg_color", Theme.DANGER)
        kw.setdefault("hover_color", "#d44454")
        kw.setdefault("text_color", "#ffffff")
        kw.setdefault("corner_radius", 8)
        kw.setdefault("font", font(13))
        kw.setdefault("height", 30)
        super().__init__(master, text=text, command=command, **kw)


class GhostButton(ctk.CTkButton):
    """Transparent text-style button."""

    def __init__(self, master, text: str = "", command=None, **kw):
        kw.setdefault("fg_color", "transparent")
        kw.setdefault("hover_color", Theme.BG_CARD_HOVER)
        kw.setdefault("text_color", Theme.TEXT_PRIMARY)
        kw.setdefault("anchor", "w")
        kw.setdefault("corner_radius", 6)
        kw.setdefault("font", font(13))
        kw.setdefault("height", 28)
        super().__init__(master, text=text, command=command, **kw)


# ---------------------------------------------------------------------------
# Separator
# ---------------------------------------------------------------------------
class Separator(ctk.CTkFrame):
    def __init__(self, master, **kw):
        kw.setdefault("fg_color", Theme.BORDER)
        kw.setdefault("height", 1)
        super().__init__(master, **kw)

"""
WordLoop – Daily loop list
===========================
Collapsible list of the words in the daily loop, each with a remove
button, plus "+ Add New Word to Loop".
"""

from __future__ import annotations

import customtkinter as ctk

from ui.widgets import Theme, GhostButton, font


class LoopView(ctk.CTkFrame):
    """Shows ``loop.daily_words``; the current word is bold."""

    def __init__(self, master, loop, **kw):
        kw.setdefault("fg_color", "transparent")
        super().__init__(master, **kw)
        self._loop = loop

    def refresh(self) -> None:
        for w in self.winfo_children():
            w.destroy()

        current = self._loop.current_word
        for index, word in enumerate(self._loop.daily_words):
            row = ctk.CTkFrame(self, fg_color="transparent")
            row.pack(fill="x", padx=(10, 0))

            is_current = current is not None and word.text == current.text
            ctk.CTkLabel(
                row, text=f"• {word.text}",
                font=font(12, "bold" if is_current else "normal"),
                text_color=Theme.TEXT_PRIMARY if is_current else Theme.TEXT_SECONDARY,
                anchor="w",
            ).pack(side="left")

            ctk.CTkButton(
                row, text="✕", width=22, height=22,
                fg_color="transparent", hover_color=Theme.BG_CARD_HOVER,
                text_color=Theme.TEXT_MUTED, font=font(11),
                command=lambda i=index: self._loop.remove_from_loop(i),
            ).pack(side="right")

        GhostButton(
            self, text="+ Add New Word to Loop", font=font(12),
            text_color=Theme.LINK,
            command=self._loop.add_new_word_to_loop,
        ).pack(fill="x", padx=(10, 0), pady=(2, 0))

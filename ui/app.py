"""
WordLoop – Control window
==========================
Small always-available window standing in for the menu-bar popover.  The
window title doubles as the menu label (``本 <word>``).  All state lives
in :class:`core.daily_loop.DailyLoop`; this module only renders it and
forwards user commands.
"""

from __future__ import annotations

import logging

import customtkinter as ctk

from core.daily_loop import DailyLoop
from core.login_item import LoginItem
from core.notifications import (
    NotificationCenter,
    NotificationRequest,
    PresentationOptions,
    plyer_deliver,
)
from core.scheduler import Scheduler
from core.settings import INTERVAL_CHOICES, interval_label
from core.word_store import WordStore
from db.database import get_session, init_db
from db.kv_store import KeyValueStore
from ui.dispatch import TkDispatcher
from ui.loop_view import LoopView
from ui.widgets import (
    Theme,
    AccentButton,
    DangerButton,
    GhostButton,
    Separator,
    SuccessButton,
    font,
)

log = logging.getLogger(__name__)


class WordLoopApp(ctk.CTk):
    """Root application window."""

    WIDTH = 340

    def __init__(self) -> None:
        super().__init__()

        # ── Window setup ──
        self.geometry(f"{self.WIDTH}x520")
        self.resizable(False, True)
        self.configure(fg_color=Theme.BG_DARK)

        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        # Ensure database tables exist
        init_db()

        # ── State & services ──
        self._dispatcher = TkDispatcher(self)
        self._center = NotificationCenter(self._dispatcher, deliver=self._deliver)
        self._center.set_presentation_handler(self._will_present)

        self.loop = DailyLoop(
            WordStore(),
            KeyValueStore(get_session),
            self._dispatcher,
            login_item=LoginItem(),
        )
        self._scheduler = Scheduler(self.loop, self._dispatcher, self._center)
        self.loop.add_listener(self._request_refresh)

        self._show_loop = False
        self._show_reset = False
        self._refresh_pending = False

        self._body = ctk.CTkFrame(self, fg_color="transparent")
        self._body.pack(fill="both", expand=True, padx=16, pady=16)

        self.protocol("WM_DELETE_WINDOW", self.quit_app)
        self.loop.start()
        self._refresh()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _will_present(self, request: NotificationRequest) -> PresentationOptions:
        return PresentationOptions.BANNER | PresentationOptions.SOUND

    def _deliver(self, request: NotificationRequest, options: PresentationOptions) -> None:
        if PresentationOptions.SOUND in options:
            self.bell()
        if PresentationOptions.BANNER in options:
            plyer_deliver(request, options)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _request_refresh(self) -> None:
        # Coalesce; a command may destroy the widget that invoked it.
        if not self._refresh_pending:
            self._refresh_pending = True
            self.after_idle(self._refresh)

    def _refresh(self) -> None:
        self._refresh_pending = False
        self.title(self.loop.menu_title)
        for w in self._body.winfo_children():
            w.destroy()

        if self._show_reset:
            self._build_reset_confirmation()
        else:
            self._build_word_card()
            Separator(self._body).pack(fill="x", pady=8)
            self._build_loop_section()
            Separator(self._body).pack(fill="x", pady=8)
            self._build_settings()
            Separator(self._body).pack(fill="x", pady=8)
            self._build_footer()

    def _build_word_card(self) -> None:
        word = self.loop.current_word
        if word is None:
            ctk.CTkLabel(
                self._body, text="No words left to review 🎉",
                font=font(14), text_color=Theme.TEXT_MUTED,
            ).pack(anchor="w")
            return

        head = ctk.CTkFrame(self._body, fg_color="transparent")
        head.pack(fill="x")
        ctk.CTkLabel(head, text=word.text, font=font(18, "bold"),
                     text_color=Theme.TEXT_PRIMARY).pack(side="left")
        if word.pronunciation:
            ctk.CTkLabel(head, text=f"({word.pronunciation})", font=font(14),
                         text_color=Theme.TEXT_SECONDARY).pack(side="left", padx=(6, 0))

        ctk.CTkLabel(self._body, text=word.meaning, font=font(13),
                     text_color=Theme.TEXT_PRIMARY, wraplength=self.WIDTH - 40,
                     justify="left").pack(anchor="w", pady=(4, 0))
        if word.example:
            ctk.CTkLabel(self._body, text=word.example, font=font(13, slant="italic"),
                         text_color=Theme.TEXT_SECONDARY, wraplength=self.WIDTH - 40,
                         justify="left").pack(anchor="w", pady=(2, 0))

        actions = ctk.CTkFrame(self._body, fg_color="transparent")
        actions.pack(fill="x", pady=(8, 0))
        SuccessButton(actions, text="Mark as Learned",
                      command=self.loop.mark_learned).pack(side="left")
        if self.loop.last_learned is not None:
            AccentButton(actions, text="Undo", width=70,
                         command=self.loop.undo_last_learned).pack(side="left", padx=(8, 0))

    def _build_loop_section(self) -> None:
        count = len(self.loop.daily_words)
        label = "Hide Daily Loop" if self._show_loop else f"Show Daily Loop ({count})"
        GhostButton(self._body, text=label, text_color=Theme.LINK,
                    command=self._toggle_loop).pack(fill="x")
        if self._show_loop:
            view = LoopView(self._body, self.loop)
            view.pack(fill="x")
            view.refresh()

    def _build_settings(self) -> None:
        settings = self.loop.settings

        auto = ctk.CTkSwitch(self._body, text="Auto-rotation & Notifications",
                             font=font(13), command=lambda: self.loop.set_auto_change(auto.get() == 1))
        if settings.auto_change_enabled:
            auto.select()
        auto.pack(anchor="w")

        row = ctk.CTkFrame(self._body, fg_color="transparent")
        row.pack(fill="x", pady=(6, 0))
        ctk.CTkLabel(row, text="Update Interval", font=font(13),
                     text_color=Theme.TEXT_PRIMARY).pack(side="left")
        picker = ctk.CTkOptionMenu(
            row, values=list(INTERVAL_CHOICES), width=130,
            command=lambda label: self.loop.set_interval(INTERVAL_CHOICES[label]),
        )
        picker.set(interval_label(settings.selected_interval))
        picker.pack(side="right")

        login = ctk.CTkCheckBox(self._body, text="Launch at Login", font=font(13),
                                command=lambda: self.loop.set_launch_at_login(login.get() == 1))
        if self.loop.launch_at_login:
            login.select()
        login.pack(anchor="w", pady=(6, 0))

    def _build_footer(self) -> None:
        footer = ctk.CTkFrame(self._body, fg_color="transparent")
        footer.pack(fill="x")

        maintenance = ctk.CTkOptionMenu(
            footer, values=["Sync with JSON", "Reset Data..."], width=130,
            command=self._on_maintenance,
        )
        maintenance.set("Maintenance...")
        maintenance.pack(side="left")

        GhostButton(footer, text="Quit", width=50, anchor="center",
                    command=self.quit_app).pack(side="right")
        GhostButton(footer, text="Next", width=50, anchor="center",
                    command=self.loop.advance).pack(side="right")

    def _build_reset_confirmation(self) -> None:
        ctk.CTkLabel(self._body, text="Reset All Data?", font=font(15, "bold"),
                     text_color=Theme.DANGER).pack(pady=(20, 6))
        ctk.CTkLabel(
            self._body,
            text="This will wipe all learned words and start fresh from your JSON file.",
            font=font(12), text_color=Theme.TEXT_SECONDARY,
            wraplength=self.WIDTH - 60, justify="center",
        ).pack(pady=(0, 12))

        row = ctk.CTkFrame(self._body, fg_color="transparent")
        row.pack()
        DangerButton(row, text="Yes, Reset Everything",
                     command=self._confirm_reset).pack(side="left")
        GhostButton(row, text="Cancel", width=70, anchor="center",
                    command=self._cancel_reset).pack(side="left", padx=(8, 0))

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def _toggle_loop(self) -> None:
        self._show_loop = not self._show_loop
        self._request_refresh()

    def _on_maintenance(self, choice: str) -> None:
        if choice == "Sync with JSON":
            self.loop.sync_with_bundle()
        else:
            self._show_reset = True
        self._request_refresh()

    def _confirm_reset(self) -> None:
        self._show_reset = False
        self.loop.reset_all_data()

    def _cancel_reset(self) -> None:
        self._show_reset = False
        self._request_refresh()

    def quit_app(self) -> None:
        log.info("Quitting")
        self._scheduler.stop()
        self.destroy()

"""Guided tour: a fixed 17-step state machine over the main workflow.

Both the explicit Next/Prev controls and the incidental UI actions (pressing
Enter in the client field, finishing a signature stroke, ...) are expressed as
``TutorialEvent`` values and go through ``TutorialController.dispatch``.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from .schemas import QuoteStatus

if TYPE_CHECKING:
    from .workspace import Workspace

logger = logging.getLogger(__name__)

TOTAL_STEPS = 17

STEP_TARGET_IDS = [
    "",                                 # 0: welcome
    "guide-target-new-btn",             # 1: new document (dashboard)
    "tutorial-target-standard-tpl",     # 2: template picker
    "tutorial-target-client-input",     # 3: client name (editor)
    "tutorial-target-ai-input",         # 4: draft helper (editor)
    "tutorial-target-first-item-desc",  # 5: first item (editor)
    "tutorial-target-preview-btn",      # 6: preview (editor)
    "tutorial-target-final-save",       # 7: finalize (editor)
    "tutorial-target-nav-quotes",       # 8: library nav
    "tutorial-target-library-filters",  # 9: library filters
    "tutorial-target-nav-templates",    # 10: design nav
    "tutorial-target-theme-color",      # 11: theme colour
    "tutorial-target-nav-settings",     # 12: settings nav
    "tutorial-target-settings-logo",    # 13: logo
    "tutorial-target-settings-seal",    # 14: seal / signature
    "tutorial-target-settings-canvas",  # 15: canvas
    "tutorial-target-settings-save",    # 16: save settings
]


class TutorialEvent(str, Enum):
    NEXT_REQUESTED = "NextRequested"
    PREV_REQUESTED = "PrevRequested"
    DOCUMENT_CREATED = "DocumentCreated"
    CLIENT_NAME_CONFIRMED = "ClientNameConfirmed"
    ITEM_DESCRIPTION_FOCUSED = "ItemDescriptionFocused"
    ITEM_DESCRIPTION_CONFIRMED = "ItemDescriptionConfirmed"
    LOGO_UPLOADED = "LogoUploaded"
    SIGNATURE_COMPLETED = "SignatureCompleted"
    SETTINGS_SAVED = "SettingsSaved"


# (event, step the user must be on) -> step to jump to
UI_TRANSITIONS: Dict[Tuple[TutorialEvent, int], int] = {
    (TutorialEvent.DOCUMENT_CREATED, 1): 2,
    (TutorialEvent.DOCUMENT_CREATED, 2): 3,
    (TutorialEvent.CLIENT_NAME_CONFIRMED, 3): 5,
    (TutorialEvent.ITEM_DESCRIPTION_FOCUSED, 4): 5,
    (TutorialEvent.ITEM_DESCRIPTION_CONFIRMED, 5): 6,
    (TutorialEvent.LOGO_UPLOADED, 12): 13,
    (TutorialEvent.SIGNATURE_COMPLETED, 14): 15,
    (TutorialEvent.SETTINGS_SAVED, 15): 16,
}


def target_for(step: int) -> Optional[str]:
    """UI anchor highlighted at ``step``; None for overlay-only steps."""
    if step <= 0 or step >= TOTAL_STEPS:
        return None
    return STEP_TARGET_IDS[step] or None


class TutorialController:
    def __init__(self, workspace: "Workspace") -> None:
        self.workspace = workspace
        settings = workspace.settings_store.settings
        self.visible = not settings.has_seen_tutorial
        self.step = min(max(settings.tutorial_step, 0), TOTAL_STEPS)

    @property
    def progress(self) -> int:
        return min(100, round(self.step / TOTAL_STEPS * 100))

    @property
    def target(self) -> Optional[str]:
        return target_for(self.step)

    @property
    def at_welcome(self) -> bool:
        return self.visible and self.step == 0

    @property
    def at_finish(self) -> bool:
        return self.visible and self.step == TOTAL_STEPS

    # Public API
    def dispatch(self, event: TutorialEvent) -> int:
        if not self.visible:
            return self.step
        event = TutorialEvent(event)
        if event is TutorialEvent.NEXT_REQUESTED:
            self._advance()
        elif event is TutorialEvent.PREV_REQUESTED:
            self._retreat()
        else:
            target = UI_TRANSITIONS.get((event, self.step))
            if target is not None:
                self._go(target)
        return self.step

    def advance(self) -> int:
        return self.dispatch(TutorialEvent.NEXT_REQUESTED)

    def retreat(self) -> int:
        return self.dispatch(TutorialEvent.PREV_REQUESTED)

    def start(self) -> None:
        self.workspace.quote_store.set_active_tab("dashboard")
        self.visible = True
        self._go(1)

    def stop(self) -> None:
        self.visible = False
        self._go(0)
        self.workspace.settings_store.mark_tutorial_seen()
        logger.info("Tutorial finished or skipped")

    def toggle(self) -> None:
        if self.visible:
            self.stop()
            return
        store = self.workspace.quote_store
        self.visible = True
        self._go(0)
        store.set_active_tab("dashboard")
        store.set_editing(False)
        store.set_preview_open(False)
        store.set_current_quote(None)
        self.workspace.discard_editor()

    # Internals
    def _advance(self) -> None:
        ws = self.workspace
        store = ws.quote_store
        step = self.step

        if step == 1:
            store.set_active_tab("dashboard")
            ws.create_quote()
            self._go(2)
        elif step == 2:
            if store.current_quote is not None:
                ws.apply_template("standard")
            else:
                ws.create_quote("standard")
            self._go(3)
        elif step == 6:
            store.set_preview_open(True)
            self._go(7)
        elif step == 7:
            ws.flush_editor()
            if store.current_quote is not None:
                finalized = store.current_quote.model_copy(update={"status": QuoteStatus.FINALIZED})
                ws.save_quote(finalized)
            else:
                store.set_active_tab("quotes")
            self._go(8)
        elif step == 8:
            store.set_active_tab("quotes")
            self._go(9)
        elif step == 10:
            store.set_active_tab("templates")
            self._go(11)
        elif step == 12:
            store.set_active_tab("settings")
            self._go(13)
        elif step == TOTAL_STEPS:
            self.stop()
        elif 1 <= step < TOTAL_STEPS:
            self._go(step + 1)

    def _retreat(self) -> None:
        prev = self.step - 1
        if prev < 1:
            return
        self._go(prev)

        store = self.workspace.quote_store
        if prev in (1, 2):
            store.set_editing(False)
            store.set_active_tab("dashboard")
        elif 3 <= prev <= 6:
            store.set_editing(True)
            store.set_preview_open(False)
        elif prev == 7:
            store.set_editing(True)
            store.set_preview_open(True)
        elif prev == 8:
            store.set_preview_open(False)
            store.set_editing(False)
        elif prev in (9, 10):
            store.set_active_tab("quotes")
        elif prev in (11, 12):
            store.set_active_tab("templates")
        elif 13 <= prev <= 16:
            store.set_active_tab("settings")

    def _go(self, step: int) -> None:
        if step != self.step:
            logger.debug("Tutorial step %s -> %s", self.step, step)
        self.step = step
        self.workspace.settings_store.set_tutorial_step(step)

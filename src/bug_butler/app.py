# app.py
# Session controller for the three-screen flow: landing → chat → report.
#
# Holds which screen is showing, the engine for the current conversation,
# and the last generated report. It renders nothing; run.py reads its
# state and calls display.

import os
from enum import Enum
from pathlib import Path
from typing import Callable

from loguru import logger

from bug_butler.credentials import CredentialHolder
from bug_butler.engine import ConversationEngine
from bug_butler.errors import CompletionError, CredentialFormatError
from bug_butler.models import Phase, Turn

API_KEY_REQUIRED_MESSAGE = "Please enter your OpenAI API key to continue"
NOT_READY_MESSAGE = "Answer a few more questions before generating the report."


class Screen(str, Enum):
    LANDING = "landing"
    CHAT = "chat"
    REPORT = "report"


class BugButlerApp:
    """
    Screen state plus the three hooks the conversation core exposes:
    on_report_generated, on_back, and on_start_over.
    """

    def __init__(self, engine: ConversationEngine, credentials: CredentialHolder) -> None:
        self.engine = engine
        self.credentials = credentials
        self.screen = Screen.LANDING
        self.report: str | None = None

    # ------------------------------------------------------------------
    # Landing
    # ------------------------------------------------------------------

    def start(self, prompt_for_key: Callable[[str], str]) -> bool:
        """
        Open the chat screen with a fresh conversation.

        Asks for an API key first when none is stored. Returns False and
        stays on landing if the answer is empty or malformed.
        """
        if not self.credentials.is_set:
            answer = prompt_for_key(API_KEY_REQUIRED_MESSAGE).strip()
            if not answer:
                return False
            try:
                self.credentials.set(answer)
            except CredentialFormatError as exc:
                logger.info("API key rejected at start: {}", exc)
                return False

        self.engine.reset()
        self.screen = Screen.CHAT
        return True

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    @property
    def can_generate_report(self) -> bool:
        return self.engine.phase is Phase.READY_TO_FINALIZE

    def send(self, text: str) -> Turn | None:
        return self.engine.submit_user_turn(text)

    def generate_report(self) -> str | None:
        """
        Finalize the conversation.

        Returns None on success (the report hook has fired). Otherwise a
        notice is returned for the user and the chat screen stays up so
        they can retry. No request is made before the phase allows it.
        """
        if not self.can_generate_report:
            return NOT_READY_MESSAGE
        try:
            report = self.engine.finalize()
        except CompletionError as exc:
            return exc.user_message
        self.on_report_generated(report)
        return None

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def on_report_generated(self, report: str) -> None:
        self.report = report
        self.screen = Screen.REPORT

    def on_back(self) -> None:
        self.screen = Screen.LANDING

    def on_start_over(self) -> None:
        self.report = None
        self.screen = Screen.LANDING

    # ------------------------------------------------------------------
    # Settings overlay
    # ------------------------------------------------------------------

    def change_credential(self, value: str) -> None:
        """Set or, when value is blank, clear the API key. Raises CredentialFormatError."""
        self.credentials.set(value)

    # ------------------------------------------------------------------
    # Report screen
    # ------------------------------------------------------------------

    def save_report(self, path: str) -> Path:
        """Write the current report to `path` as Markdown and return the resolved path."""
        if self.report is None:
            raise ValueError("No report has been generated yet.")
        target = Path(path).expanduser().resolve()
        os.makedirs(target.parent, exist_ok=True)
        with open(target, "w", encoding="utf-8") as fh:
            fh.write(self.report)
            if not self.report.endswith("\n"):
                fh.write("\n")
        return target

# engine.py
# Conversation engine. Decides what to send and when a report is on offer.
#
# The engine owns the transcript and a busy/idle flag, nothing else.
# Phase is never stored: it is recomputed from the user-turn count every
# time it is read, so it cannot drift from the transcript.
#
# Control flow:
#   user text → append user turn → interview call
#   → append reply (or synthetic failure turn) → phase from count
#   → [ready] → report call → report text to caller

from loguru import logger

from bug_butler.client import CompletionClient
from bug_butler.config import Settings
from bug_butler.credentials import CredentialHolder
from bug_butler.errors import CompletionError, ConversationNotReadyError, EngineBusyError
from bug_butler.models import Phase, Role, Transcript, Turn

WELCOME_MESSAGE = (
    "Hey there! I'm Bug Butler. I'm here to help you create a great bug report. "
    "Let's start simple - what were you trying to do when you ran into this issue?"
)


def phase_of(transcript: Transcript, threshold: int) -> Phase:
    """Ready to finalize once the user has replied `threshold` times."""
    if transcript.user_turn_count >= threshold:
        return Phase.READY_TO_FINALIZE
    return Phase.COLLECTING


class ConversationEngine:
    """
    Drives one bug-report interview.

    Calls block until the remote service answers. A submission that
    arrives while a call is in flight is dropped, never queued.
    """

    def __init__(
        self,
        client: CompletionClient,
        credentials: CredentialHolder,
        settings: Settings,
    ) -> None:
        self._client = client
        self._credentials = credentials
        self._threshold = settings.user_turns
        self._busy = False
        self._transcript = Transcript.seeded(WELCOME_MESSAGE)

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def phase(self) -> Phase:
        return phase_of(self._transcript, self._threshold)

    @property
    def busy(self) -> bool:
        return self._busy

    def reset(self) -> None:
        """Start a new conversation from the welcome message."""
        self._transcript = Transcript.seeded(WELCOME_MESSAGE)

    # ------------------------------------------------------------------
    # Interview
    # ------------------------------------------------------------------

    def submit_user_turn(self, text: str) -> Turn | None:
        """
        Append the user's reply and fetch the next assistant turn.

        Returns the appended assistant turn, or None when the input was
        blank or the engine was busy. A failed call is recorded in the
        transcript as a synthetic assistant turn carrying the user-facing
        message; it is not raised.
        """
        text = text.strip()
        if not text:
            return None
        if self._busy:
            logger.info("submission dropped: a completion call is already in flight")
            return None

        self._transcript.append(Turn(role=Role.USER, content=text))
        self._busy = True
        try:
            reply = self._client.interview_turn(self._credentials.value, self._transcript.turns)
        except CompletionError as exc:
            turn = Turn(role=Role.ASSISTANT, content=exc.user_message, failed=True)
        else:
            turn = Turn(role=Role.ASSISTANT, content=reply)
        finally:
            self._busy = False

        self._transcript.append(turn)
        logger.debug(
            "turn complete: user_turns={} phase={}",
            self._transcript.user_turn_count,
            self.phase.value,
        )
        return turn

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------

    def finalize(self) -> str:
        """
        Generate the bug report from the full transcript.

        Raises ConversationNotReadyError while still collecting and
        EngineBusyError while another call is in flight; neither issues a
        request. CompletionError propagates to the caller. Every call is a
        fresh request, results are not cached.
        """
        if self.phase is not Phase.READY_TO_FINALIZE:
            raise ConversationNotReadyError(
                f"{self._transcript.user_turn_count} of {self._threshold} user replies collected."
            )
        if self._busy:
            raise EngineBusyError("A completion call is already in flight.")

        self._busy = True
        try:
            report = self._client.synthesize_report(self._credentials.value, self._transcript.turns)
        finally:
            self._busy = False

        logger.info("report generated ({} chars)", len(report))
        return report

# errors.py
# Exception types and the three user-facing failure categories.
#
# Every remote failure is collapsed into exactly one FailureKind. The
# kind, not the exception text, decides what the user is told.

from enum import Enum


class FailureKind(str, Enum):
    AUTHORIZATION = "authorization"
    TRANSPORT = "transport"
    OTHER = "other"


INVALID_CREDENTIAL_MESSAGE = (
    'Invalid API key. Please re-enter your OpenAI API key (it starts with "sk-") and try again.'
)
NETWORK_UNAVAILABLE_MESSAGE = "Network error. Please check your connection and try again."
GENERIC_FAILURE_MESSAGE = "Oops! Something went wrong. Please try again."

USER_MESSAGES: dict[FailureKind, str] = {
    FailureKind.AUTHORIZATION: INVALID_CREDENTIAL_MESSAGE,
    FailureKind.TRANSPORT: NETWORK_UNAVAILABLE_MESSAGE,
    FailureKind.OTHER: GENERIC_FAILURE_MESSAGE,
}


class BugButlerError(Exception):
    """Base exception for Bug Butler."""


class CompletionError(BugButlerError):
    """Raised by the completion client. Carries the classified failure kind."""

    def __init__(self, kind: FailureKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(detail or kind.value)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES[self.kind]


class CredentialFormatError(BugButlerError, ValueError):
    """Raised when a supplied API key fails the prefix or length check."""


class ConversationNotReadyError(BugButlerError):
    """Raised when a report is requested before enough user replies were collected."""


class EngineBusyError(BugButlerError):
    """Raised when a report is requested while another call is in flight."""

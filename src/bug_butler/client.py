# client.py
# Completion client. The only code that talks to the remote model.
#
# Two fixed request envelopes:
#   A. interview turn   — interview script + full transcript, short reply
#   B. report synthesis — report template + serialized transcript, long reply
#
# Any failure leaves this module as a CompletionError tagged with one of
# three FailureKinds. Callers never see raw SDK exceptions.

from typing import Any, Callable, Sequence

import httpx
import openai
from loguru import logger
from openai import OpenAI

from bug_butler.config import Settings
from bug_butler.errors import CompletionError, FailureKind
from bug_butler.models import Transcript, Turn


# ---------------------------------------------------------------------------
# System Prompts
# ---------------------------------------------------------------------------

INTERVIEW_SYSTEM_PROMPT = """\
You are Bug Butler, a friendly and helpful assistant that guides users through creating well-structured bug reports.

Your conversation flow:
1. Ask what the user was trying to do
2. Ask what happened instead (the actual behavior)
3. Ask for steps to reproduce
4. Ask what they expected to happen
5. Ask for any additional context (browser, OS, error messages, etc.)

Keep your responses:
- Conversational and friendly
- Brief (1-2 sentences)
- Encouraging
- Focused on gathering clear information

After gathering all information, indicate you're ready to generate the report.\
"""

REPORT_SYSTEM_PROMPT = """\
Based on the conversation, generate a professional, well-structured bug report in Markdown format.

Use this structure:

# [Clear, Concise Title]

## Steps to Reproduce
1. [First step]
2. [Second step]
3. [etc.]

## Expected Behavior
[What should happen]

## Actual Behavior
[What actually happened]

## Environment
- Browser: [if mentioned]
- OS: [if mentioned]
- Other relevant details: [if mentioned]

## Additional Context
[Any other relevant information]

Make sure the report is clear, professional, and ready to paste into an issue tracker.\
"""

REPORT_REQUEST_TEMPLATE = (
    "Here is the conversation with the user about their bug:\n\n"
    "{conversation}\n\n"
    "Please generate a structured bug report based on this conversation."
)


# ---------------------------------------------------------------------------
# Failure classification
# ---------------------------------------------------------------------------

_AUTH_MARKERS = ("401", "unauthorized")
_TRANSPORT_MARKERS = ("network", "fetch", "connection")


def classify_failure(exc: BaseException) -> FailureKind:
    """
    Map an SDK or transport exception onto a FailureKind.

    Typed SDK errors are matched by class and status code. Text markers
    are only consulted for exceptions the SDK did not already type.
    """
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return FailureKind.AUTHORIZATION
    if isinstance(exc, openai.APIConnectionError):
        return FailureKind.TRANSPORT
    if isinstance(exc, openai.APIStatusError):
        return FailureKind.AUTHORIZATION if exc.status_code in (401, 403) else FailureKind.OTHER
    if isinstance(exc, httpx.TransportError):
        return FailureKind.TRANSPORT

    text = str(exc).lower()
    if any(marker in text for marker in _AUTH_MARKERS):
        return FailureKind.AUTHORIZATION
    if any(marker in text for marker in _TRANSPORT_MARKERS):
        return FailureKind.TRANSPORT
    return FailureKind.OTHER


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class CompletionClient:
    """
    Shapes the two request envelopes and classifies their failures.

    The credential is supplied on every call rather than held, so a key
    change in the settings overlay applies to the very next request.

    Example:
        client = CompletionClient(load_settings())
        reply = client.interview_turn("sk-...", transcript)
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[..., Any] | None = None,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory or OpenAI

    # ------------------------------------------------------------------
    # Low-level model call
    # ------------------------------------------------------------------

    def _complete(
        self,
        credential: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        if not credential:
            raise CompletionError(FailureKind.AUTHORIZATION, "No API key configured.")

        sdk = self._client_factory(
            api_key=credential,
            base_url=self._settings.base_url,
            max_retries=0,
        )
        logger.debug(
            "completion request: model={} messages={} temperature={} max_tokens={}",
            self._settings.model,
            len(messages),
            temperature,
            max_tokens,
        )
        try:
            response = sdk.chat.completions.create(
                model=self._settings.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as exc:
            kind = classify_failure(exc)
            logger.warning("completion failed ({}): {}", kind.value, exc)
            raise CompletionError(kind, str(exc)) from exc

        try:
            content = response.choices[0].message.content or ""
        except (AttributeError, IndexError, TypeError) as exc:
            logger.warning("completion response malformed: {}", exc)
            raise CompletionError(FailureKind.OTHER, f"Malformed completion response: {exc}") from exc
        return content.strip()

    # ------------------------------------------------------------------
    # Envelopes
    # ------------------------------------------------------------------

    def interview_turn(self, credential: str, turns: Sequence[Turn]) -> str:
        """Envelope A: next interview question given the conversation so far."""
        messages = [{"role": "system", "content": INTERVIEW_SYSTEM_PROMPT}]
        messages.extend(turn.as_message() for turn in turns)
        return self._complete(
            credential,
            messages,
            temperature=self._settings.chat_temperature,
            max_tokens=self._settings.chat_max_tokens,
        )

    def synthesize_report(self, credential: str, turns: Sequence[Turn]) -> str:
        """Envelope B: the Markdown bug report for a finished conversation."""
        conversation = Transcript(list(turns)).serialize()
        messages = [
            {"role": "system", "content": REPORT_SYSTEM_PROMPT},
            {"role": "user", "content": REPORT_REQUEST_TEMPLATE.format(conversation=conversation)},
        ]
        return self._complete(
            credential,
            messages,
            temperature=self._settings.report_temperature,
            max_tokens=self._settings.report_max_tokens,
        )

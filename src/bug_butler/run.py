# run.py
# Entry point. Wiring and the interactive loop only, no conversation
# logic lives here.
#
# Configure with BUG_BUTLER_* environment variables or a .env file.

from bug_butler import display
from bug_butler.app import BugButlerApp, Screen
from bug_butler.client import CompletionClient
from bug_butler.config import load_settings
from bug_butler.credentials import CredentialHolder, JsonFileStore
from bug_butler.engine import ConversationEngine
from bug_butler.errors import CredentialFormatError
from bug_butler.logging_utils import configure_logging


def build_app() -> BugButlerApp:
    settings = load_settings()
    configure_logging(settings.log_level)

    credentials = CredentialHolder(JsonFileStore(settings.store_path))
    engine = ConversationEngine(CompletionClient(settings), credentials, settings)
    return BugButlerApp(engine, credentials)


def _edit_key(app: BugButlerApp) -> None:
    answer = display.ask_api_key("Enter a new key, or leave blank to clear the stored one.")
    try:
        app.change_credential(answer)
    except CredentialFormatError as exc:
        display.notice(str(exc))
        return
    except OSError as exc:
        display.notice(f"Could not update the stored API key: {exc}")
        return
    if app.credentials.is_set:
        display.api_key_saved(app.credentials.masked)
    else:
        display.api_key_cleared()


def _landing(app: BugButlerApp) -> bool:
    key_label = "API Key Set" if app.credentials.is_set else "Set API Key"
    display.landing(key_label)
    command = display.user_input().strip().lower()

    if command in ("quit", "q", "/quit"):
        return False
    if command in ("key", "/key"):
        _edit_key(app)
    elif command in ("", "start", "/start"):
        try:
            started = app.start(display.ask_api_key)
        except OSError as exc:
            display.notice(f"Could not store the API key: {exc}")
            return True
        if started:
            display.chat_header()
            display.transcript(app.engine.transcript.turns)
        else:
            display.notice("An OpenAI API key starting with \"sk-\" is required to start.")
    return True


def _chat(app: BugButlerApp) -> bool:
    text = display.user_input()
    command = text.strip().lower()

    if command == "/quit":
        return False
    if command == "/back":
        app.on_back()
        return True
    if command == "/key":
        _edit_key(app)
        return True
    if command == "/report":
        with display.generating():
            problem = app.generate_report()
        if problem:
            display.notice(problem)
        else:
            display.report(app.report)
        return True

    was_ready = app.can_generate_report
    with display.typing():
        reply = app.send(text)
    if reply is None:
        return True
    display.turn(reply)
    if app.can_generate_report and not was_ready:
        display.ready_to_finalize()
    return True


def _report(app: BugButlerApp) -> bool:
    command = display.user_input().strip()
    lowered = command.lower()

    if lowered in ("quit", "/quit"):
        return False
    if lowered in ("new", "/new", "start over"):
        app.on_start_over()
    elif lowered.startswith("save"):
        path = command[len("save"):].strip() or "bug_report.md"
        try:
            saved = app.save_report(path)
        except OSError as exc:
            display.notice(f"Could not save report: {exc}")
        else:
            display.report_saved(str(saved))
    return True


_SCREENS = {
    Screen.LANDING: _landing,
    Screen.CHAT: _chat,
    Screen.REPORT: _report,
}


def main() -> None:
    app = build_app()
    try:
        while _SCREENS[app.screen](app):
            pass
    except (KeyboardInterrupt, EOFError):
        pass
    display.goodbye()


if __name__ == "__main__":
    main()

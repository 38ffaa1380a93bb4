from unittest.mock import MagicMock, patch

from bug_butler import run
from bug_butler.app import BugButlerApp, Screen
from bug_butler.credentials import CredentialHolder, MemoryStore
from bug_butler.engine import ConversationEngine

KEY = "sk-test-0123456789abcdef"


def _app_with_broken_store(client, settings) -> BugButlerApp:
    store = MemoryStore()
    store.set = MagicMock(side_effect=PermissionError("read-only config directory"))
    store.remove = MagicMock(side_effect=PermissionError("read-only config directory"))
    credentials = CredentialHolder(store)
    return BugButlerApp(ConversationEngine(client, credentials, settings), credentials)


# ---------------------------------------------------------------------------
# Store write failures stay on screen
# ---------------------------------------------------------------------------


@patch("bug_butler.run.display")
def test_edit_key_reports_unwritable_store(mock_display, client, settings):
    app = _app_with_broken_store(client, settings)
    mock_display.ask_api_key.return_value = KEY

    run._edit_key(app)

    mock_display.notice.assert_called_once()
    assert "read-only config directory" in mock_display.notice.call_args.args[0]
    mock_display.api_key_saved.assert_not_called()
    assert not app.credentials.is_set


@patch("bug_butler.run.display")
def test_edit_key_clear_reports_unwritable_store(mock_display, client, settings):
    app = _app_with_broken_store(client, settings)
    mock_display.ask_api_key.return_value = ""

    run._edit_key(app)

    mock_display.notice.assert_called_once()
    mock_display.api_key_cleared.assert_not_called()


@patch("bug_butler.run.display")
def test_landing_start_reports_unwritable_store(mock_display, client, settings):
    app = _app_with_broken_store(client, settings)
    mock_display.user_input.return_value = "start"
    mock_display.ask_api_key.return_value = KEY

    assert run._landing(app) is True

    mock_display.notice.assert_called_once()
    assert app.screen is Screen.LANDING


@patch("bug_butler.run.display")
def test_edit_key_success_shows_masked_key(mock_display):
    credentials = CredentialHolder(MemoryStore())
    app = BugButlerApp(MagicMock(), credentials)
    mock_display.ask_api_key.return_value = KEY

    run._edit_key(app)

    mock_display.api_key_saved.assert_called_once_with(credentials.masked)
    mock_display.notice.assert_not_called()

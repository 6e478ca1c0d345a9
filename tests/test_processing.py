"""Tests for the live commit message view."""

from typing import Callable

from _engine.session import CommitMessageField, CommitMessageSession
from _types.model import Notification, Severity
from animation.Processing import StreamingCommitView, console, show_notification


def test_view_applies_streamed_updates() -> None:
    def generate_fn(prompt: str, on_update: Callable[[str], None]) -> str:
        on_update("Update")
        on_update("Update docs")
        return "Update docs"

    field = CommitMessageField()
    view = StreamingCommitView("llama3", poll_interval=0.01)
    session = CommitMessageSession(generate_fn, field, lambda n: None, dispatch=view.dispatch)

    session.start("prompt")
    view.run(session, field)

    assert field.text == "Update docs"
    assert not session.is_busy()


def test_show_notification_renders_title_and_message() -> None:
    notification = Notification(title="Summarize changes failed", message="Is Ollama up?", severity=Severity.ERROR)

    with console.capture() as capture:
        show_notification(notification)

    output = capture.get()
    assert "Summarize changes failed" in output
    assert "Is Ollama up?" in output

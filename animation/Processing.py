import queue
from typing import Callable

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.text import Text

from _data.theme import custom_theme
from _engine.session import CommitMessageField, CommitMessageSession
from _types.model import Notification, Severity

console = Console(theme=custom_theme)

SEVERITY_STYLES = {
    Severity.INFO: "cyan",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}


def show_notification(notification: Notification) -> None:
    style = SEVERITY_STYLES[notification.severity]
    console.print(
        Panel(
            f"[{style}]{notification.message}[/{style}]",
            title=f"[bold {style}]{notification.title}[/bold {style}]",
            border_style=style,
        )
    )


class StreamingCommitView:
    """
    Live terminal view of the commit message field.

    Worker threads hand updates to `dispatch`; `run` applies them on the
    calling thread, in the order they were queued.
    """

    def __init__(self, model_name: str, poll_interval: float = 0.1) -> None:
        self._updates: "queue.Queue[Callable[[], None]]" = queue.Queue()
        self._model_name = model_name
        self._poll_interval = poll_interval

    def dispatch(self, update: Callable[[], None]) -> None:
        self._updates.put(update)

    def _drain(self) -> None:
        while True:
            try:
                update = self._updates.get_nowait()
            except queue.Empty:
                return
            update()

    def _render(self, text: str, busy: bool) -> RenderableType:
        message = Panel(
            Text(text) if text else Text("...", style="dim"),
            title="[bold green]Commit Message",
            border_style="green" if not busy else "cyan",
        )
        if not busy:
            return message
        return Group(Spinner("dots", text=f"[bold blue]Generating ({self._model_name})..."), message)

    def run(self, session: CommitMessageSession, field: CommitMessageField) -> None:
        """Render streamed updates until the session's generation finishes."""
        with Live(self._render(field.text, True), console=console, refresh_per_second=12) as live:
            while True:
                finished = session.join(self._poll_interval)
                self._drain()
                live.update(self._render(field.text, not finished))
                if finished:
                    break

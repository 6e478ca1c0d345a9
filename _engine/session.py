# Standard Library Imports
import logging
import threading
from typing import Callable, List, Optional

# Build-in Functions And Class Import
from _data.ollama import FAILURE_MESSAGE, FAILURE_TITLE
from _engine.errors import AICommitError, SessionBusyError
from _types.model import GenerationState, Notification, Severity

logger = logging.getLogger(__name__)

# (prompt, on_update) -> final text
GenerateFn = Callable[[str, Callable[[str], None]], str]
StateListener = Callable[[GenerationState], None]


class CommitMessageField:
    """The commit message being edited; only ever replaced, never cleared on failure."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._lock = threading.Lock()

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    def set_commit_message(self, text: str) -> None:
        with self._lock:
            self._text = text


class CommitMessageSession:
    """
    Runs one generation at a time on a background thread.

    The busy state is explicit: query it with `state` / `is_busy()` or
    observe transitions with `subscribe()`. Streamed text reaches the field
    through `dispatch`, which lets a UI marshal updates onto its own thread.
    """

    def __init__(
        self,
        generate_fn: GenerateFn,
        field: CommitMessageField,
        notify: Callable[[Notification], None],
        dispatch: Optional[Callable[[Callable[[], None]], None]] = None,
    ) -> None:
        self._generate_fn = generate_fn
        self._field = field
        self._notify = notify
        self._dispatch = dispatch or (lambda update: update())
        self._state = GenerationState.IDLE
        self._lock = threading.Lock()
        self._listeners: List[StateListener] = []
        self._thread: Optional[threading.Thread] = None
        self.result: Optional[str] = None
        self.error: Optional[Exception] = None

    @property
    def state(self) -> GenerationState:
        with self._lock:
            return self._state

    def is_busy(self) -> bool:
        return self.state == GenerationState.BUSY

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _set_state(self, state: GenerationState) -> None:
        with self._lock:
            self._state = state
        logger.debug("Session state: %s", state.value)
        for listener in list(self._listeners):
            listener(state)

    def start(self, prompt: str) -> threading.Thread:
        """
        Start generating a commit message for prompt.

        Raises:
            SessionBusyError: If a generation is already running.
        """
        with self._lock:
            if self._state == GenerationState.BUSY:
                raise SessionBusyError("A commit message is already being generated.")
            self._state = GenerationState.BUSY
        for listener in list(self._listeners):
            listener(GenerationState.BUSY)

        self.result = None
        self.error = None
        self._thread = threading.Thread(
            target=self._run, args=(prompt,), name="commit-message-generation", daemon=True
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the running generation. Returns False if it is still running."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _on_update(self, text: str) -> None:
        self._dispatch(lambda: self._field.set_commit_message(text))

    def _run(self, prompt: str) -> None:
        succeeded = False
        try:
            self.result = self._generate_fn(prompt, self._on_update)
            succeeded = True
        except AICommitError as e:
            self.error = e
            logger.error("Commit message generation failed: %s", e)
        except Exception as e:
            self.error = e
            logger.exception("Unexpected error during commit message generation")
        finally:
            self._set_state(GenerationState.SUCCEEDED if succeeded else GenerationState.FAILED)
            if not succeeded:
                self._notify(
                    Notification(title=FAILURE_TITLE, message=FAILURE_MESSAGE, severity=Severity.ERROR)
                )

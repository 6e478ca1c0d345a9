class AICommitError(Exception):
    """Base class for errors raised by the commit message generator."""


class ConfigError(AICommitError):
    pass


class GitCommandError(AICommitError):
    """A git command exited with a non-zero status."""

    def __init__(self, command, returncode: int, stderr: str) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"{' '.join(self.command)} failed with exit code {returncode}: {stderr}"
        )


class GenerationError(AICommitError):
    """The Ollama generate call failed (transport, HTTP status or stream content)."""

    def __init__(self, message: str, status_code=None) -> None:
        self.status_code = status_code
        super().__init__(message)


class SessionBusyError(AICommitError):
    """A generation is already running for this session."""

from .engine import get_staged_changes, commit_with_message
from .files_controller import get_repository_root

__all__ = ["get_staged_changes", "commit_with_message", "get_repository_root"]

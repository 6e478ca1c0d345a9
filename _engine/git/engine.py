# Standard Library Imports
import logging
from typing import List, Optional

# Third-Party Library Imports
from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
)

# Build-in Functions And Class Import
from _data.theme import custom_theme
from _engine.errors import GitCommandError
from _types.model import Change
from .command import run_git_command
from .files_controller import get_repository_root, get_staged_files, read_revision

logger = logging.getLogger(__name__)

# --- Initialize Rich Console ---
console = Console(theme=custom_theme)


def build_change(
    status: str, path: str, old_path: Optional[str], repo_root: Optional[str] = None
) -> Change:
    """
    Resolve the before (HEAD) and after (index) content of one staged entry.

    Additions have no before content and deletions no after content.
    """
    before: Optional[str] = None
    after: Optional[str] = None

    if status != "A":
        before = read_revision(f"HEAD:{old_path or path}", repo_root)
    if status != "D":
        after = read_revision(f":{path}", repo_root)

    return Change(path=path, before=before, after=after, status=status, old_path=old_path)


def get_staged_changes(repo_root: Optional[str] = None, show_progress: bool = True) -> List[Change]:
    """
    Collect the staged changes of the repository, in git's path order.

    Args:
        repo_root (Optional[str]): Repository top-level directory. Detected from
                                   the current directory if None.
        show_progress (bool): Render a rich progress bar while reading revisions.

    Returns:
        List[Change]: One Change per staged file. Empty if nothing is staged.

    Raises:
        GitCommandError: If the repository or its index cannot be read.
    """
    repo_root = repo_root or get_repository_root()
    entries = get_staged_files(repo_root)
    logger.debug("Found %d staged file(s) in %s", len(entries), repo_root)

    if not entries:
        return []

    if not show_progress:
        return [build_change(status, path, old_path, repo_root) for status, path, old_path in entries]

    changes: List[Change] = []
    collect_progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("({task.completed}/{task.total})"),
        TimeElapsedColumn(),
        console=console,
        transient=True,  # Progress bar disappears after completion
    )
    with collect_progress as progress:
        task_id = progress.add_task("Reading staged changes...", total=len(entries))
        for status, path, old_path in entries:
            progress.update(task_id, description=f"Reading: [highlight]{path}[/highlight]")
            changes.append(build_change(status, path, old_path, repo_root))
            progress.update(task_id, advance=1)

    return changes


def commit_with_message(message: str, repo_root: Optional[str] = None) -> str:
    """
    Create a commit from the index with the given message.

    Returns:
        str: git's stdout (the commit summary line).

    Raises:
        GitCommandError: If git refuses the commit.
    """
    command = ["git", "commit", "-F", "-"]
    returncode, stdout, stderr = run_git_command(command, input_text=message, cwd=repo_root)
    if returncode != 0:
        raise GitCommandError(command, returncode, stderr)
    return stdout.strip()

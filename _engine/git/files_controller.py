import logging
from typing import List, Optional, Tuple

from _engine.errors import GitCommandError
from _engine.git.command import run_git_command

logger = logging.getLogger(__name__)

# (status letter, path, original path for renames/copies)
StagedEntry = Tuple[str, str, Optional[str]]


def get_repository_root(cwd: Optional[str] = None) -> str:
    """
    Get the top-level directory of the git repository containing cwd.

    Raises:
        GitCommandError: If cwd is not inside a git work tree.
    """
    command = ["git", "rev-parse", "--show-toplevel"]
    returncode, stdout, stderr = run_git_command(command, cwd=cwd)
    if returncode != 0:
        raise GitCommandError(command, returncode, stderr)
    return stdout.strip()


def parse_name_status(output: str) -> List[StagedEntry]:
    """
    Parse the NUL separated output of `git diff --name-status -z`.

    Rename and copy entries carry a similarity score (e.g. R100) and two
    paths, the original first.
    """
    tokens = output.split("\0")
    entries: List[StagedEntry] = []
    i = 0
    while i < len(tokens):
        status = tokens[i]
        if not status:
            i += 1
            continue
        letter = status[0]
        if letter in ("R", "C"):
            old_path, new_path = tokens[i + 1], tokens[i + 2]
            entries.append((letter, new_path, old_path))
            i += 3
        else:
            entries.append((letter, tokens[i + 1], None))
            i += 2
    return entries


def get_staged_files(repo_root: Optional[str] = None) -> List[StagedEntry]:
    """
    List the files included in the next commit, in git's path order.

    Raises:
        GitCommandError: If git cannot list the index.
    """
    command = ["git", "diff", "--cached", "--name-status", "-z", "-M"]
    returncode, stdout, stderr = run_git_command(command, cwd=repo_root)
    if returncode != 0:
        raise GitCommandError(command, returncode, stderr)
    return parse_name_status(stdout)


def read_revision(revision: str, repo_root: Optional[str] = None) -> str:
    """
    Read file content for a `git show` revision such as `HEAD:path` or `:path`.

    Retrieval errors are not fatal: the content is treated as empty so the
    remaining changes still make it into the prompt.
    """
    returncode, stdout, stderr = run_git_command(["git", "show", revision], cwd=repo_root)
    if returncode != 0:
        logger.warning("Could not read %s, treating content as empty: %s", revision, stderr)
        return ""
    return stdout

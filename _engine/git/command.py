import logging
import subprocess
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


def run_git_command(
    command: List[str], input_text: Optional[str] = None, cwd: Optional[str] = None
) -> Tuple[int, str, str]:
    """
    Runs a git command and returns its return code, stdout, and stderr.

    Args:
        command (List[str]): The git command and its arguments as a list of strings.
                             Example: ["git", "rev-parse", "HEAD"]
        input_text (Optional[str]): Text fed to the command's stdin.
        cwd (Optional[str]): Working directory for the command.

    Returns:
        Tuple[int, str, str]: A tuple containing the command's return code,
                              stdout (decoded string), and stderr (decoded string).
                              Stdout is returned untouched so file contents keep
                              their exact whitespace.
                              Returns (1, "", "Exception details") if an exception occurs.
    """
    logger.debug("Executing command: %s", " ".join(command))
    try:
        # errors="replace" replaces invalid characters instead of failing
        # check=False leaves exit code handling to the caller
        result = subprocess.run(
            command,
            input=input_text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            cwd=cwd,
        )
        if result.returncode != 0:
            logger.debug("Return code %s, stderr: %s", result.returncode, result.stderr.strip())
        return result.returncode, result.stdout, result.stderr.strip()
    except FileNotFoundError:
        error_msg = "Git command not found. Is Git installed and in your PATH?"
        logger.error(error_msg)
        return 1, "", error_msg
    except OSError as e:
        error_msg = f"Exception running command {' '.join(command)}: {e}"
        logger.error(error_msg)
        return 1, "", error_msg

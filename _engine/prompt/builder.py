# Standard Library Imports
import difflib
import logging
import re
from typing import Dict, List, Optional, Sequence

# Build-in Functions And Class Import
from _types.model import Change
from .method_summary import Extractor, build_method_summary, split_lines

logger = logging.getLogger(__name__)

# --- Configuration ---
CONTEXT_LINES = 3

UNIFIED_DIFF = "UnifiedDiff"
TOTAL_FILE_COUNT = "TotalFileCount"
METHOD_STACK_SUMMARY = "MethodStackSummary"

PLACEHOLDER_PATTERN = re.compile(
    r"\$\{(" + "|".join((UNIFIED_DIFF, TOTAL_FILE_COUNT, METHOD_STACK_SUMMARY)) + r")\}"
)


def display_path(change: Change) -> str:
    """Path relative to the repository root, as shown in diff headers."""
    return "/" + change.path.lstrip("/")


def render_unified_diff(path: str, before: str, after: str) -> List[str]:
    """
    Unified diff lines of one file with a fixed context window.

    Returns an empty list when both sides are identical.
    """
    return list(
        difflib.unified_diff(
            split_lines(before),
            split_lines(after),
            fromfile=path,
            tofile=path,
            n=CONTEXT_LINES,
            lineterm="",
        )
    )


def has_placeholder(template: str, name: str) -> bool:
    return "${" + name + "}" in template


def build_prompt(
    changes: Sequence[Change],
    template: str,
    extractors: Optional[Dict[str, Extractor]] = None,
    only_edited: bool = False,
) -> str:
    """
    Build the final prompt from the staged changes and a template.

    Only ${UnifiedDiff}, ${TotalFileCount} and ${MethodStackSummary} are
    substituted, in a single pass; all other template text is kept verbatim.
    ${MethodStackSummary} stays untouched when no summary was produced.

    Args:
        changes (Sequence[Change]): Staged changes, in the order to render them.
        template (str): Prompt template.
        extractors (Optional[Dict[str, Extractor]]): Suffix to method extractor mapping.
        only_edited (bool): Summarize only declarations whose lines changed.

    Returns:
        str: The prompt to send to the model.
    """
    want_summary = has_placeholder(template, METHOD_STACK_SUMMARY)
    diff_lines: List[str] = []
    summaries: List[str] = []

    for change in changes:
        path = display_path(change)
        fragment = render_unified_diff(path, change.before or "", change.after or "")
        diff_lines.extend(fragment)
        logger.debug("%s: %d diff line(s)", path, len(fragment))

        if want_summary:
            summary = build_method_summary(change, path, extractors, only_edited)
            if summary is not None:
                summaries.append(summary)

    values = {
        UNIFIED_DIFF: "\n".join(diff_lines),
        TOTAL_FILE_COUNT: str(len(changes)),
    }
    if summaries:
        values[METHOD_STACK_SUMMARY] = "\n".join(summaries)

    return PLACEHOLDER_PATTERN.sub(lambda m: values.get(m.group(1), m.group(0)), template)

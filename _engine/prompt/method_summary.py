# Standard Library Imports
import difflib
import logging
from typing import Callable, Dict, List, Optional, Set

# Build-in Functions And Class Import
from _types.model import CallGraph, Change, MethodDeclaration
from .java_extractor import extract_java
from .python_extractor import extract_python

logger = logging.getLogger(__name__)

# Given source text, return its declarations and one-level in-file call edges
Extractor = Callable[[str], CallGraph]

DEFAULT_EXTRACTORS: Dict[str, Extractor] = {
    ".java": extract_java,
    ".py": extract_python,
}


def split_lines(content: str) -> List[str]:
    """Split on line feeds, dropping trailing empty segments (so "" has no lines)."""
    lines = content.split("\n")
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def edited_lines(before: str, after: str) -> Set[int]:
    """
    1-based line numbers of the after text touched by the change.

    Pure deletions mark the lines on both sides of where the removed block was.
    """
    matcher = difflib.SequenceMatcher(None, split_lines(before), split_lines(after), autojunk=False)
    touched: Set[int] = set()
    for tag, _i1, _i2, j1, j2 in matcher.get_opcodes():
        if tag in ("replace", "insert"):
            touched.update(range(j1 + 1, j2 + 1))
        elif tag == "delete":
            touched.update((j1, j1 + 1))
    return touched


def changed_declarations(
    graph: CallGraph, touched: Optional[Set[int]] = None
) -> List[int]:
    """
    Indexes of the declarations treated as changed.

    Without `touched`, every declaration of the file counts as changed.
    """
    if touched is None:
        return list(range(len(graph.declarations)))
    return [
        index
        for index, declaration in enumerate(graph.declarations)
        if any(declaration.start_line <= line <= declaration.end_line for line in touched)
    ]


def render_summary(display_path: str, graph: CallGraph, changed: List[int]) -> str:
    lines = [f"It's the method structure summary of file: {display_path}"]
    for index in changed:
        declaration: MethodDeclaration = graph.declarations[index]
        lines.append(f" - {declaration.signature}")
        for callee in graph.callees(index):
            lines.append(f"    - {callee.signature}")
    return "\n".join(lines) + "\n"


def build_method_summary(
    change: Change,
    display_path: str,
    extractors: Optional[Dict[str, Extractor]] = None,
    only_edited: bool = False,
) -> Optional[str]:
    """
    Render the method stack summary of one changed file.

    Args:
        change (Change): The staged change; its after content is parsed.
        display_path (str): Path shown in the summary header.
        extractors (Optional[Dict[str, Extractor]]): Suffix to extractor mapping.
        only_edited (bool): Restrict the changed set to declarations whose
                            lines differ between the revisions.

    Returns:
        Optional[str]: The summary, or None when no extractor handles the file
                       or its source cannot be parsed.
    """
    extractors = DEFAULT_EXTRACTORS if extractors is None else extractors
    extractor = extractors.get(change.suffix)
    if extractor is None:
        return None

    try:
        graph = extractor(change.after or "")
    except Exception as e:
        # Unparseable source or an unavailable grammar only costs this file's summary
        logger.warning(
            "Skipping method summary for %s: %s", display_path, e, exc_info=logger.isEnabledFor(logging.DEBUG)
        )
        return None

    touched = edited_lines(change.before or "", change.after or "") if only_edited else None
    changed = changed_declarations(graph, touched)
    logger.debug("%s: %d declaration(s), %d changed", display_path, len(graph.declarations), len(changed))
    return render_summary(display_path, graph, changed)

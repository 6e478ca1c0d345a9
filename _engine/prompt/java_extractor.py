"""Java declarations and in-file call edges, parsed with tree-sitter."""

from typing import Dict, Iterator, List, Optional

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from _types.model import CallGraph, MethodDeclaration

DECLARATION_TYPES = ("method_declaration", "constructor_declaration")
OWNER_TYPES = (
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
    "annotation_type_declaration",
)
PARAMETER_TYPES = ("formal_parameter", "spread_parameter")


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return " ".join(node.text.decode("utf-8", errors="replace").split())


def _owner_name(node: Node) -> Optional[str]:
    parent = node.parent
    while parent is not None:
        if parent.type in OWNER_TYPES:
            return _text(parent.child_by_field_name("name")) or None
        parent = parent.parent
    return None


def _iter_nodes(node: Node, skip_nested: bool = False) -> Iterator[Node]:
    """Pre-order walk. With skip_nested, other declarations' subtrees are not entered."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        if skip_nested and current.type in DECLARATION_TYPES:
            continue
        yield current
        stack.extend(reversed(current.children))


def _declaration(node: Node) -> MethodDeclaration:
    name = _text(node.child_by_field_name("name"))
    params = node.child_by_field_name("parameters")
    owner = _owner_name(node)
    return_type = _text(node.child_by_field_name("type"))

    qualified = f"{owner}.{name}" if owner else name
    signature = f"{qualified}{_text(params) or '()'}"
    if return_type:
        signature = f"{return_type} {signature}"

    arity = None
    if params is not None:
        arity = sum(1 for child in params.named_children if child.type in PARAMETER_TYPES)

    return MethodDeclaration(
        name=name,
        signature=signature,
        start_line=node.start_point[0] + 1,
        end_line=node.end_point[0] + 1,
        owner=owner,
        arity=arity,
    )


def _call_target(node: Node) -> Optional[tuple]:
    """(name, argument count) of a call expression, or None for other nodes."""
    if node.type == "method_invocation":
        name = _text(node.child_by_field_name("name"))
    elif node.type == "object_creation_expression":
        type_name = _text(node.child_by_field_name("type"))
        name = type_name.split("<", 1)[0].rsplit(".", 1)[-1]
    else:
        return None
    arguments = node.child_by_field_name("arguments")
    count = arguments.named_child_count if arguments is not None else 0
    return name, count


def _resolve(candidates: List[int], declarations: List[MethodDeclaration], count: int) -> List[int]:
    same_arity = [i for i in candidates if declarations[i].arity == count]
    return same_arity or candidates


def extract_java(source: str) -> CallGraph:
    parser = get_parser("java")
    tree = parser.parse(source.encode("utf-8"))

    nodes = [n for n in _iter_nodes(tree.root_node) if n.type in DECLARATION_TYPES]
    declarations = [_declaration(n) for n in nodes]

    by_name: Dict[str, List[int]] = {}
    for index, declaration in enumerate(declarations):
        by_name.setdefault(declaration.name, []).append(index)

    calls: Dict[int, List[int]] = {}
    for index, node in enumerate(nodes):
        body = node.child_by_field_name("body")
        if body is None:
            continue
        callees: List[int] = []
        for child in _iter_nodes(body, skip_nested=True):
            target = _call_target(child)
            if target is None or target[0] not in by_name:
                continue
            for callee in _resolve(by_name[target[0]], declarations, target[1]):
                if callee not in callees:
                    callees.append(callee)
        calls[index] = callees

    return CallGraph(declarations=declarations, calls=calls)

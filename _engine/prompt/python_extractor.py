"""Python declarations and in-file call edges, parsed with the ast module."""

import ast
from typing import Dict, Iterator, List, Optional, Tuple, Union

from _types.model import CallGraph, MethodDeclaration

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]
FUNCTION_TYPES = (ast.FunctionDef, ast.AsyncFunctionDef)


def _collect(tree: ast.AST) -> List[Tuple[FunctionNode, Optional[str]]]:
    found: List[Tuple[FunctionNode, Optional[str]]] = []

    def visit(node: ast.AST, owner: Optional[str]) -> None:
        for child in ast.iter_child_nodes(node):
            if isinstance(child, ast.ClassDef):
                visit(child, f"{owner}.{child.name}" if owner else child.name)
            elif isinstance(child, FUNCTION_TYPES):
                found.append((child, owner))
                visit(child, f"{owner}.{child.name}" if owner else child.name)
            else:
                visit(child, owner)

    visit(tree, None)
    return found


def _signature(node: FunctionNode, owner: Optional[str]) -> str:
    prefix = "async def" if isinstance(node, ast.AsyncFunctionDef) else "def"
    qualified = f"{owner}.{node.name}" if owner else node.name
    signature = f"{prefix} {qualified}({ast.unparse(node.args)})"
    if node.returns is not None:
        signature += f" -> {ast.unparse(node.returns)}"
    return signature


def _iter_body(node: FunctionNode) -> Iterator[ast.AST]:
    """Walk a function body without entering nested functions or classes."""
    stack: List[ast.AST] = list(node.body)
    while stack:
        current = stack.pop()
        yield current
        for child in ast.iter_child_nodes(current):
            if not isinstance(child, FUNCTION_TYPES + (ast.ClassDef,)):
                stack.append(child)


def _called_name(call: ast.Call) -> Optional[Tuple[str, bool]]:
    """(name, is_self_call) for `f()` and `self.f()` / `cls.f()`."""
    func = call.func
    if isinstance(func, ast.Name):
        return func.id, False
    if isinstance(func, ast.Attribute) and isinstance(func.value, ast.Name):
        if func.value.id in ("self", "cls"):
            return func.attr, True
    return None


def extract_python(source: str) -> CallGraph:
    tree = ast.parse(source)
    functions = _collect(tree)
    functions.sort(key=lambda item: item[0].lineno)

    declarations = [
        MethodDeclaration(
            name=node.name,
            signature=_signature(node, owner),
            start_line=node.lineno,
            end_line=node.end_lineno or node.lineno,
            owner=owner,
        )
        for node, owner in functions
    ]

    by_name: Dict[str, List[int]] = {}
    for index, declaration in enumerate(declarations):
        by_name.setdefault(declaration.name, []).append(index)

    calls: Dict[int, List[int]] = {}
    for index, (node, owner) in enumerate(functions):
        callees: List[int] = []
        body_calls = [child for child in _iter_body(node) if isinstance(child, ast.Call)]
        body_calls.sort(key=lambda call: (call.lineno, call.col_offset))
        for child in body_calls:
            target = _called_name(child)
            if target is None or target[0] not in by_name:
                continue
            name, is_self_call = target
            candidates = by_name[name]
            if is_self_call:
                # self.f() binds to a method of the enclosing class when one exists
                owned = [i for i in candidates if owner and declarations[i].owner == owner]
                candidates = owned or candidates
            for callee in candidates:
                if callee not in callees:
                    callees.append(callee)
        calls[index] = callees

    return CallGraph(declarations=declarations, calls=calls)

# engine/tree.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Tuple, Union

from sympy import Integer

OPERATORS = ("add", "sub", "mul", "div")

DISPLAY_SYMBOLS = {"add": "+", "sub": "−", "mul": "×", "div": "÷"}
PLAIN_SYMBOLS = {"add": "+", "sub": "-", "mul": "*", "div": "/"}
TEX_SYMBOLS = {"add": " + ", "sub": " - ", "mul": "\\cdot ", "div": "\\div "}

# Path steps used to address a node from the root
LEFT = "left"
RIGHT = "right"
CHILD = "child"

MAX_DEPTH = 6


# --- Node variants ----------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Literal value must be an int, got {self.value!r}")


@dataclass(frozen=True)
class Group:
    child: "Node"


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: "Node"
    right: "Node"

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ValueError(f"Unknown operator: {self.operator!r}")


Node = Union[Literal, Group, BinaryOp]
Path = Tuple[str, ...]


# Short builders, handy for templates and tests
def num(value: int) -> Literal:
    return Literal(value)


def grp(child: Node) -> Group:
    return Group(child)


def op(operator: str, left: Node, right: Node) -> BinaryOp:
    return BinaryOp(operator, left, right)


# --- Evaluation -------------------------------------------------------------------


def evaluate(node: Node) -> Any:
    """
    Exact value of a tree as a SymPy number.

    Division is true division (Rational), never truncated. Division by zero does
    not raise: SymPy yields zoo/nan, which callers reject via is_exact_integer().
    """
    if isinstance(node, Literal):
        return Integer(node.value)
    if isinstance(node, Group):
        return evaluate(node.child)
    if isinstance(node, BinaryOp):
        a = evaluate(node.left)
        b = evaluate(node.right)
        if node.operator == "add":
            return a + b
        if node.operator == "sub":
            return a - b
        if node.operator == "mul":
            return a * b
        return a / b
    raise TypeError(f"Not an expression node: {node!r}")


def is_exact_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return bool(getattr(value, "is_Integer", False)) and value.is_finite is not False


# --- Serialization & formatting ---------------------------------------------------


def signature(node: Node) -> str:
    """Pre-order encoding, e.g. sub(div(mul(12,grp(sub(30,6))),4),mul(2,grp(add(5,3))))."""
    if isinstance(node, Literal):
        return str(node.value)
    if isinstance(node, Group):
        return f"grp({signature(node.child)})"
    if isinstance(node, BinaryOp):
        return f"{node.operator}({signature(node.left)},{signature(node.right)})"
    raise TypeError(f"Not an expression node: {node!r}")


def to_display(node: Node) -> str:
    # Groups are always parenthesised; no precedence-aware elision
    if isinstance(node, Literal):
        if node.value < 0:
            return f"{DISPLAY_SYMBOLS['sub']}{-node.value}"
        return str(node.value)
    if isinstance(node, Group):
        return f"({to_display(node.child)})"
    if isinstance(node, BinaryOp):
        sym = DISPLAY_SYMBOLS[node.operator]
        return f"{to_display(node.left)} {sym} {to_display(node.right)}"
    raise TypeError(f"Not an expression node: {node!r}")


def to_tex(node: Node) -> str:
    if isinstance(node, Literal):
        return str(node.value)
    if isinstance(node, Group):
        return f"\\left({to_tex(node.child)}\\right)"
    if isinstance(node, BinaryOp):
        return f"{to_tex(node.left)}{TEX_SYMBOLS[node.operator]}{to_tex(node.right)}"
    raise TypeError(f"Not an expression node: {node!r}")


def to_plain(node: Node) -> str:
    """ASCII form (digits, + - * /, parentheses) that SymPy's parser accepts."""
    if isinstance(node, Literal):
        return f"({node.value})" if node.value < 0 else str(node.value)
    if isinstance(node, Group):
        return f"({to_plain(node.child)})"
    if isinstance(node, BinaryOp):
        return f"{to_plain(node.left)}{PLAIN_SYMBOLS[node.operator]}{to_plain(node.right)}"
    raise TypeError(f"Not an expression node: {node!r}")


# --- Structure helpers ------------------------------------------------------------


def iter_nodes(node: Node) -> Iterator[Node]:
    yield node
    if isinstance(node, Group):
        yield from iter_nodes(node.child)
    elif isinstance(node, BinaryOp):
        yield from iter_nodes(node.left)
        yield from iter_nodes(node.right)


def depth(node: Node) -> int:
    if isinstance(node, Group):
        return 1 + depth(node.child)
    if isinstance(node, BinaryOp):
        return 1 + max(depth(node.left), depth(node.right))
    return 1


def count_reductions(node: Node) -> int:
    """
    Number of reduction steps needed to collapse the tree to one Literal.

    A Group directly wrapping a BinaryOp is reduced together with it, so it adds
    nothing on its own; any other Group costs one step.
    """
    if isinstance(node, Literal):
        return 0
    if isinstance(node, Group):
        if isinstance(node.child, BinaryOp):
            return count_reductions(node.child)
        return 1 + count_reductions(node.child)
    return 1 + count_reductions(node.left) + count_reductions(node.right)


def node_at(root: Node, path: Path) -> Node:
    cur = root
    for step in path:
        if step == CHILD and isinstance(cur, Group):
            cur = cur.child
        elif step == LEFT and isinstance(cur, BinaryOp):
            cur = cur.left
        elif step == RIGHT and isinstance(cur, BinaryOp):
            cur = cur.right
        else:
            raise KeyError(f"Invalid path step {step!r} at {signature(cur)}")
    return cur


def replace_at(root: Node, path: Path, replacement: Node) -> Node:
    """
    Copy-on-write replacement: rebuilds only the ancestors along `path`.
    Untouched subtrees are shared with `root`, which is left as it was.
    """
    if not path:
        return replacement
    step, rest = path[0], path[1:]
    if step == CHILD and isinstance(root, Group):
        return Group(replace_at(root.child, rest, replacement))
    if step == LEFT and isinstance(root, BinaryOp):
        return BinaryOp(root.operator, replace_at(root.left, rest, replacement), root.right)
    if step == RIGHT and isinstance(root, BinaryOp):
        return BinaryOp(root.operator, root.left, replace_at(root.right, rest, replacement))
    raise KeyError(f"Invalid path step {step!r} at {signature(root)}")

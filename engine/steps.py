# engine/steps.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from engine.errors import ConsistencyError
from engine.tree import (
    CHILD,
    LEFT,
    RIGHT,
    BinaryOp,
    Group,
    Literal,
    Node,
    Path,
    evaluate,
    is_exact_integer,
    node_at,
    replace_at,
    to_display,
    to_tex,
)

ORDER_RULE = "Parentheses → × and ÷ → + and − (left to right)"


@dataclass(frozen=True)
class Step:
    title: str
    rationale: str
    before: str
    focus: str
    after: str
    value: int
    before_tex: str
    focus_tex: str
    after_tex: str


# --- Locating the next reduction --------------------------------------------------


def _is_ready(node: Node) -> bool:
    return (
        isinstance(node, BinaryOp)
        and isinstance(node.left, Literal)
        and isinstance(node.right, Literal)
    )


def find_reducible(node: Node, path: Path = ()) -> Optional[Path]:
    """
    Path of the first reducible node, searching depth-first with the left child
    before the right one, or None when nothing can be reduced.

    A Group is reducible once its child is a Literal, or a BinaryOp of two
    Literals (the parentheses and their operation collapse together).
    """
    if isinstance(node, Literal):
        return None
    if isinstance(node, Group):
        if isinstance(node.child, Literal) or _is_ready(node.child):
            return path
        return find_reducible(node.child, path + (CHILD,))
    if isinstance(node, BinaryOp):
        hit = find_reducible(node.left, path + (LEFT,))
        if hit is None:
            hit = find_reducible(node.right, path + (RIGHT,))
        if hit is None and _is_ready(node):
            return path
        return hit
    raise ConsistencyError(f"Not an expression node: {node!r}")


# --- Wording ----------------------------------------------------------------------


def _operation_text(node: BinaryOp, value: int, place: str) -> Tuple[str, str]:
    a = to_display(node.left)
    b = to_display(node.right)
    c = to_display(Literal(value))
    if node.operator == "mul":
        return "Multiplication", f"Multiply {a} by {b} {place}: {a} × {b} = {c}."
    if node.operator == "div":
        return "Division", f"Divide {a} by {b} {place} (exact division): {a} ÷ {b} = {c}."
    if node.operator == "add":
        return "Addition", f"Add {a} and {b} {place}: {a} + {b} = {c}."
    return "Subtraction", f"Subtract {b} from {a} {place}: {a} − {b} = {c}."


def _describe(focus: Node, path: Path, value: int) -> Tuple[str, str]:
    if isinstance(focus, Group) and isinstance(focus.child, Literal):
        shown = to_display(focus.child)
        return (
            "Remove the parentheses",
            f"The parentheses already hold {shown}, so {to_display(focus)} is replaced by {shown}.",
        )
    if isinstance(focus, Group):
        _, text = _operation_text(focus.child, value, "inside the parentheses")
        return "Resolve the parentheses", text

    place = "inside the parentheses" if CHILD in path else "at the top level"
    return _operation_text(focus, value, place)


# --- Extraction -------------------------------------------------------------------


def reduce_once(tree: Node) -> Tuple[Node, Step]:
    """One reduction: returns the rebuilt tree and the Step that describes it."""
    path = find_reducible(tree)
    if path is None:
        raise ConsistencyError(f"No reducible node in {to_display(tree)}")

    focus = node_at(tree, path)
    raw = evaluate(focus)
    if not is_exact_integer(raw):
        raise ConsistencyError(f"{to_display(focus)} does not reduce to an integer ({raw})")
    value = int(raw)

    after = replace_at(tree, path, Literal(value))
    title, rationale = _describe(focus, path, value)
    step = Step(
        title=title,
        rationale=rationale,
        before=to_display(tree),
        focus=to_display(focus),
        after=to_display(after),
        value=value,
        before_tex=to_tex(tree),
        focus_tex=to_tex(focus),
        after_tex=to_tex(after),
    )
    return after, step


def extract_steps(tree: Node) -> Tuple[Step, ...]:
    steps: List[Step] = []
    current = tree
    while not isinstance(current, Literal):
        current, step = reduce_once(current)
        steps.append(step)
    return tuple(steps)

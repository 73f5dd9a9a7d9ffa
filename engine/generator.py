# engine/generator.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import config
from engine.tree import (
    MAX_DEPTH,
    Node,
    depth,
    evaluate,
    grp,
    is_exact_integer,
    num,
    op,
    signature,
)

logger = logging.getLogger(__name__)

Literals = Dict[str, int]


@dataclass(frozen=True)
class Template:
    name: str
    shape: str
    sample: Callable[[random.Random, int], Literals]
    build: Callable[..., Node]


@dataclass(frozen=True)
class GeneratedTree:
    template: str
    tree: Node
    value: int
    signature: str
    fallback: bool = False


# --- Divisor selection ------------------------------------------------------------


def exact_divisor(rng: random.Random, dividend: int, pool: Iterable[int]) -> Optional[int]:
    candidates = [d for d in pool if d != 0 and dividend % d == 0]
    if not candidates:
        return None
    return rng.choice(candidates)


def _pick_divisor(
    rng: random.Random,
    retries: int,
    draw: Callable[[], Tuple[Literals, int, List[int]]],
) -> Tuple[Literals, int]:
    """
    draw() samples the operands feeding one division and returns
    (operands, dividend, divisor pool). Operands are redrawn up to `retries`
    times when nothing in the pool divides evenly; after that the divisor is 1.
    """
    operands: Literals = {}
    for _ in range(retries + 1):
        operands, dividend, pool = draw()
        divisor = exact_divisor(rng, dividend, pool)
        if divisor is not None:
            return operands, divisor
    return operands, 1


# --- Templates --------------------------------------------------------------------
# A) a × (b − c) ÷ d − e × (f + g)


def build_a(a: int, b: int, c: int, d: int, e: int, f: int, g: int) -> Node:
    left = op("div", op("mul", num(a), grp(op("sub", num(b), num(c)))), num(d))
    right = op("mul", num(e), grp(op("add", num(f), num(g))))
    return op("sub", left, right)


def sample_a(rng: random.Random, retries: int) -> Literals:
    def draw():
        a = rng.choice([12, 15, 18, 20, 24, 30, 40])
        b = rng.choice([30, 36, 42, 48, 60])
        c = rng.choice([6, 8, 10, 12, 14, 16, 18])
        preferred = rng.choice([2, 3, 4, 5, 6, 8, 10])
        return {"a": a, "b": b, "c": c}, a * (b - c), [preferred, 2, 3, 4, 5, 6, 8, 10]

    lits, divisor = _pick_divisor(rng, retries, draw)
    lits["d"] = divisor
    lits["e"] = rng.randint(1, 5)
    lits["f"] = rng.choice([4, 5, 6, 7, 8, 9, 10, 12])
    lits["g"] = rng.randint(2, 8)
    return lits


# B) a − b × c ÷ (d + e) + f × (g − h)


def build_b(a: int, b: int, c: int, d: int, e: int, f: int, g: int, h: int) -> Node:
    quotient = op("div", op("mul", num(b), num(c)), grp(op("add", num(d), num(e))))
    left = op("sub", num(a), quotient)
    right = op("mul", num(f), grp(op("sub", num(g), num(h))))
    return op("add", left, right)


def sample_b(rng: random.Random, retries: int) -> Literals:
    def draw():
        b = rng.choice([6, 8, 9, 10, 12, 15])
        c = rng.randint(4, 8)
        return {"b": b, "c": c}, b * c, list(range(2, 11))

    lits, divisor = _pick_divisor(rng, retries, draw)
    # (d + e) must equal the chosen divisor
    if divisor >= 2:
        lits["d"] = rng.randint(1, divisor - 1)
    else:
        lits["d"] = divisor
    lits["e"] = divisor - lits["d"]
    lits["a"] = rng.choice([50, 60, 72, 80, 90, 96])
    lits["f"] = rng.randint(2, 6)
    lits["g"] = rng.choice([12, 14, 16, 18, 20, 22])
    lits["h"] = rng.choice([2, 4, 6, 8, 10])
    return lits


# C) (a + b) × c − d ÷ (e − f)


def build_c(a: int, b: int, c: int, d: int, e: int, f: int) -> Node:
    left = op("mul", grp(op("add", num(a), num(b))), num(c))
    right = op("div", num(d), grp(op("sub", num(e), num(f))))
    return op("sub", left, right)


def sample_c(rng: random.Random, retries: int) -> Literals:
    def draw():
        d = rng.choice([24, 30, 36, 40, 48, 60])
        return {"d": d}, d, [2, 3, 4, 5, 6, 8, 10, 12]

    lits, divisor = _pick_divisor(rng, retries, draw)
    # (e − f) must equal the chosen divisor
    lits["f"] = rng.randint(1, 4)
    lits["e"] = divisor + lits["f"]
    lits["a"] = rng.choice([12, 14, 16, 18, 20, 22])
    lits["b"] = rng.randint(4, 8)
    lits["c"] = rng.randint(3, 6)
    return lits


# D) a ÷ (b − c) × d + (e + f) × g


def build_d(a: int, b: int, c: int, d: int, e: int, f: int, g: int) -> Node:
    left = op("mul", op("div", num(a), grp(op("sub", num(b), num(c)))), num(d))
    right = op("mul", grp(op("add", num(e), num(f))), num(g))
    return op("add", left, right)


def sample_d(rng: random.Random, retries: int) -> Literals:
    def draw():
        a = rng.choice([24, 36, 48, 60, 72, 84, 96])
        return {"a": a}, a, [2, 3, 4, 6, 8, 12]

    lits, divisor = _pick_divisor(rng, retries, draw)
    lits["c"] = rng.randint(1, 9)
    lits["b"] = divisor + lits["c"]
    lits["d"] = rng.randint(2, 6)
    lits["e"] = rng.randint(2, 9)
    lits["f"] = rng.randint(1, 9)
    lits["g"] = rng.randint(2, 5)
    return lits


TEMPLATES: Dict[str, Template] = {
    "A": Template("A", "a × (b − c) ÷ d − e × (f + g)", sample_a, build_a),
    "B": Template("B", "a − b × c ÷ (d + e) + f × (g − h)", sample_b, build_b),
    "C": Template("C", "(a + b) × c − d ÷ (e − f)", sample_c, build_c),
    "D": Template("D", "a ÷ (b − c) × d + (e + f) × g", sample_d, build_d),
}


def build_template(name: str, **literals: int) -> Node:
    template = TEMPLATES.get(name)
    if template is None:
        raise ValueError(f"Unknown template: {name!r}")
    return template.build(**literals)


# --- Fallback ---------------------------------------------------------------------
# Hand-verified: 12 × (30 − 6) ÷ 4 − 2 × (5 + 3) = 72 − 16 = 56

FALLBACK_TEMPLATE = "A"
FALLBACK_LITERALS: Literals = {"a": 12, "b": 30, "c": 6, "d": 4, "e": 2, "f": 5, "g": 3}
FALLBACK_ANSWER = 56


def fallback_tree() -> GeneratedTree:
    tree = build_template(FALLBACK_TEMPLATE, **FALLBACK_LITERALS)
    return GeneratedTree(
        template=FALLBACK_TEMPLATE,
        tree=tree,
        value=FALLBACK_ANSWER,
        signature=signature(tree),
        fallback=True,
    )


# --- Generation -------------------------------------------------------------------


def generate_tree(
    rng: Optional[random.Random] = None,
    exclude: Iterable[str] = (),
    max_attempts: Optional[int] = None,
    divisor_retries: Optional[int] = None,
    templates: Optional[Sequence[str]] = None,
) -> GeneratedTree:
    """
    Build one exact-integer tree from a randomly chosen template.

    Every attempt that evaluates to a non-integer, grows too deep, or hits a
    signature in `exclude` is thrown away. After `max_attempts` rejected
    attempts the fixed fallback tree is returned (even if excluded).
    """
    rng = rng if rng is not None else random.Random()
    max_attempts = config.MAX_ATTEMPTS if max_attempts is None else max_attempts
    retries = config.DIVISOR_RETRIES if divisor_retries is None else divisor_retries
    names = sorted(templates) if templates else sorted(TEMPLATES)
    unknown = [n for n in names if n not in TEMPLATES]
    if unknown:
        raise ValueError(f"Unknown templates: {unknown}")
    excluded = set(exclude)

    for attempt in range(max_attempts):
        template = TEMPLATES[rng.choice(names)]
        tree = template.build(**template.sample(rng, retries))

        value = evaluate(tree)
        if not is_exact_integer(value) or depth(tree) > MAX_DEPTH:
            logger.debug("attempt %d (%s): rejected value %s", attempt, template.name, value)
            continue

        sig = signature(tree)
        if sig in excluded:
            logger.debug("attempt %d (%s): recently issued %s", attempt, template.name, sig)
            continue

        return GeneratedTree(template=template.name, tree=tree, value=int(value), signature=sig)

    logger.warning("Generator exhausted %d attempts; serving fallback tree", max_attempts)
    return fallback_tree()

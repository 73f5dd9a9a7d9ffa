# engine/exercise.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from sympy import Integer
from sympy.parsing.sympy_parser import parse_expr, standard_transformations

import config
from engine.errors import ConsistencyError, InvalidLabelError
from engine.generator import GeneratedTree, fallback_tree, generate_tree
from engine.history import SignatureHistory
from engine.options import Option, build_options
from engine.steps import Step, extract_steps
from engine.tree import (
    Node,
    count_reductions,
    evaluate,
    is_exact_integer,
    signature,
    to_display,
    to_plain,
    to_tex,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExerciseInstance:
    tree: Node
    display: str
    tex: str
    answer: int
    options: Tuple[Option, ...]
    signature: str
    steps: Tuple[Step, ...]
    template: str
    fallback: bool = False

    def option(self, label: str) -> Optional[Option]:
        return next((o for o in self.options if o.label == label), None)


@dataclass(frozen=True)
class GradeResult:
    is_correct: bool
    correct_value: int
    correct_label: str


# --- Consistency checks -----------------------------------------------------------


def _check_exercise(tree: Node, answer: int, steps: Sequence[Step]) -> None:
    """Cross-check the engine's own answer with SymPy's parse of the plain form."""
    parsed = parse_expr(to_plain(tree), transformations=standard_transformations, evaluate=True)
    if parsed != Integer(answer):
        raise ConsistencyError(f"{to_display(tree)} parses to {parsed}, expected {answer}")
    if len(steps) != count_reductions(tree):
        raise ConsistencyError(
            f"{len(steps)} steps for {count_reductions(tree)} reductions in {to_display(tree)}"
        )
    if steps and steps[-1].value != answer:
        raise ConsistencyError(f"Steps end at {steps[-1].value}, expected {answer}")


def _assemble(generated: GeneratedTree, rng: random.Random) -> ExerciseInstance:
    tree = generated.tree
    steps = extract_steps(tree)
    _check_exercise(tree, generated.value, steps)
    return ExerciseInstance(
        tree=tree,
        display=to_display(tree),
        tex=to_tex(tree),
        answer=generated.value,
        options=build_options(generated.value, rng),
        signature=generated.signature,
        steps=steps,
        template=generated.template,
        fallback=generated.fallback,
    )


def fallback_instance(rng: Optional[random.Random] = None) -> ExerciseInstance:
    return _assemble(fallback_tree(), rng if rng is not None else random.Random())


def _degrade(err: ConsistencyError, strict: bool, rng: random.Random) -> ExerciseInstance:
    if strict:
        raise err
    logger.exception("Consistency fault (%s); serving fallback exercise", err)
    return fallback_instance(rng)


# --- Public API -------------------------------------------------------------------


def build_exercise(
    tree: Node,
    rng: Optional[random.Random] = None,
    template: str = "custom",
    strict: Optional[bool] = None,
) -> ExerciseInstance:
    """Turn an already built tree into an exercise (answer, options, worked steps)."""
    rng = rng if rng is not None else random.Random()
    strict = config.STRICT_CHECKS if strict is None else strict
    try:
        value = evaluate(tree)
        if not is_exact_integer(value):
            raise ConsistencyError(f"{to_display(tree)} evaluates to {value}, not an integer")
        generated = GeneratedTree(template, tree, int(value), signature(tree))
        return _assemble(generated, rng)
    except ConsistencyError as e:
        return _degrade(e, strict, rng)


def request_exercise(
    exclude_signatures: Optional[Iterable[str]] = None,
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = None,
    strict: Optional[bool] = None,
    templates: Optional[Sequence[str]] = None,
) -> ExerciseInstance:
    rng = rng if rng is not None else random.Random()
    strict = config.STRICT_CHECKS if strict is None else strict
    generated = generate_tree(
        rng,
        exclude=exclude_signatures or (),
        max_attempts=max_attempts,
        templates=templates,
    )
    try:
        return _assemble(generated, rng)
    except ConsistencyError as e:
        return _degrade(e, strict, rng)


def grade_selection(instance: ExerciseInstance, label: str) -> GradeResult:
    chosen = instance.option(label)
    if chosen is None:
        raise InvalidLabelError(f"unknown option label: {label!r}")
    correct = next(o for o in instance.options if o.is_correct)
    return GradeResult(
        is_correct=chosen.is_correct,
        correct_value=correct.value,
        correct_label=correct.label,
    )


class ExerciseSession:
    """One learner's exercise stream: owns its RNG and its recent-signature window."""

    def __init__(
        self,
        history_size: Optional[int] = None,
        rng: Optional[random.Random] = None,
        strict: Optional[bool] = None,
    ):
        self.history = SignatureHistory(
            config.HISTORY_SIZE if history_size is None else history_size
        )
        self.rng = rng if rng is not None else random.Random()
        self.strict = strict

    def next_exercise(self) -> ExerciseInstance:
        instance = request_exercise(self.history.recent(), self.rng, strict=self.strict)
        self.history.push(instance.signature)
        return instance

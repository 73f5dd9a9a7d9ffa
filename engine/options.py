# engine/options.py
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Tuple

LABELS = ("A", "B", "C", "D")

# Typical slips: a step done out of order, a dropped grouping
STEP_SLIP_OFFSETS = (-8, -6, -4, 4, 6, 8)
GROUPING_SLIP_OFFSETS = (-10, -5, 5, 10)
PAD_OFFSETS = (-12, 12, -7, 7)


@dataclass(frozen=True)
class Option:
    label: str
    value: int
    is_correct: bool


def distractors(answer: int, rng: random.Random) -> List[int]:
    """Three distinct wrong values modelled on common mistakes."""
    candidates = [
        answer + rng.choice(STEP_SLIP_OFFSETS),
        -answer,  # global sign slip
        answer + rng.choice(GROUPING_SLIP_OFFSETS),
    ]
    wrong: List[int] = []
    for v in candidates:
        if v != answer and v not in wrong:
            wrong.append(v)

    # Pad with small perturbations; the list is finite so this always stops
    pads = list(PAD_OFFSETS)
    rng.shuffle(pads)
    pads += [k for n in range(1, 16) for k in (n, -n)]
    for offset in pads:
        if len(wrong) >= 3:
            break
        v = answer + offset
        if v != answer and v not in wrong:
            wrong.append(v)
    return wrong[:3]


def build_options(answer: int, rng: random.Random) -> Tuple[Option, ...]:
    values = [answer] + distractors(answer, rng)
    rng.shuffle(values)
    return tuple(
        Option(label=label, value=value, is_correct=(value == answer))
        for label, value in zip(LABELS, values)
    )

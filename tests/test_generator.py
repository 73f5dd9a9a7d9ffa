import random

import pytest

from engine import generator
from engine.generator import (
    FALLBACK_ANSWER,
    TEMPLATES,
    _pick_divisor,
    build_template,
    exact_divisor,
    fallback_tree,
    generate_tree,
)
from engine.tree import MAX_DEPTH, Literal, depth, evaluate, is_exact_integer, iter_nodes, signature


@pytest.mark.parametrize("name", sorted(TEMPLATES))
def test_template_always_exact_integer(name):
    rng = random.Random(1000 + ord(name))
    for _ in range(10_000):
        g = generate_tree(rng, templates=[name])
        assert g.template == name
        assert not g.fallback
        value = evaluate(g.tree)
        assert is_exact_integer(value)
        assert int(value) == g.value


@pytest.mark.parametrize("name", sorted(TEMPLATES))
def test_template_shape_bounds(name):
    rng = random.Random(7)
    for _ in range(500):
        g = generate_tree(rng, templates=[name])
        assert depth(g.tree) <= MAX_DEPTH
        assert signature(g.tree) == g.signature
        for node in iter_nodes(g.tree):
            if isinstance(node, Literal):
                assert node.value >= 0


def test_generate_uses_every_template():
    rng = random.Random(3)
    seen = {generate_tree(rng).template for _ in range(200)}
    assert seen == set(TEMPLATES)


def test_generate_is_reproducible_with_seed():
    a = generate_tree(random.Random(42))
    b = generate_tree(random.Random(42))
    assert a.signature == b.signature and a.value == b.value


def test_generate_skips_excluded_signature():
    first = generate_tree(random.Random(42))
    again = generate_tree(random.Random(42), exclude={first.signature})
    assert again.signature != first.signature
    assert not again.fallback


def test_fallback_when_attempts_exhausted():
    g = generate_tree(random.Random(1), max_attempts=0)
    assert g.fallback
    assert g.value == FALLBACK_ANSWER == 56
    assert evaluate(g.tree) == 56


def test_fallback_served_even_if_excluded():
    fb = fallback_tree()
    g = generate_tree(random.Random(1), exclude={fb.signature}, max_attempts=0)
    assert g.fallback and g.signature == fb.signature


def test_unknown_template():
    with pytest.raises(ValueError):
        build_template("Z", a=1)
    with pytest.raises(ValueError):
        generate_tree(random.Random(1), templates=["Z"])


def test_exact_divisor_filters_pool():
    rng = random.Random(0)
    for _ in range(50):
        assert exact_divisor(rng, 24, [0, 5, 6, 7, 8]) in (6, 8)
    assert exact_divisor(rng, 10, [3, 7]) is None


def test_zero_divisor_retries_still_divide_evenly():
    rng = random.Random(11)
    for _ in range(2_000):
        g = generate_tree(rng, divisor_retries=0)
        assert is_exact_integer(evaluate(g.tree))


def test_build_template_b_c_d():
    assert evaluate(build_template("B", a=50, b=6, c=5, d=2, e=1, f=2, g=12, h=2)) == 60
    assert evaluate(build_template("C", a=12, b=4, c=3, d=24, e=8, f=2)) == 44
    assert evaluate(build_template("D", a=24, b=7, c=1, d=2, e=2, f=3, g=4)) == 28


def test_pick_divisor_resamples_then_falls_back_to_one():
    draws = []

    def draw():
        draws.append(1)
        return {"x": 7}, 7, [2, 3]

    lits, divisor = _pick_divisor(random.Random(0), 3, draw)
    assert len(draws) == 4
    assert divisor == 1
    assert lits == {"x": 7}


def test_pick_divisor_stops_at_first_even_division():
    draws = []

    def draw():
        draws.append(1)
        return {"x": 12}, 12, [5, 4]

    _, divisor = _pick_divisor(random.Random(0), 3, draw)
    assert len(draws) == 1 and divisor == 4


def test_templates_with_divisor_one(monkeypatch):
    monkeypatch.setattr(generator, "exact_divisor", lambda rng, dividend, pool: None)
    rng = random.Random(5)
    for _ in range(50):
        b = generator.sample_b(rng, 2)
        assert b["d"] + b["e"] == 1
        c = generator.sample_c(rng, 2)
        assert c["e"] - c["f"] == 1
        d = generator.sample_d(rng, 2)
        assert d["b"] - d["c"] == 1
        a = generator.sample_a(rng, 2)
        assert a["d"] == 1
        for name, lits in (("A", a), ("B", b), ("C", c), ("D", d)):
            assert is_exact_integer(evaluate(build_template(name, **lits)))

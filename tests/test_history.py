import pytest

from engine.history import SignatureHistory


def test_push_and_evict_oldest():
    h = SignatureHistory(capacity=3)
    for s in ["a", "b", "c", "d"]:
        h.push(s)
    assert len(h) == 3
    assert h.as_list() == ["b", "c", "d"]
    assert "a" not in h and "d" in h
    assert h.recent() == frozenset({"b", "c", "d"})


def test_clear_and_iter():
    h = SignatureHistory(capacity=2)
    h.push("x")
    assert list(h) == ["x"]
    h.clear()
    assert len(h) == 0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        SignatureHistory(capacity=0)


def test_histories_are_independent():
    a, b = SignatureHistory(), SignatureHistory()
    a.push("x")
    assert "x" not in b

import sys

from engine.__main__ import main
from engine.generator import TEMPLATES


def test_cli_prints_exercises(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["engine", "--seed", "3", "--count", "2"])
    main()
    out = capsys.readouterr().out
    assert "#1 [" in out and "#2 [" in out
    assert out.count("Answer:") == 2
    assert "Step 1 - " in out
    assert out.count("Template: ") == 2
    assert any(t.shape in out for t in TEMPLATES.values())

# engine/errors.py
from __future__ import annotations


class ConsistencyError(RuntimeError):
    """A tree the engine built cannot be reduced or checked as expected (a logic defect)."""


class InvalidLabelError(ValueError):
    """grade_selection() was given a label that is not one of the instance's options."""

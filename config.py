from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


# Per-session window of recently issued signatures (K)
HISTORY_SIZE = max(1, _env_int("EXERCISE_HISTORY_SIZE", 10))

# Generator retry bounds; both loops are counted, never open-ended
MAX_ATTEMPTS = max(0, _env_int("EXERCISE_MAX_ATTEMPTS", 40))
DIVISOR_RETRIES = max(0, _env_int("EXERCISE_DIVISOR_RETRIES", 8))

# If True: consistency faults propagate instead of degrading to the fallback exercise
STRICT_CHECKS = _env_bool("EXERCISE_STRICT_CHECKS", False)

MAX_SESSIONS = max(1, _env_int("EXERCISE_MAX_SESSIONS", 1000))

_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,https://sumrise-maths.vercel.app"
CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()
]

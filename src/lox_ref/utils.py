from __future__ import annotations

import os as _os
from typing import Optional

DUMP_TOKENS_ENV = "LOX_DUMP_TOKENS"

_TRUTHY = ("1", "true", "yes", "on")


def env_flag(name: str) -> bool:
    """Check if an environment toggle is switched on."""
    value: Optional[str] = _os.environ.get(name)
    if value is None:
        return False

    return value.strip().lower() in _TRUTHY


def dump_tokens_enabled() -> bool:
    return env_flag(DUMP_TOKENS_ENV)


def set_dump_tokens(enabled: bool) -> None:
    if enabled:
        _os.environ[DUMP_TOKENS_ENV] = "1"
    else:
        _os.environ.pop(DUMP_TOKENS_ENV, None)

"""JSON rendering for log lines and error messages."""

from __future__ import annotations

import json
from typing import Any


def to_json(value: Any) -> str:
    """Render *value* as JSON, falling back to ``str`` for odd types.

    Sets are rendered as sorted lists so log lines are stable between runs.
    """
    return json.dumps(value, default=_fallback, ensure_ascii=False)


def _fallback(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)

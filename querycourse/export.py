"""
JSON export of course records.

Writes CourseInfo / CourseDetails lists to a file so results can be inspected
or fed into other tools. Enum values (Language) are written as their wire code.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Iterable


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def export_courses_to_json(records: Iterable[Any], out_path: str | Path) -> int:
    """
    Export dataclass records to a JSON array. Returns number of exported records.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    payload = [asdict(r) for r in records]
    out.write_text(json.dumps(payload, indent=2, ensure_ascii=False, default=_jsonable), encoding="utf-8")
    return len(payload)

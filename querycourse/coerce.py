"""
Coercion helpers for the upstream wire conventions.

The querycourse API is loose about types:
- numbers frequently arrive as strings ("3.0", "9999")
- booleans are sent and expected as 0/1
- "no value" is an empty string

Every field rule in parse.py goes through one of these functions, so the
decoder stays a readable field table instead of ad-hoc conversions.
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

Number = TypeVar("Number", int, float)


def decode_numeric_string(value: Any, kind: Type[Number]) -> Number:
    """
    Accept a JSON number or a numeric string and return it as `kind`.

    Raises ValueError for null, booleans, empty strings and unparsable text.
    """
    try:
        return _convert_number(value, kind)
    except OverflowError as e:
        raise ValueError(f"number out of range: {e}") from e


def _convert_number(value: Any, kind: Type[Number]) -> Number:
    if value is None or isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")

    if isinstance(value, (int, float)):
        if kind is int and isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"expected an integer, got {value!r}")
            return int(value)  # type: ignore[return-value]
        return kind(value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("expected a number, got an empty string")
        # int("3") works, int("3.0") does not; accept both for counts
        if kind is int:
            try:
                return int(text)  # type: ignore[return-value]
            except ValueError:
                as_float = float(text)
                if not as_float.is_integer():
                    raise ValueError(f"expected an integer, got {value!r}")
                return int(as_float)  # type: ignore[return-value]
        return kind(text)

    raise ValueError(f"expected a number, got {type(value).__name__}")


def decode_tolerated_int(value: Any, default: int) -> int:
    """
    Like decode_numeric_string(value, int), but fall back to `default`.

    Only for fields the API is known to send unreliably.
    """
    try:
        return decode_numeric_string(value, int)
    except ValueError:
        return default


def decode_bool_as_int(value: Any) -> bool:
    """
    Decode a 0/1 flag (int, numeric string or JSON boolean) into a bool.
    """
    if isinstance(value, bool):
        return value
    flag = decode_numeric_string(value, int)
    if flag not in (0, 1):
        raise ValueError(f"expected 0 or 1, got {value!r}")
    return flag == 1


def encode_bool_as_int(flag: bool) -> int:
    return 1 if flag else 0


def decode_optional_text(value: Any) -> Optional[str]:
    """
    Map "" and null to None; any other string is returned unchanged.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {_describe(value)}")
    return value


def decode_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {_describe(value)}")
    return value


def _describe(value: Any) -> str:
    return "null" if value is None else type(value).__name__

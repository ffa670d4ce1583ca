"""Argument parsing helpers for tool request dataclasses.

Each helper reads one field from a raw tool ``arguments`` dict, checks its
type, and raises ``ValidationException`` naming the field when it doesn't fit.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from .exceptions import ValidationException

_MISSING = object()


def _fetch(args: Mapping[str, Any], name: str, required: bool) -> Any:
    value = args.get(name, _MISSING)
    if value is _MISSING or value is None:
        if required:
            raise ValidationException(f"Missing required field: {name}", field=name)
        return _MISSING
    return value


def get_str(
    args: Mapping[str, Any],
    name: str,
    *,
    required: bool = False,
    default: str | None = None,
    allow_empty: bool = False,
    max_length: int | None = None,
) -> str | None:
    value = _fetch(args, name, required)
    if value is _MISSING:
        return default
    if not isinstance(value, str):
        raise ValidationException(f"{name} must be a string", field=name)
    if not allow_empty and not value.strip():
        raise ValidationException(f"{name} must not be empty", field=name)
    if max_length is not None and len(value) > max_length:
        raise ValidationException(f"{name} must be at most {max_length} characters", field=name)
    return value


def get_int(
    args: Mapping[str, Any],
    name: str,
    *,
    required: bool = False,
    default: int | None = None,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int | None:
    value = _fetch(args, name, required)
    if value is _MISSING:
        return default
    # JSON numbers may arrive as floats; accept them only when integral
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationException(f"{name} must be an integer", field=name)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationException(f"{name} must be an integer", field=name)
        value = int(value)
    if minimum is not None and value < minimum:
        raise ValidationException(f"{name} must be >= {minimum}", field=name)
    if maximum is not None and value > maximum:
        raise ValidationException(f"{name} must be <= {maximum}", field=name)
    return value


def get_number(
    args: Mapping[str, Any],
    name: str,
    *,
    required: bool = False,
    default: float | None = None,
    minimum: float | None = None,
    maximum: float | None = None,
) -> float | None:
    value = _fetch(args, name, required)
    if value is _MISSING:
        return default
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationException(f"{name} must be a number", field=name)
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationException(f"{name} must be a finite number", field=name)
    if minimum is not None and value < minimum:
        raise ValidationException(f"{name} must be >= {minimum}", field=name)
    if maximum is not None and value > maximum:
        raise ValidationException(f"{name} must be <= {maximum}", field=name)
    return value


def get_bool(args: Mapping[str, Any], name: str, *, required: bool = False, default: bool | None = None) -> bool | None:
    value = _fetch(args, name, required)
    if value is _MISSING:
        return default
    if not isinstance(value, bool):
        raise ValidationException(f"{name} must be a boolean", field=name)
    return value


def get_dict(
    args: Mapping[str, Any],
    name: str,
    *,
    required: bool = False,
    default: dict[str, Any] | None = None,
) -> dict[str, Any] | None:
    value = _fetch(args, name, required)
    if value is _MISSING:
        return dict(default) if default is not None else None
    if not isinstance(value, dict):
        raise ValidationException(f"{name} must be an object", field=name)
    return value


def get_list(
    args: Mapping[str, Any],
    name: str,
    *,
    required: bool = False,
    default: list[Any] | None = None,
    item_type: type | None = None,
) -> list[Any] | None:
    value = _fetch(args, name, required)
    if value is _MISSING:
        return list(default) if default is not None else None
    if not isinstance(value, list):
        raise ValidationException(f"{name} must be an array", field=name)
    if item_type is not None:
        for item in value:
            if not isinstance(item, item_type) or (isinstance(item, bool) and item_type is not bool):
                raise ValidationException(f"{name} items must be of type {item_type.__name__}", field=name)
    return value


def validate_enum(value: str, valid: Iterable[str], name: str) -> str:
    """Check that ``value`` is one of ``valid``."""
    allowed = list(valid)
    if value not in allowed:
        raise ValidationException(f"Invalid {name} '{value}'. Must be one of: {', '.join(allowed)}", field=name)
    return value


def get_enum(
    args: Mapping[str, Any],
    name: str,
    valid: Iterable[str],
    *,
    required: bool = False,
    default: str | None = None,
) -> str | None:
    value = get_str(args, name, required=required)
    if value is None:
        return default
    return validate_enum(value, valid, name)


MAX_AMOUNT = 2**256 - 1
_MAX_AMOUNT_DIGITS = len(str(MAX_AMOUNT))


def parse_amount(value: Any, name: str) -> int:
    """Parse a wei amount (decimal string or int) into an int in ``0..2**256-1``."""
    if isinstance(value, bool):
        raise ValidationException(f"{name} must be a non-negative integer amount", field=name)
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        digits = value.strip().lstrip("0") or "0"
        if len(digits) > _MAX_AMOUNT_DIGITS:
            raise ValidationException(f"{name} exceeds the maximum amount", field=name)
        amount = int(digits)
    else:
        raise ValidationException(f"{name} must be a non-negative integer amount", field=name)
    if amount < 0:
        raise ValidationException(f"{name} must be a non-negative integer amount", field=name)
    if amount > MAX_AMOUNT:
        raise ValidationException(f"{name} exceeds the maximum amount", field=name)
    return amount


def get_amount(
    args: Mapping[str, Any],
    name: str,
    *,
    required: bool = False,
    default: str | None = None,
) -> str | None:
    """Read a wei amount and return it normalized as a decimal string."""
    value = _fetch(args, name, required)
    if value is _MISSING:
        return default
    return str(parse_amount(value, name))

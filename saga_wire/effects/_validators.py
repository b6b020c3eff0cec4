"""Runtime validators for effect attribute type checking."""

from __future__ import annotations

from collections.abc import Mapping


def _type_name(value: object) -> str:
    return type(value).__name__


def ensure_callable(value: object, *, name: str) -> None:
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {_type_name(value)}")


def ensure_optional_callable(value: object | None, *, name: str) -> None:
    if value is not None and not callable(value):
        raise TypeError(f"{name} must be callable or None, got {_type_name(value)}")


def ensure_call_target(value: object, *, name: str) -> None:
    """Accept a callable or an ``(object, method)`` pair."""
    if isinstance(value, tuple):
        if len(value) != 2:
            raise TypeError(f"{name} pair must be (object, method), got {len(value)} items")
        method = value[1]
        if isinstance(method, str):
            if not callable(getattr(value[0], method, None)):
                raise TypeError(
                    f"{name} method {method!r} is not callable on {_type_name(value[0])}"
                )
            return
        ensure_callable(method, name=f"{name}[1]")
        return
    ensure_callable(value, name=name)


def ensure_pattern(value: object, *, name: str) -> None:
    if isinstance(value, (str, type)) or callable(value):
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            ensure_pattern(item, name=f"{name}[{index}]")
        return
    raise TypeError(f"{name} must be str, type, callable or sequence, got {_type_name(value)}")


def ensure_effect_mapping(values: object, *, name: str) -> None:
    from .base import EffectBase

    if not isinstance(values, Mapping):
        raise TypeError(f"{name} must be mapping, got {_type_name(values)}")
    if not values:
        raise ValueError(f"{name} must not be empty")
    for key, item in values.items():
        if not isinstance(key, str):
            raise TypeError(f"{name} keys must be str, got {_type_name(key)}")
        if not isinstance(item, EffectBase):
            raise TypeError(f"{name}['{key}'] must be an effect, got {_type_name(item)}")


__all__ = [
    "ensure_call_target",
    "ensure_callable",
    "ensure_effect_mapping",
    "ensure_optional_callable",
    "ensure_pattern",
]

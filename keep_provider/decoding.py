"""Tolerant decoding of weakly typed Keep API responses.

The API returns untyped JSON whose field shapes differ between endpoints:
numbers arrive as floats even for ids and priorities, and ``matchers`` comes
either as an object or as a list of ``[key, value]`` pairs. Every converter
here checks the dynamic type first and raises ``UnexpectedShape`` instead of
failing on a shape it does not know; the caller logs and skips the field.
"""

import logging
from typing import Any, Callable, Iterable

from pydantic import BaseModel

Converter = Callable[[Any], Any]


class UnexpectedShape(Exception):
    """A response field has a type the converter cannot use."""


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_str(value: Any) -> str:
    """Attempt string, then number, then bool formatting."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _format_number(value)
    raise UnexpectedShape(f"expected string, got {type(value).__name__}")


def as_text(value: Any) -> str | None:
    """Like as_str, but an empty string means unset."""
    return as_str(value) or None


def as_id(value: Any) -> str:
    """Ids compare as strings whatever their wire type; 12.0 becomes "12"."""
    if isinstance(value, bool):
        raise UnexpectedShape("expected id, got bool")
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, str):
        return value
    raise UnexpectedShape(f"expected id, got {type(value).__name__}")


def as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise UnexpectedShape("expected integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise UnexpectedShape(f"expected integer, got {value!r}")


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise UnexpectedShape(f"expected bool, got {value!r}")


def as_str_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        raise UnexpectedShape(f"expected object, got {type(value).__name__}")
    result: dict[str, str] = {}
    for key, item in value.items():
        if item is None:
            continue
        result[str(key)] = as_str(item)
    return result


def as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise UnexpectedShape(f"expected list, got {type(value).__name__}")
    return [as_str(item) for item in value if item is not None]


def as_matchers(value: Any) -> list[tuple[str, str]]:
    """Normalize matchers to ordered ``(key, value)`` pairs.

    Accepts ``{"key": "value"}``, ``[["key", "value"], ...]`` and
    ``[{"key": ..., "value": ...}, ...]``. Malformed list entries are skipped.
    """
    if isinstance(value, dict):
        return [(str(k), as_str(v)) for k, v in value.items() if v is not None]

    if not isinstance(value, list):
        raise UnexpectedShape(f"expected object or list, got {type(value).__name__}")

    pairs: list[tuple[str, str]] = []
    for item in value:
        if isinstance(item, (list, tuple)) and len(item) == 2 and isinstance(item[0], str):
            key, raw = item
        elif isinstance(item, dict) and isinstance(item.get("key"), str) and "value" in item:
            key, raw = item["key"], item["value"]
        else:
            continue
        try:
            pairs.append((key, as_str(raw)))
        except UnexpectedShape:
            continue
    return pairs


def as_choice(choices: Iterable[str]) -> Converter:
    allowed = frozenset(choices)

    def convert(value: Any) -> str:
        text = as_str(value)
        if text not in allowed:
            raise UnexpectedShape(f"expected one of {sorted(allowed)}, got {text!r}")
        return text

    return convert


class ResponseDecoder:
    """Fold a decoded JSON object into a model, one field at a time.

    Rules per field:
    - present with a usable shape: overwrites the local value;
    - present as null: resets the field to its model default;
    - present with an unexpected shape: logged, local value kept;
    - absent: reset to the model default when ``reset_omitted`` is set,
      unless the field is required or listed in ``keep_on_omit``.
    """

    def __init__(self, logger: logging.Logger, kind: str):
        self._logger = logger
        self._kind = kind

    def apply(
        self,
        model: BaseModel,
        body: dict[str, Any],
        fields: dict[str, Converter],
        wire_names: dict[str, str] | None = None,
        keep_on_omit: Iterable[str] = (),
        reset_omitted: bool = True,
    ) -> BaseModel:
        wire_names = wire_names or {}
        keep = set(keep_on_omit)
        model_fields = type(model).model_fields
        updates: dict[str, Any] = {}

        for name, convert in fields.items():
            wire = wire_names.get(name, name)
            info = model_fields[name]

            if wire not in body:
                if reset_omitted and name not in keep and not info.is_required():
                    updates[name] = info.get_default(call_default_factory=True)
                continue

            value = body[wire]
            if value is None:
                if not info.is_required():
                    updates[name] = info.get_default(call_default_factory=True)
                continue

            try:
                updates[name] = convert(value)
            except UnexpectedShape as e:
                self._logger.warning(
                    f"Skipping {self._kind} field '{wire}' with unexpected shape: {e}"
                )

        return model.model_copy(update=updates)

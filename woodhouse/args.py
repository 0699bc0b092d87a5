"""Shape-based argument resolution for the callback-style bot API.

Loose call sites such as ``bot.query("clientinfo", {"clid": 5}, on_done)``
pass their arguments in any order; each argument is routed to a named field
by its runtime shape, not by its position.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Union

logger = logging.getLogger(__name__)


class Shape(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    CALLABLE = "callable"
    STRUCTURED = "structured"


Destination = Union[str, Callable[[Any], str]]


def _structured_field(value: Any) -> str:
    return "options" if isinstance(value, (list, tuple)) else "params"


DEFAULT_TYPES: dict[Shape, Destination] = {
    Shape.NUMBER: "id",
    Shape.TEXT: "action",
    Shape.CALLABLE: "callback",
    Shape.STRUCTURED: _structured_field,
}


def shape_of(value: Any) -> Shape | None:
    """Classify value; None for shapes with no route (bools, bytes, objects)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return Shape.NUMBER
    if isinstance(value, str):
        return Shape.TEXT
    if isinstance(value, (list, tuple, Mapping)):
        return Shape.STRUCTURED
    if callable(value):
        return Shape.CALLABLE
    return None


class ResolvedArgs(dict):
    """Field name -> value. Missing fields read as None; callback is always callable."""

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            if name.startswith("__"):
                raise AttributeError(name) from None
            return None


def _missing_callback(*args: Any, **kwargs: Any) -> None:
    logger.debug("No callback for result: args=%r kwargs=%r", args, kwargs)


def resolve_args(
    args: tuple[Any, ...] | list[Any],
    types: Mapping[Shape, Destination] | None = None,
    on_warning: Callable[[str], Any] | None = None,
) -> ResolvedArgs:
    """Route each argument to a field by shape.

    types overrides DEFAULT_TYPES per shape; a destination is a field name or
    a selector called with the value. None arguments are skipped. Unroutable
    arguments are reported through on_warning and dropped. Two arguments with
    the same destination: the later one wins.
    """
    type_map: dict[Shape, Destination] = {**DEFAULT_TYPES, **(types or {})}
    parsed = ResolvedArgs()

    for value in args:
        if value is None:
            continue
        shape = shape_of(value)
        destination = type_map.get(shape) if shape is not None else None
        if destination is None:
            _warn(on_warning, f"Unknown argument type: {type(value).__name__}")
            continue
        name = destination if isinstance(destination, str) else destination(value)
        if name in parsed:
            logger.debug("Argument %r overrides earlier value for %r", value, name)
        parsed[name] = value

    if not callable(parsed.get("callback")):
        # awaiting callers routinely omit it
        logger.debug("Invalid/missing callback provided")
        parsed["callback"] = _missing_callback

    logger.debug("Processing raw args: %r", args)
    logger.debug("Parsed args: %r", dict(parsed))
    return parsed


def _warn(on_warning: Callable[[str], Any] | None, message: str) -> None:
    if on_warning is not None:
        on_warning(message)
    else:
        logger.warning(message)

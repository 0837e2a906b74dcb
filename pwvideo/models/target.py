"""
Targets: references to a page element or a point on the page.

A target is one of four variants. Selector and text targets are resolved
through the page surface on every use; a handle target wraps a locator that
was already resolved and is reused as is; a point target needs no page at all.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from pwvideo.errors import InvalidTargetError


@dataclass(frozen=True)
class SelectorTarget:
    selector: str


@dataclass(frozen=True)
class TextTarget:
    """First element whose text matches exactly."""
    text: str


@dataclass(frozen=True)
class PointTarget:
    x: float
    y: float


@dataclass(frozen=True)
class HandleTarget:
    """A locator resolved earlier, reused to avoid re-querying after a scroll."""
    locator: Any


Target = Union[SelectorTarget, TextTarget, PointTarget, HandleTarget]

TARGET_TYPES = (SelectorTarget, TextTarget, PointTarget, HandleTarget)


def make_target(
    selector: Optional[str] = None,
    text: Optional[str] = None,
    point: Optional[Tuple[float, float]] = None,
    locator: Any = None,
) -> Target:
    """
    Build a target from keyword options.

    Exactly one option must be given.

    Raises:
        InvalidTargetError: If no option or more than one option is given
    """
    given = {
        name: value
        for name, value in (
            ("selector", selector),
            ("text", text),
            ("point", point),
            ("locator", locator),
        )
        if value is not None
    }

    if not given:
        raise InvalidTargetError("Must provide either selector, text, point or locator")
    if len(given) > 1:
        raise InvalidTargetError(
            f"Options are mutually exclusive, got: {', '.join(sorted(given))}"
        )

    if selector is not None:
        if not selector:
            raise InvalidTargetError("Selector must not be empty")
        return SelectorTarget(selector)
    if text is not None:
        if not text:
            raise InvalidTargetError("Text must not be empty")
        return TextTarget(text)
    if point is not None:
        x, y = point
        return PointTarget(x, y)
    return HandleTarget(locator)


def coerce_target(target: Optional[Target] = None, **options: Any) -> Target:
    """Accept either a ready-made target or the keyword options of make_target."""
    if target is not None:
        if any(value is not None for value in options.values()):
            raise InvalidTargetError("Pass either a target or target options, not both")
        if not isinstance(target, TARGET_TYPES):
            raise InvalidTargetError(f"Unsupported target: {target!r}")
        return target
    return make_target(**options)

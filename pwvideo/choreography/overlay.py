"""
Presentation overlay injected into recorded pages.

Headless browsers do not draw a pointer, so the overlay adds a cursor element
that follows synthetic mouse events, plus the imagery for the scroll
indicator. Nothing here affects pointer state.
"""

from __future__ import annotations
from enum import Enum

from pwvideo.choreography.scroll import ScrollDirection
from pwvideo.choreography.surface import PageSurface


class CursorKind(str, Enum):
    DEFAULT = "default"
    HAND = "hand"


_ARROW_SVG = (
    "data:image/svg+xml;utf8,"
    "<svg xmlns='http://www.w3.org/2000/svg' width='24' height='24' viewBox='0 0 24 24'>"
    "<path d='M3 2l7 19 2.5-7.5L20 11z' fill='black' stroke='white' stroke-width='1.5'/>"
    "</svg>"
)

_HAND_SVG = (
    "data:image/svg+xml;utf8,"
    "<svg xmlns='http://www.w3.org/2000/svg' width='24' height='24' viewBox='0 0 24 24'>"
    "<path d='M9 2a1.5 1.5 0 0 1 3 0v8l1-.2V8a1.5 1.5 0 0 1 3 0v2.5l1 .2a1.5 1.5 0 0 1 3 .3"
    "V16c0 3.5-2.5 6-6 6h-2c-2 0-3.5-1-4.5-2.5L4 14a1.5 1.5 0 0 1 2.5-1.7L9 14z' "
    "fill='white' stroke='black' stroke-width='1.2'/>"
    "</svg>"
)

_SCROLL_UP_SVG = (
    "data:image/svg+xml;utf8,"
    "<svg xmlns='http://www.w3.org/2000/svg' width='30' height='83' viewBox='0 0 30 83'>"
    "<rect x='1' y='1' width='28' height='46' rx='14' fill='none' stroke='white' stroke-width='2'/>"
    "<rect x='13' y='9' width='4' height='10' rx='2' fill='white'/>"
    "<path d='M15 56l-9 10h18z' fill='white'/>"
    "</svg>"
)

_SCROLL_DOWN_SVG = (
    "data:image/svg+xml;utf8,"
    "<svg xmlns='http://www.w3.org/2000/svg' width='30' height='83' viewBox='0 0 30 83'>"
    "<rect x='1' y='1' width='28' height='46' rx='14' fill='none' stroke='white' stroke-width='2'/>"
    "<rect x='13' y='9' width='4' height='10' rx='2' fill='white'/>"
    "<path d='M15 80l-9-10h18z' fill='white'/>"
    "</svg>"
)

# Registered with context.add_init_script so it runs on every navigation.
INIT_SCRIPT = """
(() => {
  const install = () => {
    if (window.__cursor) return;

    const style = document.createElement("style");
    style.textContent = `
      :root {
        --playwright-scroll-up-image: url("%(scroll_up)s");
        --playwright-scroll-down-image: url("%(scroll_down)s");
      }
      .playwright-cursor {
        position: fixed;
        top: 0;
        left: 0;
        width: 24px;
        height: 24px;
        pointer-events: none;
        z-index: 2147483647;
        background-size: contain;
        background-repeat: no-repeat;
      }
      .playwright-cursor.default { background-image: url("%(arrow)s"); }
      .playwright-cursor.hand { background-image: url("%(hand)s"); margin-left: -7px; }
    `;
    document.head.appendChild(style);

    const cursor = document.createElement("div");
    cursor.className = "playwright-cursor default";
    document.body.appendChild(cursor);
    window.__cursor = cursor;

    document.addEventListener("mousemove", (event) => {
      cursor.style.transform = `translate(${event.clientX}px, ${event.clientY}px)`;
    }, true);
  };

  if (document.readyState === "loading") {
    document.addEventListener("DOMContentLoaded", install);
  } else {
    install();
  }
})();
""" % {
    "arrow": _ARROW_SVG,
    "hand": _HAND_SVG,
    "scroll_up": _SCROLL_UP_SVG,
    "scroll_down": _SCROLL_DOWN_SVG,
}

_SET_CURSOR = """
(kind) => {
  if (window.__cursor) {
    window.__cursor.className = `playwright-cursor ${kind}`;
  }
}
"""

_SHOW_INDICATOR = """
({ direction, fadeMs }) => {
  const indicator = document.createElement("div");
  indicator.className = "playwright-scroll-indicator";
  indicator.style.cssText = `
    position: fixed;
    bottom: 30px;
    left: 50%;
    transform: translateX(-50%);
    width: 30px;
    height: 83px;
    pointer-events: none;
    z-index: 99999;
    background-size: contain;
    background-repeat: no-repeat;
    background-image: var(--playwright-scroll-${direction}-image);
    opacity: 0;
    transition: opacity ${fadeMs}ms ease-in-out;
  `;
  document.body.appendChild(indicator);
  requestAnimationFrame(() => {
    indicator.style.opacity = "1";
  });
}
"""

_FADE_INDICATOR = """
() => {
  for (const indicator of document.querySelectorAll(".playwright-scroll-indicator")) {
    indicator.style.opacity = "0";
  }
}
"""

_REMOVE_INDICATOR = """
() => {
  for (const indicator of document.querySelectorAll(".playwright-scroll-indicator")) {
    indicator.remove();
  }
}
"""


class Overlay:
    """Presentation-layer updates for one page."""

    def __init__(self, surface: PageSurface):
        self.surface = surface

    async def set_cursor(self, kind: CursorKind) -> None:
        await self.surface.evaluate(_SET_CURSOR, CursorKind(kind).value)

    async def show_scroll_indicator(self, direction: ScrollDirection, fade_ms: float) -> None:
        await self.surface.evaluate(
            _SHOW_INDICATOR,
            {"direction": ScrollDirection(direction).value, "fadeMs": fade_ms},
        )

    async def fade_scroll_indicator(self) -> None:
        await self.surface.evaluate(_FADE_INDICATOR)

    async def remove_scroll_indicator(self) -> None:
        await self.surface.evaluate(_REMOVE_INDICATOR)

"""
Page-control surface.

The choreography engine never talks to Playwright directly. It goes through
this capability set so that the engine can be driven by a fake in tests.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from pwvideo.models.geometry import BoundingBox

logger = logging.getLogger(__name__)


class PageSurface(ABC):
    """Abstract capability set for controlling one page."""

    # =========================================================================
    # Element queries
    # =========================================================================

    @abstractmethod
    async def resolve_by_text(self, text: str) -> Optional[Any]:
        """Locator for the first element whose text matches exactly, or None."""
        pass

    @abstractmethod
    async def resolve_by_selector(self, selector: str) -> Any:
        """Locator for the first element matching a selector."""
        pass

    @abstractmethod
    async def count_matches(self, selector: str) -> int:
        """Number of elements currently matching a selector."""
        pass

    @abstractmethod
    async def bounding_box(self, locator: Any) -> Optional[BoundingBox]:
        """Viewport-relative bounds of a located element, or None if absent."""
        pass

    # =========================================================================
    # Input primitives
    # =========================================================================

    @abstractmethod
    async def move_pointer_to(self, x: float, y: float) -> None:
        pass

    @abstractmethod
    async def click_at(self, x: float, y: float) -> None:
        pass

    @abstractmethod
    async def type_sequentially(self, locator: Any, text: str, delay_ms: float) -> None:
        """Type text into a located element one key at a time."""
        pass

    # =========================================================================
    # Page
    # =========================================================================

    @abstractmethod
    async def navigate(self, url: str, **options: Any) -> None:
        pass

    @abstractmethod
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run a script in the page and return its result."""
        pass

    async def viewport_height(self) -> float:
        return await self.evaluate("() => window.innerHeight")

    async def scroll_offset(self) -> float:
        return await self.evaluate("() => window.scrollY")

    async def scroll_to(self, offset: float) -> None:
        await self.evaluate("(y) => window.scrollTo(0, y)", offset)

    async def next_frame(self) -> float:
        """Wait for the next animation frame and return its timestamp in ms."""
        return await self.evaluate(
            "() => new Promise((resolve) => requestAnimationFrame(resolve))"
        )


class PlaywrightPageSurface(PageSurface):
    """
    Page surface backed by a Playwright async ``Page``.

    Usage:
        surface = PlaywrightPageSurface(page)
        box = await surface.bounding_box(await surface.resolve_by_selector("#login"))
    """

    def __init__(self, page: Any):
        self.page = page

    async def resolve_by_text(self, text: str) -> Optional[Any]:
        locator = self.page.get_by_text(text, exact=True).first
        if await locator.count() == 0:
            return None
        return locator

    async def resolve_by_selector(self, selector: str) -> Any:
        return self.page.locator(selector).first

    async def count_matches(self, selector: str) -> int:
        return await self.page.locator(selector).count()

    async def bounding_box(self, locator: Any) -> Optional[BoundingBox]:
        # bounding_box() waits for the element to attach; check first so a
        # missing element fails immediately
        if await locator.count() == 0:
            return None
        box = await locator.bounding_box()
        if box is None:
            return None
        return BoundingBox(**box)

    async def move_pointer_to(self, x: float, y: float) -> None:
        await self.page.mouse.move(x, y)

    async def click_at(self, x: float, y: float) -> None:
        await self.page.mouse.click(x, y)

    async def type_sequentially(self, locator: Any, text: str, delay_ms: float) -> None:
        await locator.press_sequentially(text, delay=delay_ms)

    async def navigate(self, url: str, **options: Any) -> None:
        options.setdefault("wait_until", "load")
        logger.info(f"Navigating to {url}")
        await self.page.goto(url, **options)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self.page.evaluate(script, arg)

"""
Choreography engine: synthetic pointer, scroll, click and typing sequences
issued through a page surface.
"""

from __future__ import annotations
import asyncio
import inspect
import logging
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Union

from pwvideo.choreography.motion import linear_waypoints
from pwvideo.choreography.overlay import CursorKind, Overlay
from pwvideo.choreography.scroll import ScrollAnimation
from pwvideo.choreography.surface import PageSurface
from pwvideo.config import ChoreographyConfig
from pwvideo.errors import ElementNotFoundError, InvalidTargetError, WaitTimeoutError
from pwvideo.models.geometry import BoundingBox
from pwvideo.models.target import (
    HandleTarget,
    PointTarget,
    SelectorTarget,
    Target,
    TextTarget,
    coerce_target,
)

logger = logging.getLogger(__name__)

Predicate = Callable[[], Union[Any, Awaitable[Any]]]


@dataclass
class PointerState:
    """Last position sent to the page's pointer."""
    x: float = 0
    y: float = 0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


class Choreographer:
    """
    Drives one page with smooth, legible synthetic input.

    Every element operation re-resolves geometry right before acting, so
    layout shifts caused by earlier steps (scrolling, navigation) are picked
    up.

    Usage:
        choreo = Choreographer(PlaywrightPageSurface(page))

        await choreo.visit("https://example.com")
        await choreo.scroll_to_element(text="Pricing")
        await choreo.click_link(text="Sign up")
        await choreo.fill_in(selector="#email", text="user@example.com")
    """

    def __init__(
        self,
        surface: PageSurface,
        config: Optional[ChoreographyConfig] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None
    ):
        """
        Args:
            surface: Page-control surface for the session's page
            config: Default speeds and delays
            sleep: Coroutine taking seconds; defaults to asyncio.sleep
        """
        self.surface = surface
        self.config = config or ChoreographyConfig()
        self.overlay = Overlay(surface)
        self.pointer = PointerState()
        self._sleep = sleep or asyncio.sleep

    # =========================================================================
    # Timing
    # =========================================================================

    async def sleep(self, duration_ms: float) -> None:
        """Wait for ``duration_ms`` milliseconds."""
        if duration_ms > 0:
            await self._sleep(duration_ms / 1000)

    async def wait_until_satisfied(
        self,
        predicate: Predicate,
        timeout: Optional[float] = None
    ) -> None:
        """
        Poll ``predicate`` until it returns a truthy value.

        The remaining timeout is decremented by the poll interval on every
        miss, regardless of how long the predicate took to evaluate.

        Args:
            predicate: Sync or async callable
            timeout: Budget in milliseconds

        Raises:
            WaitTimeoutError: If the budget runs out first
        """
        timeout = self.config.wait_timeout_ms if timeout is None else timeout
        interval = self.config.poll_interval_ms
        remaining = timeout

        while remaining > 0:
            result = predicate()
            if inspect.isawaitable(result):
                result = await result
            if result:
                return
            await self.sleep(interval)
            remaining -= interval

        raise WaitTimeoutError(f"Condition not satisfied within {timeout}ms")

    # =========================================================================
    # Targets
    # =========================================================================

    async def _locate(self, target: Target) -> Any:
        """Resolve an element target to a locator."""
        if isinstance(target, HandleTarget):
            return target.locator

        if isinstance(target, SelectorTarget):
            if await self.surface.count_matches(target.selector) == 0:
                raise ElementNotFoundError(f"No element matches selector {target.selector!r}")
            return await self.surface.resolve_by_selector(target.selector)

        if isinstance(target, TextTarget):
            locator = await self.surface.resolve_by_text(target.text)
            if locator is None:
                raise ElementNotFoundError(f"No element has text {target.text!r}")
            return locator

        if isinstance(target, PointTarget):
            raise InvalidTargetError("A point does not refer to an element")

        raise InvalidTargetError(f"Unsupported target: {target!r}")

    async def _box_of(self, target: Target, locator: Any = None) -> BoundingBox:
        if isinstance(target, PointTarget):
            return BoundingBox(x=target.x, y=target.y)

        if locator is None:
            locator = await self._locate(target)
        box = await self.surface.bounding_box(locator)
        if box is None:
            raise ElementNotFoundError(f"Element not found: {target!r}")
        return box

    async def resolve_target(
        self,
        target: Optional[Target] = None,
        *,
        selector: Optional[str] = None,
        text: Optional[str] = None,
        locator: Any = None,
        point: Optional[Tuple[float, float]] = None
    ) -> BoundingBox:
        """
        Resolve a target to its current bounding box.

        Raises:
            InvalidTargetError: If no target, or more than one, is given
            ElementNotFoundError: If the target matches no element
        """
        target = coerce_target(target, selector=selector, text=text, locator=locator, point=point)
        return await self._box_of(target)

    async def exists(self, selector: str) -> bool:
        """True if at least one element currently matches ``selector``."""
        return await self.surface.count_matches(selector) > 0

    # =========================================================================
    # Pointer
    # =========================================================================

    async def set_cursor(self, kind: Union[CursorKind, str]) -> None:
        """Change the drawn cursor. Pointer state is not touched."""
        await self.overlay.set_cursor(CursorKind(kind))

    async def move_to(self, x: float, y: float, speed: Optional[float] = None) -> None:
        """
        Move the pointer along a straight line in steps of ``speed`` pixels.

        Args:
            x: Destination x in viewport pixels
            y: Destination y in viewport pixels
            speed: Pixels per step
        """
        if speed is None:
            speed = self.config.mouse_speed
        if speed <= 0:
            raise ValueError(f"Pointer speed must be positive, got {speed}")
        await self.set_cursor(CursorKind.DEFAULT)

        start = self.pointer.position
        if math.hypot(x - start[0], y - start[1]) == 0:
            return

        waypoints = linear_waypoints(start, (x, y), speed)
        logger.debug(f"Moving pointer {start} -> ({x}, {y}) in {len(waypoints)} steps")

        for wx, wy in waypoints:
            await self.surface.move_pointer_to(wx, wy)
            await self.sleep(self.config.step_delay_ms)

        await self.surface.move_pointer_to(x, y)
        self.pointer.x = x
        self.pointer.y = y

    async def move_to_element(
        self,
        target: Optional[Target] = None,
        *,
        selector: Optional[str] = None,
        text: Optional[str] = None,
        locator: Any = None,
        speed: Optional[float] = None
    ) -> None:
        """Move the pointer to the center of an element."""
        target = coerce_target(target, selector=selector, text=text, locator=locator)
        box = await self._box_of(target)
        center_x, center_y = box.center
        await self.move_to(center_x, center_y, speed=speed)

    async def click(self) -> None:
        """Click at the current pointer position."""
        logger.debug(f"Click at {self.pointer.position}")
        await self.surface.click_at(self.pointer.x, self.pointer.y)

    # =========================================================================
    # Scrolling
    # =========================================================================

    async def scroll_to_element(
        self,
        target: Optional[Target] = None,
        *,
        selector: Optional[str] = None,
        text: Optional[str] = None,
        locator: Any = None,
        duration: Optional[float] = None
    ) -> None:
        """
        Scroll so that an element is vertically centered in the viewport.

        The scroll offset follows an ease-in-out curve sampled on every
        animation frame, with an up/down indicator shown while it runs.

        Args:
            target: Element to bring into view
            duration: Animation length in milliseconds
        """
        duration = self.config.scroll_duration_ms if duration is None else duration
        target = coerce_target(target, selector=selector, text=text, locator=locator)
        box = await self._box_of(target)

        viewport_height = await self.surface.viewport_height()
        start_offset = await self.surface.scroll_offset()
        distance = box.center[1] - viewport_height / 2

        animation = ScrollAnimation(start_offset, distance, duration)
        logger.debug(
            f"Scrolling {animation.direction.value} by {distance:.0f}px over {duration}ms"
        )

        fade_ms = self.config.indicator_fade_ms
        await self.overlay.show_scroll_indicator(animation.direction, fade_ms)

        while animation.is_running:
            now = await self.surface.next_frame()
            await self.surface.scroll_to(animation.advance(now))

        await self.overlay.fade_scroll_indicator()
        await self.sleep(fade_ms)
        await self.overlay.remove_scroll_indicator()
        animation.finish()

    # =========================================================================
    # Compound actions
    # =========================================================================

    async def click_link(
        self,
        target: Optional[Target] = None,
        *,
        selector: Optional[str] = None,
        text: Optional[str] = None,
        locator: Any = None,
        delay: Optional[float] = None,
        mouse_speed: Optional[float] = None,
        scroll_duration: Optional[float] = None
    ) -> None:
        """
        Scroll a link into view if needed, move to it and click it.

        Args:
            target: Element to click
            delay: Hover time in milliseconds before the click
            mouse_speed: Pixels per pointer step
            scroll_duration: Scroll animation length in milliseconds
        """
        delay = self.config.click_delay_ms if delay is None else delay
        target = coerce_target(target, selector=selector, text=text, locator=locator)

        if isinstance(target, PointTarget):
            handle = None
            box = await self._box_of(target)
        else:
            # Resolve once and reuse the handle after scrolling
            handle = await self._locate(target)
            box = await self._box_of(target, handle)

            viewport_height = await self.surface.viewport_height()
            if box.is_outside_vertically(viewport_height):
                await self.scroll_to_element(HandleTarget(handle), duration=scroll_duration)
                await self.sleep(self.config.settle_delay_ms)

            box = await self._box_of(target, handle)

        center_x, center_y = box.center
        await self.set_cursor(CursorKind.DEFAULT)
        await self.move_to(center_x, center_y, speed=mouse_speed)
        await self.set_cursor(CursorKind.HAND)
        await self.sleep(delay)
        await self.click()

    async def fill_in(
        self,
        target: Optional[Target] = None,
        *,
        selector: Optional[str] = None,
        text: Optional[str] = None,
        locator: Any = None,
        value: str = "",
        delay: Optional[float] = None
    ) -> None:
        """
        Type ``value`` into an input one key at a time.

        Args:
            target: Editable element
            value: Text to type
            delay: Milliseconds between keystrokes
        """
        delay = self.config.typing_delay_ms if delay is None else delay
        target = coerce_target(target, selector=selector, text=text, locator=locator)
        element = await self._locate(target)
        logger.debug(f"Typing {len(value)} characters into {target!r}")
        await self.surface.type_sequentially(element, value, delay)

    async def visit(self, url: str, **options: Any) -> None:
        """Navigate to ``url``; options are passed to the page's goto."""
        await self.surface.navigate(url, **options)

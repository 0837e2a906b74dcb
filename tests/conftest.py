"""Shared fixtures for playwright-video tests."""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from pwvideo.choreography.engine import Choreographer
from pwvideo.choreography.surface import PageSurface
from pwvideo.config import ChoreographyConfig
from pwvideo.models.geometry import BoundingBox


class FakeLocator:
    def __init__(self, key: str):
        self.key = key

    def __repr__(self):
        return f"FakeLocator({self.key!r})"


class FakeSurface(PageSurface):
    """
    In-memory page.

    Elements are registered with document coordinates; bounding boxes are
    reported relative to the viewport, like a real browser.
    """

    def __init__(self, viewport_height: float = 1080, frame_interval: float = 16):
        self.elements: Dict[str, List[BoundingBox]] = {}
        self.texts: Dict[str, BoundingBox] = {}
        self.editable: set = set()

        self.height = viewport_height
        self.offset = 0.0
        self.frame_interval = frame_interval
        self.now = 1000.0

        self.moves: List[Tuple[float, float]] = []
        self.clicks: List[Tuple[float, float]] = []
        self.typed: List[Tuple[str, str, float]] = []
        self.scrolls: List[float] = []
        self.scripts: List[Tuple[str, Any]] = []
        self.visited: List[Tuple[str, dict]] = []
        self.calls: List[str] = []

    # Setup helpers

    def add(self, selector: str, x: float, y: float, width: float = 100, height: float = 40,
            editable: bool = False) -> None:
        self.elements.setdefault(selector, []).append(
            BoundingBox(x=x, y=y, width=width, height=height)
        )
        if editable:
            self.editable.add(selector)

    def add_text(self, text: str, x: float, y: float, width: float = 100, height: float = 20) -> None:
        self.texts[text] = BoundingBox(x=x, y=y, width=width, height=height)

    # PageSurface

    async def resolve_by_text(self, text: str) -> Optional[Any]:
        self.calls.append("resolve_by_text")
        if text not in self.texts:
            return None
        return FakeLocator(f"text={text}")

    async def resolve_by_selector(self, selector: str) -> Any:
        self.calls.append("resolve_by_selector")
        return FakeLocator(selector)

    async def count_matches(self, selector: str) -> int:
        self.calls.append("count_matches")
        return len(self.elements.get(selector, []))

    async def bounding_box(self, locator: Any) -> Optional[BoundingBox]:
        self.calls.append("bounding_box")
        if locator.key.startswith("text="):
            box = self.texts.get(locator.key[len("text="):])
        else:
            boxes = self.elements.get(locator.key)
            box = boxes[0] if boxes else None
        if box is None:
            return None
        return BoundingBox(x=box.x, y=box.y - self.offset, width=box.width, height=box.height)

    async def move_pointer_to(self, x: float, y: float) -> None:
        self.moves.append((x, y))

    async def click_at(self, x: float, y: float) -> None:
        self.calls.append("click_at")
        self.clicks.append((x, y))

    async def type_sequentially(self, locator: Any, text: str, delay_ms: float) -> None:
        if locator.key not in self.editable:
            raise RuntimeError(f"Element is not editable: {locator.key}")
        self.typed.append((locator.key, text, delay_ms))

    async def navigate(self, url: str, **options: Any) -> None:
        self.visited.append((url, options))

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.scripts.append((script, arg))

    async def viewport_height(self) -> float:
        return self.height

    async def scroll_offset(self) -> float:
        return self.offset

    async def scroll_to(self, offset: float) -> None:
        self.offset = offset
        self.scrolls.append(offset)

    async def next_frame(self) -> float:
        self.now += self.frame_interval
        return self.now

    @property
    def cursor_kinds(self) -> List[str]:
        return [arg for script, arg in self.scripts if "__cursor" in script]


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested durations."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def choreographer(surface: FakeSurface, sleeper: RecordingSleep) -> Choreographer:
    return Choreographer(surface, config=ChoreographyConfig(), sleep=sleeper)

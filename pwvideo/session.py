"""
Recording session: runs a user script in a recorded browser and writes the
final video.
"""

from __future__ import annotations
import importlib.util
import inspect
import logging
import shutil
import tempfile
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, List, Optional

from playwright.async_api import async_playwright

from pwvideo.choreography.engine import Choreographer, Predicate
from pwvideo.choreography.overlay import INIT_SCRIPT
from pwvideo.choreography.surface import PlaywrightPageSurface
from pwvideo.config import SessionConfig
from pwvideo.errors import ScriptError
from pwvideo.models.geometry import BoundingBox
from pwvideo.models.timeline import Mark, Segment
from pwvideo.timeline.recorder import Timeline, wall_clock_ms
from pwvideo.video.probe import probe_video
from pwvideo.video.transcoder import SegmentTranscoder


logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".webm", ".mp4")


class ScriptContext:
    """
    The object handed to a user script's ``run(ctx)``.

    Exposes the page, the choreography operations and the recording's
    pause/resume switch.

    Usage (in a script):
        async def run(ctx):
            await ctx.visit("https://example.com")
            ctx.resume()
            await ctx.click_link(text="More information...")
            ctx.pause()
    """

    def __init__(self, page: Any, choreographer: Choreographer, timeline: Timeline):
        self.page = page
        self.choreographer = choreographer
        self.timeline = timeline

    # Recording

    def pause(self) -> Mark:
        return self.timeline.pause()

    def resume(self) -> Mark:
        return self.timeline.resume()

    # Choreography

    async def visit(self, url: str, **options: Any) -> None:
        await self.choreographer.visit(url, **options)

    async def sleep(self, duration_ms: float) -> None:
        await self.choreographer.sleep(duration_ms)

    async def wait_until_satisfied(self, predicate: Predicate, timeout: Optional[float] = None) -> None:
        await self.choreographer.wait_until_satisfied(predicate, timeout=timeout)

    async def exists(self, selector: str) -> bool:
        return await self.choreographer.exists(selector)

    async def resolve_target(self, target=None, **options: Any) -> BoundingBox:
        return await self.choreographer.resolve_target(target, **options)

    async def set_cursor(self, kind: str) -> None:
        await self.choreographer.set_cursor(kind)

    async def move_to(self, x: float, y: float, speed: Optional[float] = None) -> None:
        await self.choreographer.move_to(x, y, speed=speed)

    async def move_to_element(self, target=None, **options: Any) -> None:
        await self.choreographer.move_to_element(target, **options)

    async def scroll_to_element(self, target=None, **options: Any) -> None:
        await self.choreographer.scroll_to_element(target, **options)

    async def click(self) -> None:
        await self.choreographer.click()

    async def click_link(self, target=None, **options: Any) -> None:
        await self.choreographer.click_link(target, **options)

    async def fill_in(self, target=None, **options: Any) -> None:
        await self.choreographer.fill_in(target, **options)


def load_script(script_path: Path) -> Callable[[ScriptContext], Any]:
    """
    Import a user script and return its ``run`` coroutine function.

    Raises:
        ScriptError: If the file cannot be imported or defines no async ``run``
    """
    script_path = Path(script_path).resolve()
    spec = importlib.util.spec_from_file_location(f"pwvideo_script_{script_path.stem}", script_path)
    if spec is None or spec.loader is None:
        raise ScriptError(f"Cannot load script: {script_path}")

    module: ModuleType = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except FileNotFoundError as e:
        raise ScriptError(f"Script not found: {script_path}") from e

    run = getattr(module, "run", None)
    if run is None or not inspect.iscoroutinefunction(run):
        raise ScriptError(f"{script_path.name} must define 'async def run(ctx)'")
    return run


class ExportPipeline:
    """
    Records a user script and exports the edited video.

    The pipeline runs in stages:
    1. Launch - start Chromium with video recording and the cursor overlay
    2. Script - run the user script against a ScriptContext
    3. Capture - close the browser so the raw video is finalized
    4. Export - keep the resumed segments of the capture
    """

    def __init__(self, config: SessionConfig | None = None, verbose: bool = False):
        self.config = config or SessionConfig()
        self.verbose = verbose or self.config.verbose

        if self.verbose:
            logging.basicConfig(level=logging.DEBUG)

        self.transcoder = SegmentTranscoder(config=self.config.recording)

    def _context_options(self, video_dir: Path, state_path: Optional[Path]) -> dict:
        browser = self.config.browser
        options = {
            "screen": {
                "width": int(browser.width * browser.device_scale_factor),
                "height": int(browser.height * browser.device_scale_factor),
            },
            "color_scheme": browser.color_scheme,
            "viewport": {"width": browser.width, "height": browser.height},
            "record_video_dir": str(video_dir),
            "record_video_size": {"width": browser.width, "height": browser.height},
            "device_scale_factor": browser.device_scale_factor,
        }
        if state_path and state_path.exists():
            options["storage_state"] = str(state_path)
        return options

    async def record(
        self,
        script_path: Path,
        video_dir: Path,
        state_path: Optional[Path] = None
    ) -> tuple:
        """
        Run the script in a recorded browser.

        Returns:
            (raw video path, timeline, session end in epoch milliseconds)
        """
        run = load_script(script_path)
        browser_config = self.config.browser

        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=browser_config.headless,
                executable_path=browser_config.executable_path,
                args=browser_config.args,
            )
            try:
                context = await browser.new_context(**self._context_options(video_dir, state_path))
                await context.add_init_script(INIT_SCRIPT)

                # video capture starts with the page
                timeline = Timeline(started_at=wall_clock_ms())
                page = await context.new_page()
                choreographer = Choreographer(
                    PlaywrightPageSurface(page),
                    config=self.config.choreography,
                )

                logger.info(f"Running script: {Path(script_path).name}")
                await run(ScriptContext(page, choreographer, timeline))
                ended_at = wall_clock_ms()

                if state_path:
                    await context.storage_state(path=str(state_path))

                await context.close()
                video_path = Path(await page.video.path())
            finally:
                await browser.close()

        return video_path, timeline, ended_at

    async def run(
        self,
        script_path: Path,
        output_path: Path,
        state_path: Optional[Path] = None,
        marks_log: Optional[Path] = None
    ) -> List[Segment]:
        """
        Record ``script_path`` and write the final video to ``output_path``.

        Args:
            script_path: Python file defining ``async def run(ctx)``
            output_path: Destination video (.webm or .mp4)
            state_path: Cookies/local storage are loaded from and saved here
            marks_log: Optional JSON file receiving the recorded marks

        Returns:
            The segments kept in the output
        """
        output_path = Path(output_path)
        if output_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            raise ValueError(f"Output must have a .webm or .mp4 extension: {output_path}")

        video_dir = Path(tempfile.mkdtemp(prefix="playwright-video-"))
        try:
            logger.info("Stage 1: Recording script...")
            video_path, timeline, ended_at = await self.record(script_path, video_dir, state_path)

            logger.info("Stage 2: Deriving segments...")
            segments = timeline.finish(ended_at)
            if marks_log:
                timeline.to_log(ended_at).to_file(marks_log)

            capture_duration = None
            try:
                capture_duration = probe_video(video_path).duration
            except ValueError as e:
                logger.warning(f"Could not probe capture: {e}")

            logger.info("Stage 3: Exporting video...")
            self.transcoder.export(
                video_path,
                segments,
                timeline.mark_count,
                output_path,
                capture_duration=capture_duration,
            )
        finally:
            shutil.rmtree(video_dir, ignore_errors=True)

        logger.info(f"Video saved to {output_path}")
        return segments

"""
Command-line interface for playwright-video.
"""

from __future__ import annotations
import asyncio
import shutil
from pathlib import Path
from typing import Optional

import click

from pwvideo import __version__
from pwvideo.config import SessionConfig
from pwvideo.errors import PlaywrightVideoError


@click.group()
@click.version_option(version=__version__)
def main():
    """playwright-video - Run Playwright scripts and generate videos."""
    pass


@main.command()
@click.argument(
    "script",
    type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--output-path", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="The video output path. Must have .webm or .mp4 extension"
)
@click.option(
    "--state-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Persist state like local storage and cookies"
)
@click.option(
    "--color-scheme",
    type=click.Choice(["dark", "light", "no-preference"]),
    default=None,
    help="Set the browser color scheme (default: dark)"
)
@click.option(
    "--chrome-path",
    type=str,
    default=None,
    help="Set chrome bin path. Can also be set through CHROME_BIN environment variable"
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file"
)
@click.option(
    "--marks-log",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the recorded pause/resume marks to this JSON file"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
def export(
    script: Path,
    output_path: Path,
    state_path: Optional[Path],
    color_scheme: Optional[str],
    chrome_path: Optional[str],
    config: Optional[Path],
    marks_log: Optional[Path],
    verbose: bool
):
    """Run SCRIPT in a recorded browser and export the video."""
    from pwvideo.session import ExportPipeline

    if output_path.suffix.lower() not in (".webm", ".mp4"):
        raise click.BadParameter("must have .webm or .mp4 extension", param_hint="--output-path")

    session_config = SessionConfig.from_file(config) if config else SessionConfig()
    if color_scheme:
        session_config.browser.color_scheme = color_scheme
    if chrome_path:
        session_config.browser.chrome_path = chrome_path

    click.echo(f"🎬 Recording script: {script}")

    pipeline = ExportPipeline(config=session_config, verbose=verbose)
    try:
        kept = asyncio.run(
            pipeline.run(
                script,
                output_path,
                state_path=state_path.resolve() if state_path else None,
                marks_log=marks_log,
            )
        )
    except PlaywrightVideoError as e:
        click.echo(f"❌ Export failed: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"✅ Video exported to: {output_path}")
    click.echo(f"   - {len(kept)} segments kept")


@main.command()
@click.option(
    "--marks", "-m",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Marks JSON written by 'export --marks-log'"
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file"
)
def segments(marks: Path, config: Optional[Path]):
    """Show the segments a mark log produces."""
    from pwvideo.timeline import MarkLog, build_range_expression, can_pass_through

    recording = (SessionConfig.from_file(config) if config else SessionConfig()).recording

    try:
        log = MarkLog.from_file(marks)
    except (ValueError, OSError) as e:
        click.echo(f"❌ Invalid mark log: {e}", err=True)
        raise SystemExit(1)

    derived = log.segments
    capture_duration = (log.ended_at - log.started_at) / 1000 if log.ended_at is not None else None
    click.echo(f"🔍 {len(log.marks)} marks, {len(derived)} segments")
    for i, segment in enumerate(derived):
        click.echo(f"   {i+1}. {segment.start:.3f}s - {segment.end:.3f}s ({segment.duration:.3f}s)")
    click.echo(f"   Range expression: {build_range_expression(derived)}")
    if can_pass_through(
        len(log.marks),
        recording.passthrough_max_marks,
        segments=derived,
        capture_duration=capture_duration,
        tolerance=recording.passthrough_tolerance_s,
    ):
        click.echo("   Capture passes through without range selection")


@main.command()
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Where to write the configuration file"
)
def init_config(output: Path):
    """Write the default configuration as YAML."""
    SessionConfig().to_file(output)
    click.echo(f"✅ Default configuration written to: {output}")


@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file"
)
def check(config: Optional[Path]):
    """Check that ffmpeg and Playwright's Chromium are available."""
    session_config = SessionConfig.from_file(config) if config else SessionConfig()

    click.echo("🔍 Checking dependencies...\n")

    ffmpeg = shutil.which(session_config.recording.ffmpeg_path)
    if ffmpeg:
        click.echo(f"  ✅ ffmpeg found: {ffmpeg}")
    else:
        click.echo(f"  ❌ ffmpeg not found ({session_config.recording.ffmpeg_path})")
        click.echo("     Install ffmpeg or set recording.ffmpeg_path in the config")

    chrome = session_config.browser.executable_path
    if chrome:
        if Path(chrome).exists():
            click.echo(f"  ✅ Chromium executable: {chrome}")
        else:
            click.echo(f"  ❌ Chromium executable missing: {chrome}")
    else:
        try:
            from playwright.sync_api import sync_playwright

            with sync_playwright() as p:
                path = Path(p.chromium.executable_path)
            if path.exists():
                click.echo(f"  ✅ Playwright Chromium: {path}")
            else:
                click.echo("  ❌ Playwright Chromium not installed")
                click.echo("     Install with: playwright install chromium")
        except Exception as e:
            click.echo(f"  ⚠️  Playwright error: {e}")


if __name__ == "__main__":
    main()

"""
Tests for configuration and targets.
"""

from pathlib import Path

import pytest
import yaml

from pwvideo.config import SessionConfig
from pwvideo.errors import InvalidTargetError
from pwvideo.models.geometry import BoundingBox
from pwvideo.models.target import (
    HandleTarget,
    PointTarget,
    SelectorTarget,
    TextTarget,
    coerce_target,
    make_target,
)


class TestSessionConfig:
    """Tests for SessionConfig."""

    def test_defaults(self):
        """Test the default recording setup."""
        config = SessionConfig()

        assert (config.browser.width, config.browser.height) == (1920, 1080)
        assert config.browser.color_scheme == "dark"
        assert config.choreography.mouse_speed == 10
        assert config.choreography.wait_timeout_ms == 2000
        assert config.recording.passthrough_max_marks == 2

    def test_yaml_file(self, tmp_path: Path):
        """Test saving and loading a partial override."""
        path = tmp_path / "pwvideo.yaml"
        with open(path, "w") as f:
            yaml.safe_dump({"browser": {"color_scheme": "light"}, "choreography": {"mouse_speed": 25}}, f)

        config = SessionConfig.from_file(path)

        assert config.browser.color_scheme == "light"
        assert config.choreography.mouse_speed == 25
        assert config.choreography.click_delay_ms == 500

    def test_to_file(self, tmp_path: Path):
        """Test that the default config is written as YAML."""
        path = tmp_path / "config.yaml"
        SessionConfig().to_file(path)

        with open(path) as f:
            data = yaml.safe_load(f)
        assert data["recording"]["ffmpeg_path"] == "ffmpeg"

    def test_empty_file(self, tmp_path: Path):
        """Test that an empty file yields defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert SessionConfig.from_file(path) == SessionConfig()

    def test_chrome_bin_env(self, monkeypatch):
        """Test that CHROME_BIN takes precedence over the config."""
        config = SessionConfig()
        config.browser.chrome_path = "/opt/chrome"

        monkeypatch.delenv("CHROME_BIN", raising=False)
        assert config.browser.executable_path == "/opt/chrome"

        monkeypatch.setenv("CHROME_BIN", "/usr/bin/chromium")
        assert config.browser.executable_path == "/usr/bin/chromium"


class TestTargets:
    """Tests for target construction."""

    def test_variants(self):
        """Test that each option builds its variant."""
        handle = object()

        assert make_target(selector="#a") == SelectorTarget("#a")
        assert make_target(text="Home") == TextTarget("Home")
        assert make_target(point=(1, 2)) == PointTarget(1, 2)
        assert make_target(locator=handle) == HandleTarget(handle)

    def test_none(self):
        """Test that no option is rejected."""
        with pytest.raises(InvalidTargetError):
            make_target()

    def test_exclusive(self):
        """Test that two options are rejected."""
        with pytest.raises(InvalidTargetError, match="mutually exclusive"):
            make_target(selector="#a", text="Home")

    def test_empty_selector(self):
        """Test that an empty selector is rejected."""
        with pytest.raises(InvalidTargetError):
            make_target(selector="")

    def test_coerce_target_and_options(self):
        """Test that a target and options together are rejected."""
        with pytest.raises(InvalidTargetError):
            coerce_target(SelectorTarget("#a"), text="Home")

    def test_coerce_unknown(self):
        """Test that arbitrary objects are not targets."""
        with pytest.raises(InvalidTargetError):
            coerce_target("#a")

    def test_invalid_target_is_value_error(self):
        """Test that invalid targets can be caught as ValueError."""
        with pytest.raises(ValueError):
            make_target()


class TestBoundingBox:
    """Tests for BoundingBox."""

    def test_center(self):
        """Test that the center point is calculated correctly."""
        box = BoundingBox(x=100, y=200, width=50, height=30)
        assert box.center == (125, 215)

    def test_outside_viewport(self):
        """Test vertical visibility against a 1000px viewport."""
        assert BoundingBox(x=0, y=-50, width=10, height=20).is_outside_vertically(1000)
        assert BoundingBox(x=0, y=1001, width=10, height=20).is_outside_vertically(1000)
        assert not BoundingBox(x=0, y=-10, width=10, height=20).is_outside_vertically(1000)
        assert not BoundingBox(x=0, y=990, width=10, height=20).is_outside_vertically(1000)

"""Tests for the CLI helpers that do not need a browser."""

import json
import logging

import pytest

from auto_skeleton import VERSION
from auto_skeleton.cli import (
    DEFAULT_BREAKPOINTS,
    SkeletonCollector,
    build_options,
    build_parser,
    parse_breakpoints,
    parse_list,
    read_overrides,
    render_html,
    safe_filename,
)
from auto_skeleton.generator import error_tree


class TestParsing:
    """Argument helpers."""

    def test_parse_breakpoints_skips_bad_entries(self):
        result = parse_breakpoints("desktop=1280x800,bad,phone=375x667")
        assert result == {
            "desktop": {"width": 1280, "height": 800},
            "phone": {"width": 375, "height": 667},
        }

    def test_parse_breakpoints_defaults(self):
        assert parse_breakpoints(None) is DEFAULT_BREAKPOINTS
        assert parse_breakpoints("tablet=wide") is DEFAULT_BREAKPOINTS
        assert parse_breakpoints("tablet=axb") is DEFAULT_BREAKPOINTS

    def test_safe_filename(self):
        assert safe_filename("mobile 390/844") == "mobile_390_844"

    def test_parse_list(self):
        assert parse_list(" .ad, nav ,,") == [".ad", "nav"]
        assert parse_list(None) == []

    def test_read_overrides(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({".avatar": {"shape": "circular"}}), encoding="utf-8")
        assert read_overrides(str(path)) == {".avatar": {"shape": "circular"}}
        assert read_overrides(None) == {}

    def test_read_overrides_rejects_lists(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            read_overrides(str(path))


class TestOptions:
    """Parser flags mapped onto SkeletonOptions."""

    def test_defaults(self):
        args = build_parser().parse_args(["https://example.com"])
        options = build_options(args)
        assert args.selector == "body"
        assert options.animation is None
        assert options.theme is None
        assert options.custom_overrides == {}
        assert options.respect_user_motion is False
        assert options.timeout == 5000
        assert options.max_depth == 10

    def test_flags(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({"img": {"height": 120}}), encoding="utf-8")
        args = build_parser().parse_args([
            "https://example.com",
            "--animation", "pulse",
            "--theme", "dark",
            "--ignore", ".ad, nav",
            "--overrides", str(path),
            "--name", "Feed",
            "--respect-motion",
            "--debug-overlay",
            "-v",
        ])
        options = build_options(args)
        assert options.animation == "pulse"
        assert options.theme == {"type": "dark"}
        assert options.ignore_elements == (".ad", "nav")
        assert options.custom_overrides == {"img": {"height": 120}}
        assert options.component_name == "Feed"
        assert options.respect_user_motion is True
        assert options.debug.overlay is True
        assert options.debug.log_level == logging.INFO

    def test_unknown_preset_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["https://example.com", "--animation", "sparkle"])


class TestOutput:
    """HTML and results documents."""

    def test_render_html(self):
        page = render_html(error_tree("Oops"), "demo")
        assert "<title>demo</title>" in page
        assert "@keyframes auto-skeleton-shimmer" in page
        assert 'class="auto-skeleton-error"' in page
        assert "Oops" in page

    def test_collector_results(self, tmp_path):
        out = tmp_path / "out"
        collector = SkeletonCollector("https://example.com", str(out), selector="#app")
        assert out.is_dir()
        assert collector.breakpoints is DEFAULT_BREAKPOINTS

        results = collector.build_results()
        assert results["meta"]["version"] == VERSION
        assert results["meta"]["selector"] == "#app"
        assert "notes" not in results

        collector.limits.append("mobile: network did not go idle, analyzing anyway")
        assert collector.build_results()["notes"][0] == "Limits:"

"""Tests for the debug overlay and reports."""

import pytest

from auto_skeleton.analyzer import TreeAnalyzer
from auto_skeleton.debug import analysis_overlay, measurement_report, summarize


@pytest.fixture
async def card_analysis(card_surface, card_root):
    return await TreeAnalyzer(card_surface).analyze(card_root)


class TestOverlay:
    """analysis_overlay."""

    @pytest.mark.asyncio
    async def test_one_box_per_element(self, card_analysis):
        overlay = analysis_overlay(card_analysis)
        assert overlay.class_name == "auto-skeleton-debug-overlay"
        boxes = overlay.find_all("auto-skeleton-debug-box")
        assert [b.text for b in boxes] == ["text #0", "image #1"]
        assert boxes[1].style["top"] == 30
        assert boxes[1].style["width"] == 320


class TestReports:
    """measurement_report and summarize."""

    def test_measurement_rows(self, card_root):
        rows = measurement_report(card_root)
        assert [r["tag"] for r in rows] == ["div", "h1", "img"]
        assert rows[2]["summary"] == "img - 320x180"

    @pytest.mark.asyncio
    async def test_summary_counts(self, card_analysis):
        summary = summarize(card_analysis)
        assert summary["element_types"] == {"text": 1, "image": 1}
        assert summary["total_elements"] == 2
        assert summary["layout"] == "block"
        assert summary["complexity"] == "simple"

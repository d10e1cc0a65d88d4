"""Tests for the pipeline entry points and SkeletonSession."""

import asyncio

import pytest

from auto_skeleton.cache import GenerationCache
from auto_skeleton.config import SkeletonOptions
from auto_skeleton.errors import ElementNotFoundError, RenderEnvironmentError
from auto_skeleton.pipeline import SkeletonSession, analyze, generate
from auto_skeleton.surface import StaticSurface
from auto_skeleton.types import ElementType


class TestEntryPoints:
    """analyze() then generate()."""

    @pytest.mark.asyncio
    async def test_analyze_then_generate(self, card_surface, card_root):
        analysis = await analyze(card_surface, card_root)
        result = generate(analysis)
        assert [c.type for c in result.configs] == [ElementType.TEXT, ElementType.IMAGE]
        assert result.metadata.element_count == 2

    @pytest.mark.asyncio
    async def test_options_flow_into_analysis(self, card_surface, card_root):
        options = SkeletonOptions(ignore_elements="img", component_name="Card")
        analysis = await analyze(card_surface, card_root, options)
        assert [e.tag_name for e in analysis.elements] == ["h1"]
        assert analysis.metadata.component_name == "Card"

    @pytest.mark.asyncio
    async def test_selector_root(self, card_surface):
        analysis = await analyze(card_surface, "#app")
        assert len(analysis.elements) == 2
        with pytest.raises(ElementNotFoundError):
            await analyze(card_surface, "#nope")


class TestSession:
    """Pass ownership, joining and fallback rendering."""

    def test_fallback_before_first_pass(self, card_surface, card_root):
        session = SkeletonSession(card_surface, card_root)
        assert session.render().class_name == "auto-skeleton-default-fallback"
        assert not session.is_analyzing

    @pytest.mark.asyncio
    async def test_run_stores_result(self, card_surface, card_root):
        session = SkeletonSession(card_surface, card_root)
        result = await session.run()
        assert session.result is result
        assert session.analysis is not None
        assert session.render() is result.renderable_tree
        assert session.passes == 1

    @pytest.mark.asyncio
    async def test_overlapping_regenerate_joins_pass(self, card_surface, card_root):
        session = SkeletonSession(card_surface, card_root)
        first, second = await asyncio.gather(session.regenerate(), session.regenerate())
        assert first is second
        assert session.passes == 1

        third = await session.regenerate()
        assert third is not first
        assert session.passes == 2

    @pytest.mark.asyncio
    async def test_result_cleared_while_pass_runs(self, card_surface, card_root):
        session = SkeletonSession(card_surface, card_root)
        await session.run()
        pending = asyncio.ensure_future(session.regenerate())
        await asyncio.sleep(0)
        assert session.is_analyzing
        assert session.result is None
        assert session.render().class_name == "auto-skeleton-default-fallback"
        await pending
        assert session.result is not None

    @pytest.mark.asyncio
    async def test_failure_renders_error_tree(self, card_root):
        session = SkeletonSession(StaticSurface(card_root, available=False), card_root)
        with pytest.raises(RenderEnvironmentError):
            await session.run()
        assert isinstance(session.error, RenderEnvironmentError)
        assert session.result is None
        assert session.render().class_name == "auto-skeleton-error"
        assert not session.is_analyzing

    @pytest.mark.asyncio
    async def test_clear(self, card_surface, card_root):
        session = SkeletonSession(card_surface, card_root)
        await session.run()
        session.clear()
        assert session.result is None
        assert session.analysis is None


class TestSessionCache:
    """Caller-side caching around the session."""

    @pytest.mark.asyncio
    async def test_hit_skips_pass(self, card_surface, card_root):
        cache = GenerationCache()
        options = SkeletonOptions(enable_caching=True, cache_key="card")
        session = SkeletonSession(card_surface, card_root, options, cache=cache)
        first = await session.run()
        assert "card" in cache
        assert cache.misses == 1

        again = await session.run()
        assert again is first
        assert session.passes == 1
        assert cache.hits == 1

    @pytest.mark.asyncio
    async def test_regenerate_replaces_entry(self, card_surface, card_root):
        cache = GenerationCache()
        options = SkeletonOptions(enable_caching=True, cache_key="card")
        session = SkeletonSession(card_surface, card_root, options, cache=cache)
        first = await session.run()
        fresh = await session.regenerate()
        assert fresh is not first
        assert session.passes == 2
        assert cache.get("card").result is fresh

    @pytest.mark.asyncio
    async def test_caching_needs_opt_in(self, card_surface, card_root):
        cache = GenerationCache()
        session = SkeletonSession(card_surface, card_root, SkeletonOptions(cache_key="card"), cache=cache)
        await session.run()
        assert len(cache) == 0
        assert session.cache_key is None

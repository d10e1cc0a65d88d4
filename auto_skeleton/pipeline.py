"""
Pipeline entry points: ``analyze`` a rendered root, ``generate`` placeholders
from the result, and ``SkeletonSession`` for callers that re-run the pair.
"""

import asyncio
import logging
from typing import Any, Optional

from .analyzer import TreeAnalyzer
from .cache import GenerationCache
from .config import AnalysisConfig, SkeletonOptions
from .errors import AutoSkeletonError
from .generator import SkeletonGenerator, error_tree, fallback_tree
from .surface import RenderSurface
from .types import AnalysisResult, GenerationResult, HostPreferences, SkeletonNode, ThemeConfig

logger = logging.getLogger(__name__)


async def analyze(
    surface: RenderSurface,
    root: Any,
    options: Optional[SkeletonOptions] = None,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    options = options or SkeletonOptions()
    config = config or options.analysis_config()
    return await TreeAnalyzer(surface, config).analyze(root)


def generate(
    analysis: AnalysisResult,
    options: Optional[SkeletonOptions] = None,
    host: Optional[HostPreferences] = None,
    generator: Optional[SkeletonGenerator] = None,
) -> GenerationResult:
    generator = generator or SkeletonGenerator()
    return generator.generate(analysis, options or SkeletonOptions(), host)


class SkeletonSession:
    """Owns the latest analysis/generation pair for one root.

    Overlapping ``run``/``regenerate`` calls join the pass already in flight
    instead of starting a second one.
    """

    def __init__(
        self,
        surface: RenderSurface,
        root: Any,
        options: Optional[SkeletonOptions] = None,
        generator: Optional[SkeletonGenerator] = None,
        cache: Optional[GenerationCache] = None,
    ):
        self.surface = surface
        self.root = root
        self.options = options or SkeletonOptions()
        self.generator = generator or SkeletonGenerator()
        self.cache = cache
        self.analysis: Optional[AnalysisResult] = None
        self.result: Optional[GenerationResult] = None
        self.error: Optional[AutoSkeletonError] = None
        self.passes = 0
        self._task: Optional["asyncio.Task[GenerationResult]"] = None

    @property
    def is_analyzing(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def cache_key(self) -> Optional[str]:
        if self.cache is None or not self.options.enable_caching:
            return None
        return self.options.cache_key

    async def run(self) -> GenerationResult:
        if self.is_analyzing:
            return await self._task
        key = self.cache_key
        if key is not None:
            entry = self.cache.get(key)
            if entry is not None:
                logger.debug("Cache hit for %s", key)
                self.analysis, self.result, self.error = entry.analysis, entry.result, None
                return entry.result
        return await self._start()

    async def regenerate(self) -> GenerationResult:
        """Discard the previous result and run a fresh pass."""
        if self.is_analyzing:
            return await self._task
        key = self.cache_key
        if key is not None:
            self.cache.evict(key)
        return await self._start()

    async def _start(self) -> GenerationResult:
        self.analysis = None
        self.result = None
        self.error = None
        self._task = asyncio.ensure_future(self._pass())
        return await self._task

    async def _pass(self) -> GenerationResult:
        self.passes += 1
        try:
            analysis = await analyze(self.surface, self.root, self.options)
            host = await self.surface.host_preferences()
            result = generate(analysis, self.options, host, self.generator)
        except AutoSkeletonError as exc:
            self.error = exc
            logger.log(self.options.debug.log_level, "Skeleton pass failed: %s (%s)", exc.message, exc.code)
            raise

        self.analysis = analysis
        self.result = result
        key = self.cache_key
        if key is not None:
            self.cache.put(key, result, analysis, self.options)
        return result

    def render(self) -> SkeletonNode:
        """The tree a caller should show right now."""
        if self.result is not None:
            return self.result.renderable_tree
        if self.error is not None:
            return error_tree()
        return fallback_tree(self.generator.theme.merge(self.options.theme))

    def clear(self) -> None:
        self.analysis = None
        self.result = None
        self.error = None
        if self.cache_key is not None:
            self.cache.evict(self.cache_key)

"""
auto-skeleton - measure a rendered component and synthesize a matching
loading-skeleton tree.
"""

from .analyzer import TreeAnalyzer
from .cache import CacheEntry, GenerationCache
from .classifier import classify
from .config import AnalysisConfig, DebugConfig, GeneratorConfig, SkeletonOptions
from .dimensions import PlaceholderSize, compute_placeholder_size, determine_shape
from .errors import (
    AnalysisTimeoutError,
    AutoSkeletonError,
    ElementNotFoundError,
    GenerationFailedError,
    RenderEnvironmentError,
)
from .generator import SkeletonGenerator, error_tree, fallback_tree, text_placeholder
from .measurer import DOMMeasurer
from .pipeline import SkeletonSession, analyze, generate
from .surface import RenderSurface, StaticSurface
from .types import (
    AnalysisResult,
    AnalyzedElement,
    AnimationConfig,
    AnimationType,
    DOMNode,
    ElementType,
    GenerationResult,
    Geometry,
    HostPreferences,
    LayoutInfo,
    PlaceholderConfig,
    Shape,
    SkeletonNode,
    ThemeConfig,
    ThemeType,
    VisualStyle,
)

VERSION = "1.0.0"


def quick_setup(theme: str = "light") -> SkeletonOptions:
    """Options for the common case: shimmer, reduced-motion aware, cacheable."""
    return SkeletonOptions(
        theme=ThemeConfig(type=theme),
        animation=AnimationConfig(type=AnimationType.SHIMMER, duration=1500),
        preserve_aspect_ratio=True,
        respect_user_motion=True,
        enable_caching=True,
    )


__all__ = [
    "VERSION",
    "quick_setup",
    "analyze",
    "generate",
    "SkeletonSession",
    "TreeAnalyzer",
    "SkeletonGenerator",
    "DOMMeasurer",
    "RenderSurface",
    "StaticSurface",
    "GenerationCache",
    "CacheEntry",
    "classify",
    "compute_placeholder_size",
    "determine_shape",
    "PlaceholderSize",
    "fallback_tree",
    "error_tree",
    "text_placeholder",
    "AnalysisConfig",
    "DebugConfig",
    "GeneratorConfig",
    "SkeletonOptions",
    "AutoSkeletonError",
    "RenderEnvironmentError",
    "ElementNotFoundError",
    "AnalysisTimeoutError",
    "GenerationFailedError",
    "AnalysisResult",
    "AnalyzedElement",
    "AnimationConfig",
    "AnimationType",
    "DOMNode",
    "ElementType",
    "GenerationResult",
    "Geometry",
    "HostPreferences",
    "LayoutInfo",
    "PlaceholderConfig",
    "Shape",
    "SkeletonNode",
    "ThemeConfig",
    "ThemeType",
    "VisualStyle",
]

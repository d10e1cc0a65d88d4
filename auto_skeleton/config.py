"""
Caller-owned configuration values threaded through the pipeline entry points.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .types import (
    DEFAULT_ANALYSIS_TIMEOUT,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MEASUREMENT_THRESHOLD,
    VIEWPORT_MARGIN,
    AnimationConfig,
    ThemeConfig,
)


@dataclass(frozen=True)
class DebugConfig:
    verbose: bool = False
    overlay: bool = False

    @property
    def log_level(self) -> int:
        return logging.INFO if self.verbose else logging.DEBUG


@dataclass(frozen=True)
class AnalysisConfig:
    timeout: float = DEFAULT_ANALYSIS_TIMEOUT
    max_depth: int = DEFAULT_MAX_DEPTH
    measurement_threshold: float = DEFAULT_MEASUREMENT_THRESHOLD
    ignore_invisible_elements: bool = True
    ignore_elements: Tuple[str, ...] = ()
    viewport_margin: float = VIEWPORT_MARGIN
    component_name: Optional[str] = None
    debug: DebugConfig = field(default_factory=DebugConfig)


@dataclass(frozen=True)
class GeneratorConfig:
    preserve_hierarchy: bool = True
    optimize_for_performance: bool = False
    accessibility_attributes: bool = True


@dataclass
class SkeletonOptions:
    """Options recognized by ``analyze``/``generate``. Every field is optional."""

    animation: Union[None, str, Dict[str, Any], AnimationConfig] = None
    theme: Union[None, Dict[str, Any], ThemeConfig] = None
    custom_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    min_width: Optional[float] = None
    min_height: Optional[float] = None
    ignore_elements: Tuple[str, ...] = ()
    respect_user_motion: bool = False
    preserve_aspect_ratio: bool = True
    enable_caching: bool = False
    cache_key: Optional[str] = None
    component_name: Optional[str] = None
    timeout: float = DEFAULT_ANALYSIS_TIMEOUT
    max_depth: int = DEFAULT_MAX_DEPTH
    debug: DebugConfig = field(default_factory=DebugConfig)

    def __post_init__(self) -> None:
        if isinstance(self.ignore_elements, str):
            self.ignore_elements = (self.ignore_elements,)
        else:
            self.ignore_elements = tuple(self.ignore_elements or ())

    def analysis_config(self, **overrides: Any) -> AnalysisConfig:
        values: Dict[str, Any] = {
            "timeout": self.timeout,
            "max_depth": self.max_depth,
            "ignore_elements": self.ignore_elements,
            "component_name": self.component_name,
            "debug": self.debug,
        }
        values.update(overrides)
        return AnalysisConfig(**values)

"""
Skeleton generation - turns an AnalysisResult into PlaceholderConfigs and a
renderable SkeletonNode tree.
"""

import logging
import time
from dataclasses import fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from . import animation as presets
from .config import GeneratorConfig, SkeletonOptions
from .dimensions import compute_placeholder_size, constrain_dimensions, estimate_text_lines, font_size_px, line_height_for
from .errors import GenerationFailedError
from .types import (
    BUILTIN_ANIMATION,
    AnalysisResult,
    AnalyzedElement,
    AnimationConfig,
    AnimationType,
    ContainerType,
    ElementType,
    GenerationMetadata,
    GenerationResult,
    Geometry,
    HostPreferences,
    LayoutInfo,
    PlaceholderConfig,
    Shape,
    SkeletonNode,
    ThemeConfig,
    ThemeType,
)

logger = logging.getLogger(__name__)

LIGHT_BASE_COLOR = "#e0e0e0"
DARK_BASE_COLOR = "#2d2d2d"
ROUNDED_RADIUS = 8
RECTANGULAR_RADIUS = "4px"
LINE_GAP = 4
LAST_LINE_WIDTH = "70%"
LOADING_LABEL = "Loading content..."

GROUP_TYPES = {ElementType.CONTAINER, ElementType.CARD, ElementType.LIST, ElementType.UNKNOWN}

STYLE_PROJECTION = [
    ("margin", "margin"),
    ("display", "display"),
    ("position", "position"),
    ("flex_direction", "flex-direction"),
    ("justify_content", "justify-content"),
    ("align_items", "align-items"),
]

OVERRIDE_KEYS: List[Callable[[AnalyzedElement], str]] = [
    lambda e: e.id,
    lambda e: f".{e.tag_name}",
    lambda e: e.tag_name,
    lambda e: f".auto-skeleton-{e.element_type.value}",
]

_CONFIG_FIELDS = {f.name for f in fields(PlaceholderConfig)} - {"children", "element_id"}


def resolve_theme(theme: ThemeConfig, host: Optional[HostPreferences] = None) -> ThemeConfig:
    if theme.type != ThemeType.AUTO:
        return theme
    dark = bool(host and host.prefers_dark_scheme)
    return replace(theme, type=ThemeType.DARK if dark else ThemeType.LIGHT)


def skeleton_color(theme: ThemeConfig) -> str:
    if theme.base_color:
        return theme.base_color
    return DARK_BASE_COLOR if theme.type == ThemeType.DARK else LIGHT_BASE_COLOR


def border_radius_for(shape: Shape, theme: ThemeConfig) -> str:
    if shape == Shape.CIRCULAR:
        return "50%"
    if shape == Shape.ROUNDED:
        radius = theme.border_radius if theme.border_radius is not None else ROUNDED_RADIUS
        return f"{radius:g}px"
    return RECTANGULAR_RADIUS


def complexity_score(configs) -> int:
    score = 0
    for config in configs:
        score += 1
        if config.lines and config.lines > 1:
            score += config.lines
        if config.animation.type != AnimationType.NONE:
            score += 1
        if config.shape == Shape.CIRCULAR:
            score += 1
    return score


def apply_override(config: PlaceholderConfig, override: Mapping[str, Any]) -> PlaceholderConfig:
    """Shallow-merge one override entry; ``animation`` may be partial."""
    updates: Dict[str, Any] = {}
    for key, value in override.items():
        if key not in _CONFIG_FIELDS:
            raise ValueError(f"Unsupported override field: {key}")
        if key == "animation":
            value = config.animation.merge(presets.resolve_animation(value))
        elif key == "shape":
            value = Shape(value)
        elif key == "type":
            value = ElementType(value)
        elif key == "style":
            value = dict(value or {})
        updates[key] = value
    return replace(config, **updates)


def find_override(element: AnalyzedElement, overrides: Optional[Mapping[str, Mapping[str, Any]]]):
    if not overrides:
        return None
    for key_for in OVERRIDE_KEYS:
        key = key_for(element)
        if key in overrides:
            return key, overrides[key]
    return None


def fallback_tree(theme: Optional[ThemeConfig] = None) -> SkeletonNode:
    theme = theme or ThemeConfig()
    return SkeletonNode(
        class_name="auto-skeleton-default-fallback",
        style={
            "width": "100%",
            "height": 200,
            "background-color": skeleton_color(theme),
            "border-radius": RECTANGULAR_RADIUS,
            "animation": presets.animation_css(BUILTIN_ANIMATION),
        },
        attributes={"aria-busy": "true", "aria-label": LOADING_LABEL},
    )


def error_tree(message: str = "Skeleton loading failed") -> SkeletonNode:
    return SkeletonNode(
        class_name="auto-skeleton-error",
        style={
            "width": "100%",
            "height": 100,
            "background-color": "#f5f5f5",
            "border": "1px dashed #ccc",
            "border-radius": RECTANGULAR_RADIUS,
            "display": "flex",
            "align-items": "center",
            "justify-content": "center",
            "color": "#999",
        },
        text=message,
    )


def text_placeholder(
    lines: int = 1,
    width: Union[int, float, str] = "100%",
    font_size: float = 16,
    last_line_width: str = LAST_LINE_WIDTH,
    animation: Optional[AnimationConfig] = None,
    theme: Optional[ThemeConfig] = None,
) -> SkeletonNode:
    """Standalone multi-line text placeholder, outside the generation pipeline."""
    theme = theme or ThemeConfig()
    line_height = line_height_for(font_size)
    line_style = {
        "height": line_height,
        "background-color": skeleton_color(theme),
        "border-radius": RECTANGULAR_RADIUS,
        "animation": presets.animation_css(animation or BUILTIN_ANIMATION),
        "display": "block",
    }
    if lines <= 1:
        return SkeletonNode(class_name="auto-skeleton-line", style={"width": width, **line_style})
    children = []
    for index in range(lines):
        last = index == lines - 1
        children.append(SkeletonNode(
            class_name="auto-skeleton-line",
            style={
                "width": last_line_width if last else width,
                **line_style,
                "margin-bottom": 0 if last else LINE_GAP,
            },
        ))
    return SkeletonNode(class_name="auto-skeleton-text-primitive", children=children)


class SkeletonGenerator:
    def __init__(
        self,
        theme: Optional[ThemeConfig] = None,
        animation: Optional[AnimationConfig] = None,
        config: Optional[GeneratorConfig] = None,
    ):
        self.theme = theme or ThemeConfig()
        self.animation = BUILTIN_ANIMATION.merge(animation)
        self.config = config or GeneratorConfig()

    def update_theme(self, theme: Union[ThemeConfig, Dict[str, Any]]) -> None:
        self.theme = self.theme.merge(theme)

    def update_animation(self, animation: Union[AnimationConfig, Dict[str, Any], str]) -> None:
        self.animation = self.animation.merge(presets.resolve_animation(animation))

    def update_config(self, **changes: Any) -> None:
        self.config = replace(self.config, **changes)

    def generate(
        self,
        analysis: AnalysisResult,
        options: Optional[SkeletonOptions] = None,
        host: Optional[HostPreferences] = None,
    ) -> GenerationResult:
        options = options or SkeletonOptions()
        started = time.perf_counter()
        try:
            theme = resolve_theme(self.theme.merge(options.theme), host)
            animation = self.animation.merge(presets.resolve_animation(options.animation))

            nested = self.config.preserve_hierarchy
            roots = [self.convert(e, animation, options, nested) for e in analysis.elements]

            configs = [c for root in roots for c in root.walk()]

            if self.config.optimize_for_performance:
                for config in configs:
                    config.animation = presets.optimize_for_performance(config.animation, len(configs))

            if options.respect_user_motion and host is not None and host.prefers_reduced_motion:
                for config in configs:
                    config.animation = replace(config.animation, type=AnimationType.NONE)

            tree = self.build_tree(roots, analysis.layout, theme)
        except Exception as exc:
            elapsed = (time.perf_counter() - started) * 1000.0
            raise GenerationFailedError(
                f"Skeleton generation failed: {exc}",
                generation_time=round(elapsed, 3),
                context={"component_name": analysis.metadata.component_name},
            ) from exc

        metadata = GenerationMetadata(
            generation_time=round((time.perf_counter() - started) * 1000.0, 3),
            complexity=complexity_score(configs),
            element_count=len(configs),
        )
        logger.log(
            options.debug.log_level,
            "Generated %d placeholder configs (complexity %d) in %.1fms",
            metadata.element_count,
            metadata.complexity,
            metadata.generation_time,
        )
        return GenerationResult(renderable_tree=tree, configs=tuple(configs), metadata=metadata)

    def convert(
        self,
        element: AnalyzedElement,
        animation: AnimationConfig,
        options: SkeletonOptions,
        nested: bool = True,
    ) -> PlaceholderConfig:
        geometry = element.geometry
        if element.element_type == ElementType.IMAGE and geometry.height == 0 and geometry.width > 0:
            geometry = Geometry(geometry.width, round(geometry.width * 9 / 16, 2), geometry.x, geometry.y)

        font_size = font_size_px(element.style.font_size)
        size = compute_placeholder_size(
            geometry,
            element.element_type,
            text_content=element.text_content,
            font_size=font_size,
            border_radius=element.style.border_radius,
            preserve_aspect_ratio=options.preserve_aspect_ratio,
        )
        config = PlaceholderConfig(
            type=element.element_type,
            width=size.width,
            height=size.height,
            shape=size.shape,
            animation=animation,
            style=self.base_style(element),
            element_id=element.id,
        )
        config = self.enhance(config, element, font_size)

        # avatars stay square at min(w, h)
        if config.type != ElementType.AVATAR:
            width, height = constrain_dimensions(
                config.width, config.height, min_width=options.min_width, min_height=options.min_height
            )
            config.width, config.height = width, height

        match = find_override(element, options.custom_overrides)
        if match is not None:
            key, override = match
            logger.debug("Override %r applied to %s", key, element.id)
            config = apply_override(config, override)

        if nested and element.children and element.element_type in GROUP_TYPES:
            config.children = [self.convert(child, animation, options, nested) for child in element.children]
        return config

    def enhance(self, config: PlaceholderConfig, element: AnalyzedElement, font_size: float) -> PlaceholderConfig:
        if config.type == ElementType.TEXT:
            width = element.geometry.width
            config.lines = estimate_text_lines(element.text_content, width, font_size)
            config.line_height = line_height_for(font_size)
        elif config.type == ElementType.IMAGE:
            if config.shape != Shape.CIRCULAR:
                config.shape = Shape.ROUNDED
        elif config.type == ElementType.AVATAR:
            config.shape = Shape.CIRCULAR
        return config

    def base_style(self, element: AnalyzedElement) -> Dict[str, Any]:
        style: Dict[str, Any] = {}
        for attr, prop in STYLE_PROJECTION:
            value = getattr(element.style, attr)
            if value is None:
                continue
            if prop == "position":
                value = "absolute" if value == "absolute" else "static"
            elif prop == "display" and value == "inline":
                value = "inline-block"
            style[prop] = value
        style.setdefault("margin", "0")
        style["padding"] = "0"
        return style

    def build_tree(self, roots: List[PlaceholderConfig], layout: LayoutInfo, theme: ThemeConfig) -> SkeletonNode:
        if layout.container_type == ContainerType.FLEX:
            style: Dict[str, Any] = {"display": "flex", "flex-direction": layout.direction or "row"}
            if layout.wrap:
                style["flex-wrap"] = "wrap"
        else:
            style = {"display": layout.container_type.value}
        style["gap"] = layout.gap or 0
        if layout.align_items:
            style["align-items"] = layout.align_items
        if layout.justify_content:
            style["justify-content"] = layout.justify_content
        style["width"] = "100%"

        attributes = {"aria-busy": "true"}
        if self.config.accessibility_attributes:
            attributes["aria-label"] = LOADING_LABEL
            attributes["role"] = "status"

        return SkeletonNode(
            class_name="auto-skeleton-root",
            style=style,
            attributes=attributes,
            children=[self.render(config, theme) for config in roots],
        )

    def render(self, config: PlaceholderConfig, theme: ThemeConfig) -> SkeletonNode:
        type_class = f"auto-skeleton-{config.type.value}"
        if config.children:
            return SkeletonNode(
                class_name=f"auto-skeleton-group {type_class}",
                style={"width": config.width, "height": config.height, **config.style},
                attributes=self._data_attributes(config),
                children=[self.render(child, theme) for child in config.children],
            )

        motion_class = []
        if config.animation.type != AnimationType.NONE:
            motion_class.append(f"auto-skeleton-{config.animation.type.value}")
        classes = ["auto-skeleton-element", type_class]
        paint = {
            "background-color": skeleton_color(theme),
            "border-radius": border_radius_for(config.shape, theme),
            "animation": presets.animation_css(config.animation),
        }
        if theme.highlight_color:
            paint["--auto-skeleton-highlight"] = theme.highlight_color

        if config.type == ElementType.TEXT and config.lines and config.lines > 1:
            line_height = config.line_height or line_height_for(None)
            lines = []
            for index in range(config.lines):
                last = index == config.lines - 1
                lines.append(SkeletonNode(
                    class_name=" ".join(["auto-skeleton-line"] + motion_class),
                    style={"width": LAST_LINE_WIDTH if last else "100%", "height": line_height, **paint},
                ))
            wrapper_style = {
                "width": config.width,
                **config.style,
                "display": "flex",
                "flex-direction": "column",
                "gap": LINE_GAP,
            }
            return SkeletonNode(
                class_name=" ".join(classes + ["auto-skeleton-multiline"]),
                style=wrapper_style,
                attributes=self._data_attributes(config),
                children=lines,
            )

        return SkeletonNode(
            class_name=" ".join(classes + motion_class),
            style={"width": config.width, "height": config.height, **paint, **config.style},
            attributes=self._data_attributes(config),
        )

    @staticmethod
    def _data_attributes(config: PlaceholderConfig) -> Dict[str, str]:
        if not config.element_id:
            return {}
        return {"data-element-id": config.element_id}

"""
Animation presets and pure transforms over AnimationConfig.

None of these touch the page; the stylesheet below is what a caller injects
next to a rendered skeleton tree.
"""

import math
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Union

from .types import (
    ANIMATION_DIRECTIONS,
    DEFAULT_ANIMATION_DURATION,
    AnimationConfig,
    AnimationType,
    Complexity,
    ElementType,
    ThemeConfig,
    ThemeType,
)

SHIMMER = AnimationConfig(AnimationType.SHIMMER, 1500, direction="normal")
PULSE = AnimationConfig(AnimationType.PULSE, 1200, direction="normal")
WAVE = AnimationConfig(AnimationType.WAVE, 1800, direction="normal")
FADE = AnimationConfig(AnimationType.FADE, 2000, direction="normal")
NONE = AnimationConfig(AnimationType.NONE, 0)
FAST_SHIMMER = AnimationConfig(AnimationType.SHIMMER, 800, direction="normal")
SLOW_PULSE = AnimationConfig(AnimationType.PULSE, 2500, direction="normal")
REVERSE_SHIMMER = AnimationConfig(AnimationType.SHIMMER, 1500, direction="reverse")

PRESETS: Dict[str, AnimationConfig] = {
    "shimmer": SHIMMER,
    "pulse": PULSE,
    "wave": WAVE,
    "fade": FADE,
    "none": NONE,
    "fast_shimmer": FAST_SHIMMER,
    "slow_pulse": SLOW_PULSE,
    "reverse_shimmer": REVERSE_SHIMMER,
}

COMPLEXITY_FACTORS = {
    Complexity.SIMPLE: 0.8,
    Complexity.MEDIUM: 1.0,
    Complexity.COMPLEX: 1.3,
}

DARK_THEME_FACTOR = 1.2
STAGGER_DELAY = 100
TRANSITION_DURATION = 300

MANY_ELEMENTS = 20
TOO_MANY_ELEMENTS = 50
FAST_DURATION_CAP = 1000

MOBILE_VIEWPORT = 768
LARGE_VIEWPORT = 1920

ELEMENT_ANIMATIONS = {
    ElementType.TEXT: SHIMMER,
    ElementType.IMAGE: PULSE,
    ElementType.AVATAR: SHIMMER,
    ElementType.BUTTON: PULSE,
    ElementType.INPUT: SHIMMER,
    ElementType.ICON: FADE,
    ElementType.CARD: SHIMMER,
    ElementType.LIST: WAVE,
    ElementType.CONTAINER: PULSE,
    ElementType.UNKNOWN: SHIMMER,
}

LOADING_STATE_ANIMATIONS = {
    "initial": FAST_SHIMMER,
    "progress": SHIMMER,
    "complete": FADE,
    "error": SLOW_PULSE,
}

CSS_DIRECTIONS = {"ltr": "normal", "rtl": "reverse"}

KEYFRAMES: Dict[str, Dict[str, Dict[str, str]]] = {
    "shimmer": {
        "0%": {"background-position": "-200px 0"},
        "100%": {"background-position": "calc(200px + 100%) 0"},
    },
    "pulse": {
        "0%, 100%": {"opacity": "1"},
        "50%": {"opacity": "0.4"},
    },
    "wave": {
        "0%, 60%, 100%": {"transform": "initial"},
        "30%": {"transform": "skewX(-20deg)"},
    },
    "fade": {
        "0%, 50%": {"opacity": "0.3"},
        "25%, 75%": {"opacity": "1"},
    },
}


def get_preset(name: str) -> Optional[AnimationConfig]:
    key = (name or "").strip().lower().replace("-", "_")
    return PRESETS.get(key)


def resolve_animation(value: Union[None, str, Mapping[str, Any], AnimationConfig]) -> Optional[Union[AnimationConfig, Dict[str, Any]]]:
    """Normalize a user-supplied animation: preset name, partial dict or config."""
    if value is None or isinstance(value, AnimationConfig):
        return value
    if isinstance(value, str):
        preset = get_preset(value)
        if preset is None:
            raise ValueError(f"Unknown animation preset: {value}")
        return preset
    return dict(value)


def create_custom(animation_type: Union[str, AnimationType], duration: int, **options: Any) -> AnimationConfig:
    base = AnimationConfig(type=animation_type, duration=duration, delay=0, direction="normal")
    return base.merge(options)


def respect_user_preferences(animation: AnimationConfig, prefers_reduced_motion: bool,
                             respect_reduced_motion: bool = True) -> AnimationConfig:
    if respect_reduced_motion and prefers_reduced_motion:
        return replace(animation, type=AnimationType.NONE)
    return animation


def _duration(animation: AnimationConfig) -> int:
    return animation.duration if animation.duration is not None else DEFAULT_ANIMATION_DURATION


def scale_for_complexity(animation: AnimationConfig, complexity: Union[str, Complexity]) -> AnimationConfig:
    factor = COMPLEXITY_FACTORS[Complexity(complexity)]
    return replace(animation, duration=round(_duration(animation) * factor))


def adapt_for_theme(animation: AnimationConfig, theme: ThemeConfig) -> AnimationConfig:
    if theme.type == ThemeType.DARK:
        return replace(animation, duration=round(_duration(animation) * DARK_THEME_FACTOR))
    return animation


def create_staggered(animation: AnimationConfig, index: int, stagger_delay: int = STAGGER_DELAY) -> AnimationConfig:
    return replace(animation, delay=(animation.delay or 0) + index * stagger_delay)


def create_synchronized(animations: List[AnimationConfig]) -> List[AnimationConfig]:
    if not animations:
        return []
    longest = max(a.duration or 0 for a in animations)
    return [replace(a, duration=longest) for a in animations]


def validate_animation(animation: Union[AnimationConfig, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(animation, AnimationConfig):
        data = animation.to_dict()
    else:
        data = dict(animation)
    errors = []

    animation_type = data.get("type")
    valid_types = [t.value for t in AnimationType]
    if getattr(animation_type, "value", animation_type) not in valid_types:
        errors.append(f"Invalid animation type: {animation_type}")

    duration = data.get("duration")
    if duration is not None:
        if duration < 0:
            errors.append("Animation duration cannot be negative")
        if duration == 0 and animation_type != AnimationType.NONE.value:
            errors.append("Animation duration should be greater than 0 for animated types")

    delay = data.get("delay")
    if delay is not None and delay < 0:
        errors.append("Animation delay cannot be negative")

    direction = data.get("direction")
    if direction and direction not in ANIMATION_DIRECTIONS:
        errors.append(f"Invalid animation direction: {direction}")

    return {"is_valid": not errors, "errors": errors}


def optimize_for_performance(animation: AnimationConfig, element_count: int) -> AnimationConfig:
    if element_count > TOO_MANY_ELEMENTS:
        return replace(animation, type=AnimationType.NONE)
    if element_count > MANY_ELEMENTS:
        animation_type = AnimationType.PULSE if animation.type == AnimationType.WAVE else animation.type
        return replace(animation, type=animation_type, duration=min(_duration(animation), FAST_DURATION_CAP))
    return animation


def animation_for_element_type(element_type: Union[str, ElementType]) -> AnimationConfig:
    try:
        return ELEMENT_ANIMATIONS[ElementType(element_type)]
    except ValueError:
        return SHIMMER


def generate_css_keyframes(name: str, keyframes: Mapping[str, Mapping[str, str]]) -> str:
    blocks = []
    for selector, styles in keyframes.items():
        body = "\n".join(f"    {prop}: {value};" for prop, value in styles.items())
        blocks.append(f"  {selector} {{\n{body}\n  }}")
    return f"@keyframes {name} {{\n" + "\n".join(blocks) + "\n}"


def create_transition(from_animation: AnimationConfig, to_animation: AnimationConfig,
                      duration: int = TRANSITION_DURATION) -> Dict[str, AnimationConfig]:
    intermediate = AnimationConfig(AnimationType.FADE, duration, direction="normal")
    return {"intermediate": intermediate, "final": to_animation}


def calculate_optimal_duration(animation: AnimationConfig, width: float, height: float) -> AnimationConfig:
    area_factor = min(math.sqrt(max(width * height, 0)) / 100, 2)
    return replace(animation, duration=round(_duration(animation) * (0.8 + area_factor * 0.4)))


def create_responsive_animation(animation: AnimationConfig, viewport_width: float) -> AnimationConfig:
    factor = 1.0
    if viewport_width < MOBILE_VIEWPORT:
        factor = 0.8
    elif viewport_width > LARGE_VIEWPORT:
        factor = 1.2
    return replace(animation, duration=round(_duration(animation) * factor))


def loading_state_animation(state: str) -> AnimationConfig:
    return LOADING_STATE_ANIMATIONS[state]


def animation_css(animation: AnimationConfig) -> str:
    """CSS ``animation`` shorthand for one placeholder, ``none`` when disabled."""
    if animation.type == AnimationType.NONE:
        return "none"
    parts = [f"auto-skeleton-{animation.type.value}", f"{_duration(animation)}ms"]
    if animation.delay:
        parts.append(f"{animation.delay}ms")
    direction = animation.direction or "normal"
    parts.append("infinite")
    parts.append(CSS_DIRECTIONS.get(direction, direction))
    return " ".join(parts)


def skeleton_stylesheet() -> str:
    """Keyframes for every animated type plus the reduced-motion guard."""
    sheets = [generate_css_keyframes(f"auto-skeleton-{name}", frames) for name, frames in KEYFRAMES.items()]
    sheets.append(
        ".auto-skeleton-shimmer {\n"
        "  background-image: linear-gradient(90deg, rgba(255, 255, 255, 0) 25%, "
        "rgba(255, 255, 255, 0.5) 37%, rgba(255, 255, 255, 0) 63%);\n"
        "  background-size: 400px 100%;\n"
        "}"
    )
    sheets.append(
        "@media (prefers-reduced-motion: reduce) {\n"
        "  .auto-skeleton-element, .auto-skeleton-line {\n"
        "    animation: none !important;\n"
        "  }\n"
        "}"
    )
    return "\n\n".join(sheets)

"""
Placeholder sizing rules per semantic element type.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .style_extractor import parse_length, parse_px, round_half_up
from .types import Dimension, ElementType, Geometry, Shape

DEFAULT_FONT_SIZE = 16.0
LINE_HEIGHT_RATIO = 1.2
CHAR_WIDTH_RATIO = 0.6
MAX_TEXT_LINES = 5

BUTTON_MIN_HEIGHT = 36
BUTTON_DEFAULT_SIZE = (120, 40)
INPUT_MIN_HEIGHT = 40

IMAGE_DEFAULT_SIZE = (200, 150)
IMAGE_MAX_WIDTH = 800
IMAGE_MAX_HEIGHT = 600

FULL_WIDTH = "100%"
MAX_FIXED_WIDTH = 800
NARROW_WIDTH = 50
MIN_WIDTH = 20
DEFAULT_HEIGHT = 20
SHORT_HEIGHT = 10
MIN_HEIGHT = 16

ROUNDED_RADIUS = 4


@dataclass(frozen=True)
class PlaceholderSize:
    width: Dimension
    height: Dimension
    shape: Shape


def line_height_for(font_size: Optional[float]) -> float:
    return round((font_size or DEFAULT_FONT_SIZE) * LINE_HEIGHT_RATIO, 2)


def font_size_px(value: Optional[str]) -> float:
    size = parse_length(value or "")
    return size if size and size > 0 else DEFAULT_FONT_SIZE


def estimate_text_lines(text: Optional[str], width: float, font_size: float = DEFAULT_FONT_SIZE,
                        cap: Optional[int] = MAX_TEXT_LINES) -> int:
    if not text:
        return 1
    chars_per_line = max(1, math.floor(width / (font_size * CHAR_WIDTH_RATIO)))
    lines = max(1, math.ceil(len(text) / chars_per_line))
    if cap:
        lines = min(lines, cap)
    return lines


def text_height(text: Optional[str], width: float, font_size: float = DEFAULT_FONT_SIZE) -> float:
    line_height = line_height_for(font_size)
    if not text:
        return line_height
    lines = estimate_text_lines(text, width, font_size, cap=None)
    return round(max(line_height, lines * line_height), 2)


def default_width(width: float) -> Dimension:
    if width == 0 or width > MAX_FIXED_WIDTH:
        return FULL_WIDTH
    if width < NARROW_WIDTH:
        return round(max(width, MIN_WIDTH), 2)
    return round_half_up(width)


def default_height(height: float) -> Dimension:
    if height == 0:
        return DEFAULT_HEIGHT
    if height < SHORT_HEIGHT:
        return MIN_HEIGHT
    return round_half_up(height)


def image_size(width: float, height: float, preserve_aspect_ratio: bool = True) -> Tuple[float, float]:
    if width == 0 or height == 0:
        return IMAGE_DEFAULT_SIZE
    ratio = width / height
    if width > IMAGE_MAX_WIDTH:
        width = IMAGE_MAX_WIDTH
        if preserve_aspect_ratio:
            height = width / ratio
    if height > IMAGE_MAX_HEIGHT:
        height = IMAGE_MAX_HEIGHT
        if preserve_aspect_ratio:
            width = height * ratio
    return round(width, 2), round(height, 2)


def determine_shape(element_type: ElementType, geometry: Geometry, border_radius: Optional[str] = None) -> Shape:
    if element_type in {ElementType.AVATAR, ElementType.ICON}:
        return Shape.CIRCULAR
    if not border_radius or border_radius in {"0", "0px"}:
        return Shape.RECTANGULAR
    if border_radius.strip().endswith("%"):
        percent = parse_px(border_radius)
        if percent >= 50:
            return Shape.CIRCULAR
        return Shape.ROUNDED if percent > 0 else Shape.RECTANGULAR
    radius = parse_px(border_radius)
    if radius >= min(geometry.width, geometry.height) / 2:
        return Shape.CIRCULAR
    if radius > ROUNDED_RADIUS:
        return Shape.ROUNDED
    return Shape.RECTANGULAR


def compute_placeholder_size(
    geometry: Geometry,
    element_type: ElementType,
    text_content: Optional[str] = None,
    font_size: float = DEFAULT_FONT_SIZE,
    border_radius: Optional[str] = None,
    preserve_aspect_ratio: bool = True,
) -> PlaceholderSize:
    """Placeholder width/height/shape for one element. Pure; same inputs, same output."""
    width, height = geometry.width, geometry.height
    shape = determine_shape(element_type, geometry, border_radius)

    if element_type == ElementType.TEXT:
        return PlaceholderSize(default_width(width), text_height(text_content, width, font_size), shape)

    if element_type == ElementType.AVATAR:
        side = round(min(width, height), 2)
        return PlaceholderSize(side, side, Shape.CIRCULAR)

    if element_type == ElementType.BUTTON:
        if width == 0 and height == 0:
            return PlaceholderSize(BUTTON_DEFAULT_SIZE[0], BUTTON_DEFAULT_SIZE[1], shape)
        return PlaceholderSize(default_width(width), max(round_half_up(height), BUTTON_MIN_HEIGHT), shape)

    if element_type == ElementType.INPUT:
        return PlaceholderSize(default_width(width), max(round_half_up(height), INPUT_MIN_HEIGHT), shape)

    if element_type == ElementType.IMAGE:
        image_width, image_height = image_size(width, height, preserve_aspect_ratio)
        return PlaceholderSize(image_width, image_height, shape)

    return PlaceholderSize(default_width(width), default_height(height), shape)


def minimum_dimensions(element_type: ElementType, font_size: float = DEFAULT_FONT_SIZE) -> Dict[str, float]:
    if element_type == ElementType.TEXT:
        return {"min_width": font_size, "min_height": line_height_for(font_size)}
    table = {
        ElementType.BUTTON: (60, 32),
        ElementType.INPUT: (100, 36),
        ElementType.AVATAR: (24, 24),
        ElementType.ICON: (16, 16),
    }
    min_width, min_height = table.get(element_type, (10, 10))
    return {"min_width": min_width, "min_height": min_height}


def _clamp(value: Dimension, low: Optional[float], high: Optional[float]) -> Dimension:
    if isinstance(value, str):
        return value
    if low is not None:
        value = max(value, low)
    if high is not None:
        value = min(value, high)
    return value


def constrain_dimensions(
    width: Dimension,
    height: Dimension,
    min_width: Optional[float] = None,
    max_width: Optional[float] = None,
    min_height: Optional[float] = None,
    max_height: Optional[float] = None,
) -> Tuple[Dimension, Dimension]:
    """Clamp numeric sizes; relative sizes such as ``"100%"`` pass through."""
    return _clamp(width, min_width, max_width), _clamp(height, min_height, max_height)


def round_geometry(geometry: Geometry, precision: int = 0) -> Geometry:
    factor = 10 ** precision

    def rnd(v: float) -> float:
        return round_half_up(v * factor) / factor

    return Geometry(rnd(geometry.width), rnd(geometry.height), rnd(geometry.x), rnd(geometry.y))


def scale_factor(original_viewport: Tuple[float, float], current_viewport: Tuple[float, float]) -> Dict[str, float]:
    scale_x = current_viewport[0] / original_viewport[0]
    scale_y = current_viewport[1] / original_viewport[1]
    return {"scale_x": scale_x, "scale_y": scale_y, "scale": min(scale_x, scale_y)}


def adjust_for_device_pixel_ratio(geometry: Geometry, device_pixel_ratio: float) -> Geometry:
    r = device_pixel_ratio or 1.0
    return Geometry(geometry.width / r, geometry.height / r, geometry.x / r, geometry.y / r)


def rectangles_overlap(a: Geometry, b: Geometry) -> bool:
    return not (a.right < b.x or b.right < a.x or a.bottom < b.y or b.bottom < a.y)


def intersection_area(a: Geometry, b: Geometry) -> float:
    if not rectangles_overlap(a, b):
        return 0.0
    left = max(a.x, b.x)
    right = min(a.right, b.right)
    top = max(a.y, b.y)
    bottom = min(a.bottom, b.bottom)
    return (right - left) * (bottom - top)


def distance(p1: Tuple[float, float], p2: Tuple[float, float]) -> float:
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def _sides(raw: Dict[str, str], prefix: str, suffix: str = "") -> Dict[str, float]:
    return {
        side: parse_length(raw.get(f"{prefix}-{side}{suffix}", "")) or 0.0
        for side in ("top", "right", "bottom", "left")
    }


def box_model(geometry: Geometry, raw_style: Dict[str, str]) -> Dict[str, object]:
    """Content/padding/border/margin boxes from per-side computed values."""
    padding = _sides(raw_style, "padding")
    border = _sides(raw_style, "border", "-width")
    margin = _sides(raw_style, "margin")
    content = Geometry(
        width=max(0.0, geometry.width - padding["left"] - padding["right"] - border["left"] - border["right"]),
        height=max(0.0, geometry.height - padding["top"] - padding["bottom"] - border["top"] - border["bottom"]),
        x=geometry.x + border["left"] + padding["left"],
        y=geometry.y + border["top"] + padding["top"],
    )
    total = Geometry(
        width=geometry.width + margin["left"] + margin["right"],
        height=geometry.height + margin["top"] + margin["bottom"],
        x=geometry.x - margin["left"],
        y=geometry.y - margin["top"],
    )
    return {"content": content, "padding": padding, "border": border, "margin": margin, "total": total}

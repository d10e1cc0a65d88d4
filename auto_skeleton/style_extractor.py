"""
Style extraction - filters a raw computed-style map (kebab-case CSS property
-> string) down to the canonical VisualStyle subset and normalizes values.
"""

import math
import re
from typing import Any, Dict, Optional, Tuple

from .types import ContainerType, VisualStyle

TYPOGRAPHY_PROPS = [
    "font-size",
    "font-weight",
    "font-family",
    "line-height",
    "text-align",
    "color",
]

LAYOUT_PROPS = [
    "display",
    "position",
    "flex-direction",
    "flex-wrap",
    "justify-content",
    "align-items",
    "align-content",
    "justify-items",
    "gap",
    "grid-template",
    "grid-template-columns",
    "grid-template-rows",
    "width",
    "height",
    "min-width",
    "min-height",
    "max-width",
    "max-height",
    "margin",
    "padding",
    "overflow",
    "vertical-align",
]

EFFECT_PROPS = [
    "background-color",
    "border-radius",
    "border",
    "border-width",
    "border-style",
    "border-color",
    "box-shadow",
    "opacity",
    "transform",
    "filter",
    "z-index",
]

MOTION_PROPS = [
    "transition",
    "transition-duration",
    "animation",
    "animation-duration",
]

VISIBILITY_PROPS = ["visibility", "opacity", "display"]

RELEVANT_PROPS = list(dict.fromkeys(TYPOGRAPHY_PROPS + LAYOUT_PROPS + EFFECT_PROPS + MOTION_PROPS))

# props the measurement layer needs beyond RELEVANT_PROPS
BOX_PROPS = [
    f"{prefix}-{side}{suffix}"
    for prefix, suffix in (("margin", ""), ("padding", ""), ("border", "-width"))
    for side in ("top", "right", "bottom", "left")
]

CAPTURE_PROPS = list(dict.fromkeys(RELEVANT_PROPS + VISIBILITY_PROPS + BOX_PROPS + [
    "perspective",
    "clip-path",
    "mask",
    "mix-blend-mode",
    "isolation",
]))

DROPPED_VALUES = {"", "initial", "inherit", "auto"}

RESPONSIVE_UNITS = ["%", "vw", "vh", "vmin", "vmax", "em", "rem", "fr"]

STYLE_FIELDS = {
    "background_color": "background-color",
    "border_radius": "border-radius",
    "margin": "margin",
    "padding": "padding",
    "font_size": "font-size",
    "font_weight": "font-weight",
    "line_height": "line-height",
    "display": "display",
    "position": "position",
    "flex_direction": "flex-direction",
    "flex_wrap": "flex-wrap",
    "justify_content": "justify-content",
    "align_items": "align-items",
    "grid_template_columns": "grid-template-columns",
    "gap": "gap",
}

_PX_RE = re.compile(r"^(-?(?:\d+(?:\.\d+)?|\.\d+))px$")
_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d+)?|\.\d+)")


def round_half_up(value: float) -> int:
    sign = -1 if value < 0 else 1
    return sign * int(math.floor(abs(value) + 0.5))


def parse_color(value: str) -> Optional[Tuple[int, int, int, float]]:
    if not value:
        return None
    value = value.strip().lower()
    if value == "transparent":
        return 0, 0, 0, 0.0
    rgba_match = re.match(r"rgba?\(([^)]+)\)", value)
    if rgba_match:
        body = rgba_match.group(1).replace("/", " ")
        parts = [p for p in re.split(r"[\s,]+", body) if p]
        if len(parts) >= 3:
            try:
                r = int(float(parts[0]))
                g = int(float(parts[1]))
                b = int(float(parts[2]))
                if len(parts) > 3:
                    alpha = parts[3]
                    a = float(alpha[:-1]) / 100.0 if alpha.endswith("%") else float(alpha)
                else:
                    a = 1.0
                return r, g, b, a
            except ValueError:
                return None
    hex_match = re.match(r"#([0-9a-f]{3,8})$", value)
    if hex_match:
        h = hex_match.group(1)
        if len(h) in {3, 4}:
            r = int(h[0] * 2, 16)
            g = int(h[1] * 2, 16)
            b = int(h[2] * 2, 16)
            a = int(h[3] * 2, 16) / 255.0 if len(h) == 4 else 1.0
            return r, g, b, a
        if len(h) in {6, 8}:
            r = int(h[0:2], 16)
            g = int(h[2:4], 16)
            b = int(h[4:6], 16)
            a = int(h[6:8], 16) / 255.0 if len(h) == 8 else 1.0
            return r, g, b, a
    return None


def color_to_string(rgba: Tuple[int, int, int, float]) -> str:
    r, g, b, a = rgba
    if a <= 0:
        return "transparent"
    if a >= 0.999:
        return "#{:02x}{:02x}{:02x}".format(r, g, b)
    return f"rgba({r}, {g}, {b}, {round(a, 3):g})"


def normalize_color(value: Optional[str]) -> str:
    if not value or not value.strip():
        return "transparent"
    rgba = parse_color(value)
    if rgba is None:
        return value.strip()
    return color_to_string(rgba)


def parse_length(value: str, root_font_size: float = 16.0) -> Optional[float]:
    if not value:
        return None
    value = value.strip().lower()
    if value in {"auto", "normal", "none"}:
        return None
    if value.endswith("px"):
        try:
            return float(value.replace("px", ""))
        except ValueError:
            return None
    if value.endswith("rem"):
        try:
            return float(value.replace("rem", "")) * root_font_size
        except ValueError:
            return None
    if value.endswith("em"):
        try:
            return float(value.replace("em", "")) * root_font_size
        except ValueError:
            return None
    if value.endswith("%"):
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_duration(value: str) -> Optional[float]:
    if not value:
        return None
    value = value.strip().lower().split(",")[0].strip()
    if value.endswith("ms"):
        try:
            return float(value.replace("ms", ""))
        except ValueError:
            return None
    if value.endswith("s"):
        try:
            return float(value.replace("s", "")) * 1000.0
        except ValueError:
            return None
    return None


def parse_px(value: Optional[str], default: float = 0.0) -> float:
    """First number in a CSS value (``"12px 4px"`` -> 12.0)."""
    if not value:
        return default
    match = _NUMBER_RE.search(value)
    return float(match.group(0)) if match else default


def parse_gap(value: Optional[str]) -> float:
    if not value or value.strip() == "normal":
        return 0
    return parse_px(value)


def normalize_dimension(value: Optional[str]) -> str:
    if not value:
        return "0"
    value = value.strip()
    px_match = _PX_RE.match(value)
    if px_match:
        number = float(px_match.group(1))
        if abs(number) < 1:
            return "0"
        return f"{round_half_up(number)}px"
    return value


def normalize_spacing(value: Optional[str]) -> str:
    if not value:
        return "0"
    parts = value.split()
    return " ".join(normalize_dimension(p) for p in parts)


def extract_relevant(raw: Dict[str, Any]) -> Dict[str, str]:
    styles = {}
    for prop in RELEVANT_PROPS:
        value = raw.get(prop)
        if value is None:
            continue
        value = str(value).strip()
        if value in DROPPED_VALUES:
            continue
        styles[prop] = value
    return styles


def extract(raw: Dict[str, Any]) -> VisualStyle:
    """Canonical VisualStyle for one raw computed-style map."""
    relevant = extract_relevant(raw)
    values: Dict[str, Optional[str]] = {}
    for field_name, prop in STYLE_FIELDS.items():
        value = relevant.get(prop)
        if value is None:
            continue
        if prop == "background-color":
            value = normalize_color(value)
        elif prop in {"border-radius", "gap"}:
            value = normalize_dimension(value)
        elif prop in {"margin", "padding"}:
            value = normalize_spacing(value)
        values[field_name] = value
    return VisualStyle(**values)


def _pick(raw: Dict[str, Any], props) -> Dict[str, str]:
    result = {}
    for prop in props:
        value = raw.get(prop)
        if value not in (None, ""):
            result[prop] = str(value)
    return result


def extract_layout(raw: Dict[str, Any]) -> Dict[str, str]:
    return _pick(raw, ["display", "flex-direction", "flex-wrap", "justify-content", "align-items",
                       "gap", "grid-template", "position"])


def extract_typography(raw: Dict[str, Any]) -> Dict[str, str]:
    result = _pick(raw, ["font-size", "font-weight", "font-family", "line-height", "text-align"])
    if raw.get("color"):
        result["color"] = normalize_color(raw["color"])
    return result


def extract_visual(raw: Dict[str, Any]) -> Dict[str, str]:
    result = _pick(raw, ["border-radius", "border", "box-shadow"])
    if raw.get("background-color"):
        result["background-color"] = normalize_color(raw["background-color"])
    opacity = str(raw.get("opacity") or "1").strip()
    if opacity != "1":
        result["opacity"] = opacity
    return result


def is_flex_container(raw: Dict[str, Any]) -> bool:
    return raw.get("display") in {"flex", "inline-flex"}


def is_grid_container(raw: Dict[str, Any]) -> bool:
    return raw.get("display") in {"grid", "inline-grid"}


def analyze_container(raw: Dict[str, Any]) -> Tuple[str, Dict[str, str]]:
    display = raw.get("display") or ""
    if is_grid_container(raw):
        return ContainerType.GRID.value, _pick(raw, ["grid-template-columns", "grid-template-rows", "gap",
                                                     "justify-items", "align-items"])
    if is_flex_container(raw):
        return ContainerType.FLEX.value, _pick(raw, ["flex-direction", "flex-wrap", "justify-content",
                                                     "align-items", "gap"])
    if display == "inline-block":
        return ContainerType.INLINE_BLOCK.value, {}
    if display == "inline":
        return "inline", {}
    return ContainerType.BLOCK.value, {}


def has_responsive_units(raw: Dict[str, Any], units=None) -> bool:
    units = units or RESPONSIVE_UNITS
    for prop in ["width", "height", "font-size", "margin", "padding", "gap"]:
        value = str(raw.get(prop) or "")
        if any(unit in value for unit in units):
            return True
    return False


def extract_custom_properties(raw: Dict[str, Any]) -> Dict[str, str]:
    return {k: str(v).strip() for k, v in raw.items() if k.startswith("--")}


def creates_stacking_context(raw: Dict[str, Any]) -> bool:
    position = raw.get("position") or "static"
    z_index = raw.get("z-index") or "auto"
    conditions = [
        position != "static" and z_index != "auto",
        str(raw.get("opacity") or "1") != "1",
        (raw.get("transform") or "none") != "none",
        (raw.get("filter") or "none") != "none",
        (raw.get("perspective") or "none") != "none",
        (raw.get("clip-path") or "none") != "none",
        (raw.get("mask") or "none") != "none",
        (raw.get("mix-blend-mode") or "normal") != "normal",
        raw.get("isolation") == "isolate",
    ]
    return any(conditions)


def extract_animation_styles(raw: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    transition = raw.get("transition")
    if transition and transition not in {"all 0s ease 0s", "all"}:
        result["transition"] = transition
        duration = parse_duration(raw.get("transition-duration", ""))
        if duration:
            result["transition_duration_ms"] = duration
    animation = raw.get("animation")
    if animation and not animation.startswith("none"):
        result["animation"] = animation
    transform = raw.get("transform")
    if transform and transform != "none":
        result["transform"] = transform
    return result

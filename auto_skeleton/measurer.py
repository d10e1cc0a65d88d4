"""
Measurement provider - geometry, raw style and visibility of one captured element.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from .dimensions import box_model
from .style_extractor import RESPONSIVE_UNITS, has_responsive_units
from .types import DEFAULT_MEASUREMENT_THRESHOLD, VIEWPORT_MARGIN, DOMNode, Geometry

MIN_TEXT_LENGTH = 2


def normalize_text(text: str, limit: Optional[int] = None) -> str:
    clean = re.sub(r"\s+", " ", text or "").strip()
    return clean[:limit] if limit else clean


class DOMMeasurer:
    def __init__(
        self,
        measurement_threshold: float = DEFAULT_MEASUREMENT_THRESHOLD,
        viewport: Tuple[float, float] = (1440, 900),
        viewport_margin: float = VIEWPORT_MARGIN,
    ):
        self.measurement_threshold = measurement_threshold
        self.viewport = viewport
        self.viewport_margin = viewport_margin

    def measure_geometry(self, node: DOMNode) -> Geometry:
        g = node.geometry
        return Geometry(width=g.width, height=g.height, x=g.x, y=g.y)

    def read_style(self, node: DOMNode) -> Dict[str, str]:
        return dict(node.style)

    def is_visible(self, node: DOMNode, geometry: Optional[Geometry] = None) -> bool:
        geometry = geometry or self.measure_geometry(node)
        style = node.style

        if style.get("visibility") in {"hidden", "collapse"} or style.get("display") == "none":
            return False
        try:
            if float(style.get("opacity") or "1") == 0:
                return False
        except ValueError:
            pass

        threshold = self.measurement_threshold
        if geometry.width < threshold and geometry.height < threshold:
            return False

        return self.in_expanded_viewport(geometry)

    def in_expanded_viewport(self, geometry: Geometry) -> bool:
        width, height = self.viewport
        margin = self.viewport_margin
        return (
            geometry.x < width + margin
            and geometry.right > -margin
            and geometry.y < height + margin
            and geometry.bottom > -margin
        )

    def get_text_content(self, node: DOMNode) -> str:
        text = normalize_text(node.text_content)
        if len(text) < MIN_TEXT_LENGTH:
            return ""
        return text

    def analyze_responsive_behavior(self, node: DOMNode) -> Dict[str, Any]:
        units = [u for u in RESPONSIVE_UNITS if u != "fr"]
        return {"is_responsive": has_responsive_units(node.style, units), "breakpoints": []}

    def measurement_report(self, node: DOMNode) -> Dict[str, Any]:
        geometry = self.measure_geometry(node)
        visible = self.is_visible(node, geometry)
        warnings: List[str] = []
        if not visible:
            warnings.append("Element is not visible")
        if geometry.width == 0 or geometry.height == 0:
            warnings.append("Element has zero dimensions")
        summary = f"{node.tag_name} - {geometry.width:g}x{geometry.height:g}"
        box = box_model(geometry, node.style)
        return {
            "summary": summary,
            "geometry": geometry.to_dict(),
            "content_box": box["content"].to_dict(),
            "is_visible": visible,
            "children": len(node.children),
            "warnings": warnings,
        }

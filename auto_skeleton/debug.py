"""
Debug aids: analysis overlay and per-element measurement reports.
"""

from typing import Any, Dict, List, Optional

from .measurer import DOMMeasurer
from .types import AnalysisResult, DOMNode, SkeletonNode

OVERLAY_COLOR = "#ff6b6b"
OVERLAY_FILL = "rgba(255, 107, 107, 0.1)"


def analysis_overlay(analysis: AnalysisResult, nested: bool = True) -> SkeletonNode:
    """Fixed full-page layer with one labelled box per analyzed element."""
    elements = list(analysis.walk()) if nested else list(analysis.elements)
    boxes = []
    for index, element in enumerate(elements):
        g = element.geometry
        boxes.append(SkeletonNode(
            class_name="auto-skeleton-debug-box",
            style={
                "position": "absolute",
                "left": g.x,
                "top": g.y,
                "width": g.width,
                "height": g.height,
                "border": f"2px solid {OVERLAY_COLOR}",
                "background-color": OVERLAY_FILL,
                "font-size": 12,
                "color": OVERLAY_COLOR,
                "padding": 2,
                "box-sizing": "border-box",
            },
            attributes={"data-element-id": element.id},
            text=f"{element.element_type.value} #{index}",
        ))
    return SkeletonNode(
        class_name="auto-skeleton-debug-overlay",
        style={
            "position": "fixed",
            "top": 0,
            "left": 0,
            "width": "100%",
            "height": "100%",
            "pointer-events": "none",
            "z-index": 9999,
        },
        attributes={"id": "auto-skeleton-debug-overlay"},
        children=boxes,
    )


def measurement_report(root: DOMNode, measurer: Optional[DOMMeasurer] = None) -> List[Dict[str, Any]]:
    measurer = measurer or DOMMeasurer()
    rows = []
    for node in root.iter():
        report = measurer.measurement_report(node)
        report["tag"] = node.tag_name
        rows.append(report)
    return rows


def summarize(analysis: AnalysisResult) -> Dict[str, Any]:
    counts: Dict[str, int] = {}
    for element in analysis.walk():
        counts[element.element_type.value] = counts.get(element.element_type.value, 0) + 1
    return {
        "component_name": analysis.metadata.component_name,
        "complexity": analysis.metadata.complexity.value,
        "responsive": analysis.metadata.responsive,
        "analysis_time": analysis.metadata.analysis_time,
        "layout": analysis.layout.container_type.value,
        "element_types": counts,
        "total_elements": sum(counts.values()),
    }

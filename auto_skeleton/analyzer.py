"""
Tree analysis - waits for the root's layout to settle, then walks the captured
subtree (bounded depth) into an annotated AnalyzedElement tree plus layout and
metadata summaries.
"""

import logging
import time
from typing import Any, List, Optional, Set

from . import style_extractor
from .classifier import classify
from .config import AnalysisConfig
from .errors import AnalysisTimeoutError, ElementNotFoundError
from .measurer import DOMMeasurer, normalize_text
from .surface import RenderSurface
from .types import (
    AnalysisResult,
    AnalyzedElement,
    Complexity,
    ComponentMetadata,
    ContainerType,
    DOMNode,
    Geometry,
    LayoutInfo,
)

logger = logging.getLogger(__name__)

STABILITY_TOLERANCE = 1.0


def count_nodes(node: DOMNode) -> int:
    return 1 + sum(count_nodes(child) for child in node.children)


def max_nesting_depth(node: DOMNode, current: int = 0) -> int:
    if not node.children:
        return current
    return max(max_nesting_depth(child, current + 1) for child in node.children)


def determine_complexity(node: DOMNode) -> Complexity:
    total = count_nodes(node)
    depth = max_nesting_depth(node)
    if total <= 5 and depth <= 2:
        return Complexity.SIMPLE
    if total <= 20 and depth <= 4:
        return Complexity.MEDIUM
    return Complexity.COMPLEX


def determine_container_type(display: Optional[str]) -> ContainerType:
    if display in {"flex", "inline-flex"}:
        return ContainerType.FLEX
    if display in {"grid", "inline-grid"}:
        return ContainerType.GRID
    if display == "inline-block":
        return ContainerType.INLINE_BLOCK
    return ContainerType.BLOCK


def analyze_layout(raw_style) -> LayoutInfo:
    container_type = determine_container_type(raw_style.get("display"))
    direction = None
    wrap = None
    if container_type == ContainerType.FLEX:
        flex_direction = raw_style.get("flex-direction") or "row"
        direction = "column" if flex_direction.startswith("column") else "row"
        wrap = (raw_style.get("flex-wrap") or "nowrap").startswith("wrap")
    return LayoutInfo(
        container_type=container_type,
        direction=direction,
        wrap=wrap,
        gap=style_extractor.parse_gap(raw_style.get("gap")),
        align_items=raw_style.get("align-items") or None,
        justify_content=raw_style.get("justify-content") or None,
    )


class _AnalysisPass:
    """State of one walk: element ids are unique within a pass only."""

    def __init__(self, measurer: DOMMeasurer, config: AnalysisConfig):
        self.measurer = measurer
        self.config = config
        self.seen_ids: Set[str] = set()
        self.sequence = 0
        self.skipped = 0

    def element_id(self, node: DOMNode, depth: int) -> str:
        self.sequence += 1
        suffix = node.element_id or (node.class_names[0] if node.class_names else str(self.sequence))
        candidate = f"{node.tag_name}-{depth}-{suffix}"
        if candidate in self.seen_ids:
            candidate = f"{candidate}-{self.sequence}"
        self.seen_ids.add(candidate)
        return candidate

    def visit_children(self, parent: DOMNode, depth: int) -> List[AnalyzedElement]:
        if depth >= self.config.max_depth:
            return []

        results = []
        for node in parent.children:
            if node.ignored:
                self.skipped += 1
                continue
            geometry = self.measurer.measure_geometry(node)
            visible = self.measurer.is_visible(node, geometry)
            if self.config.ignore_invisible_elements and not visible:
                self.skipped += 1
                continue

            raw = self.measurer.read_style(node)
            element_id = self.element_id(node, depth)
            children = self.visit_children(node, depth + 1)
            text = self.measurer.get_text_content(node)
            results.append(AnalyzedElement(
                id=element_id,
                tag_name=node.tag_name,
                geometry=geometry,
                style=style_extractor.extract(raw),
                children=tuple(children),
                text_content=text or None,
                is_visible=visible,
                element_type=classify(
                    node.tag_name,
                    node.class_names,
                    raw.get("display"),
                    node.role,
                    normalize_text(node.text_content),
                ),
                class_names=tuple(node.class_names),
            ))
        return results


class TreeAnalyzer:
    def __init__(self, surface: RenderSurface, config: Optional[AnalysisConfig] = None):
        self.surface = surface
        self.config = config or AnalysisConfig()

    async def analyze(self, root: Any, config: Optional[AnalysisConfig] = None) -> AnalysisResult:
        config = config or self.config
        started = time.perf_counter()

        await self.surface.validate_environment()

        handle = await self.surface.resolve(root)
        if handle is None:
            raise ElementNotFoundError(
                "Component element not found or not yet rendered",
                context={"root": repr(root), "component_name": config.component_name},
            )

        ticks = await self.wait_for_stable(handle, config.timeout)

        host = await self.surface.host_preferences()
        measurer = DOMMeasurer(
            measurement_threshold=config.measurement_threshold,
            viewport=(host.viewport_width, host.viewport_height),
            viewport_margin=config.viewport_margin,
        )
        snapshot = await self.surface.capture(handle, config.ignore_elements)

        analysis_pass = _AnalysisPass(measurer, config)
        elements = analysis_pass.visit_children(snapshot, depth=0)

        metadata = ComponentMetadata(
            complexity=determine_complexity(snapshot),
            responsive=measurer.analyze_responsive_behavior(snapshot)["is_responsive"],
            component_name=config.component_name,
            analysis_time=round((time.perf_counter() - started) * 1000.0, 3),
        )
        result = AnalysisResult(
            elements=tuple(elements),
            layout=analyze_layout(snapshot.style),
            metadata=metadata,
        )
        logger.log(
            config.debug.log_level,
            "Analyzed <%s>: %d top-level elements, %d skipped, %s, stable after %d ticks, %.1fms",
            snapshot.tag_name,
            len(elements),
            analysis_pass.skipped,
            metadata.complexity.value,
            ticks,
            metadata.analysis_time,
        )
        return result

    async def wait_for_stable(self, handle: Any, timeout: float) -> int:
        """Re-measure the root once per frame until two reads agree within 1 unit.

        Returns the number of ticks waited; raises AnalysisTimeoutError once
        more than ``timeout`` ms have elapsed.
        """
        start = self.surface.now()
        last = await self.surface.read_geometry(handle)
        ticks = 0
        while True:
            await self.surface.next_frame()
            ticks += 1
            elapsed = self.surface.now() - start
            if elapsed > timeout:
                raise AnalysisTimeoutError(
                    f"Component ready timeout after {elapsed:.0f}ms",
                    timeout=timeout,
                    elapsed=elapsed,
                    context={"ticks": ticks, "last_geometry": last.to_dict()},
                )
            current = await self.surface.read_geometry(handle)
            if _is_stable(last, current):
                return ticks
            last = current


def _is_stable(previous: Geometry, current: Geometry) -> bool:
    return (
        abs(current.width - previous.width) < STABILITY_TOLERANCE
        and abs(current.height - previous.height) < STABILITY_TOLERANCE
        and current.width > 0
        and current.height > 0
    )

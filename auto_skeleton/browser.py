"""
Playwright-backed render surface: reads a live Chromium page.
"""

import time
from typing import Any, Dict, Optional, Sequence

from playwright.async_api import ElementHandle, Error, Page

from .errors import ElementNotFoundError, RenderEnvironmentError
from .style_extractor import CAPTURE_PROPS
from .surface import RenderSurface
from .types import DOMNode, Geometry, HostPreferences

MAX_CAPTURE_DEPTH = 64

ENVIRONMENT_SCRIPT = """() => {
    const issues = [];
    if (typeof window.getComputedStyle !== 'function') issues.push('getComputedStyle API not available');
    if (typeof Element.prototype.getBoundingClientRect !== 'function') issues.push('getBoundingClientRect API not available');
    if (typeof window.requestAnimationFrame !== 'function') issues.push('requestAnimationFrame API not available');
    return issues;
}"""

GEOMETRY_SCRIPT = """(el) => {
    if (!el.isConnected) return null;
    const r = el.getBoundingClientRect();
    return {width: r.width, height: r.height, x: r.left, y: r.top};
}"""

CAPTURE_SCRIPT = """(el, args) => {
    const [props, ignore, maxDepth] = args;
    const SKIP = new Set(['SCRIPT', 'STYLE', 'NOSCRIPT', 'TEMPLATE', 'LINK', 'META']);
    const matchesAny = (node) => ignore.some(sel => {
        try { return node.matches(sel); } catch (e) { return false; }
    });
    const walk = (node, depth) => {
        const computed = window.getComputedStyle(node);
        const style = {};
        props.forEach(p => { style[p] = computed.getPropertyValue(p); });
        const r = node.getBoundingClientRect();
        const children = depth >= maxDepth ? [] : Array.from(node.children)
            .filter(c => !SKIP.has(c.tagName))
            .map(c => walk(c, depth + 1));
        return {
            tag: node.tagName.toLowerCase(),
            id: node.id || '',
            classes: Array.from(node.classList),
            role: node.getAttribute('role'),
            text: node.textContent || '',
            bbox: {width: r.width, height: r.height, x: r.left, y: r.top},
            style: style,
            ignored: matchesAny(node),
            children: children,
        };
    };
    return walk(el, 0);
}"""

NEXT_FRAME_SCRIPT = "() => new Promise(resolve => requestAnimationFrame(() => resolve(performance.now())))"

HOST_SCRIPT = """() => ({
    reduced_motion: window.matchMedia('(prefers-reduced-motion: reduce)').matches,
    dark_scheme: window.matchMedia('(prefers-color-scheme: dark)').matches,
    width: window.innerWidth,
    height: window.innerHeight,
})"""


class PlaywrightSurface(RenderSurface):
    def __init__(self, page: Page, max_capture_depth: int = MAX_CAPTURE_DEPTH):
        self.page = page
        self.max_capture_depth = max_capture_depth

    async def validate_environment(self) -> None:
        try:
            issues = await self.page.evaluate(ENVIRONMENT_SCRIPT)
        except Error as exc:
            raise RenderEnvironmentError(f"Page is not available for measurement: {exc}") from exc
        if issues:
            raise RenderEnvironmentError("; ".join(issues), context={"issues": issues})

    async def resolve(self, root: Any) -> Optional[ElementHandle]:
        if root is None:
            return None
        try:
            handle = await self.page.query_selector(root) if isinstance(root, str) else root
            if handle is None:
                return None
            connected = await handle.evaluate("el => el.isConnected")
        except Error as exc:
            raise ElementNotFoundError(f"Could not resolve {root!r}: {exc}", context={"root": repr(root)}) from exc
        return handle if connected else None

    async def read_geometry(self, handle: ElementHandle) -> Geometry:
        try:
            box = await handle.evaluate(GEOMETRY_SCRIPT)
        except Error as exc:
            raise ElementNotFoundError(f"Element vanished during measurement: {exc}") from exc
        if box is None:
            raise ElementNotFoundError("Element was detached during measurement")
        return Geometry.from_dict(box)

    async def capture(self, handle: ElementHandle, ignore_selectors: Sequence[str] = ()) -> DOMNode:
        try:
            data: Dict[str, Any] = await handle.evaluate(
                CAPTURE_SCRIPT, [CAPTURE_PROPS, list(ignore_selectors), self.max_capture_depth]
            )
        except Error as exc:
            raise ElementNotFoundError(f"Element vanished during capture: {exc}") from exc
        return DOMNode.from_dict(data)

    async def next_frame(self) -> None:
        try:
            await self.page.evaluate(NEXT_FRAME_SCRIPT)
        except Error as exc:
            raise RenderEnvironmentError(f"Page closed while waiting for a frame: {exc}") from exc

    def now(self) -> float:
        return time.monotonic() * 1000.0

    async def host_preferences(self) -> HostPreferences:
        try:
            data = await self.page.evaluate(HOST_SCRIPT)
        except Error as exc:
            raise RenderEnvironmentError(f"Could not read host preferences: {exc}") from exc
        return HostPreferences(
            prefers_reduced_motion=bool(data.get("reduced_motion")),
            prefers_dark_scheme=bool(data.get("dark_scheme")),
            viewport_width=float(data.get("width") or 0),
            viewport_height=float(data.get("height") or 0),
        )

"""
Render surfaces - the live environment the analyzer reads from.

A surface resolves the root handle, ticks animation frames, reads root
geometry while layout settles and captures the subtree into DOMNode records.
``StaticSurface`` serves pre-captured snapshots (and tests); the Playwright
backend lives in ``browser.py``.
"""

import asyncio
import copy
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from .errors import RenderEnvironmentError
from .types import DOMNode, Geometry, HostPreferences

DEFAULT_FRAME_MS = 1000.0 / 60.0

_COMPOUND_RE = re.compile(r"^(?P<tag>\*|[a-zA-Z][\w-]*)?(?P<rest>(?:[#.][\w-]+|\[[^\]]+\])*)$")
_PART_RE = re.compile(r"([#.])([\w-]+)|\[([^\]=\s]+)\s*(?:=\s*['\"]?([^'\"\]]*)['\"]?)?\]")


def matches_selector(node: DOMNode, selector: str) -> bool:
    """Match a simple compound selector (``tag#id.class[attr=value]``, comma lists allowed)."""
    for part in (s.strip() for s in selector.split(",")):
        if part and _matches_compound(node, part):
            return True
    return False


def _matches_compound(node: DOMNode, selector: str) -> bool:
    match = _COMPOUND_RE.match(selector)
    if not match:
        return False
    tag = match.group("tag")
    if tag and tag != "*" and tag.lower() != node.tag_name:
        return False
    classes = {c.lower() for c in node.class_names}
    for kind, name, attr, value in _PART_RE.findall(match.group("rest")):
        if kind == "#" and name != node.element_id:
            return False
        if kind == "." and name.lower() not in classes:
            return False
        if attr:
            actual = _attribute(node, attr)
            if actual is None:
                return False
            if value and actual != value:
                return False
    return True


def _attribute(node: DOMNode, name: str) -> Optional[str]:
    if name == "id":
        return node.element_id or None
    if name == "class":
        return " ".join(node.class_names) or None
    if name == "role":
        return node.role
    return None


def mark_ignored(root: DOMNode, selectors: Iterable[str]) -> DOMNode:
    selectors = [s for s in selectors if s]
    if not selectors:
        return root
    for node in root.iter():
        if any(matches_selector(node, s) for s in selectors):
            node.ignored = True
    return root


class RenderSurface(ABC):
    @abstractmethod
    async def validate_environment(self) -> None:
        """Raise RenderEnvironmentError when geometry/style reads are impossible."""

    @abstractmethod
    async def resolve(self, root: Any) -> Optional[Any]:
        """Return a live handle for ``root`` or None when it is absent."""

    @abstractmethod
    async def read_geometry(self, handle: Any) -> Geometry:
        ...

    @abstractmethod
    async def capture(self, handle: Any, ignore_selectors: Sequence[str] = ()) -> DOMNode:
        ...

    @abstractmethod
    async def next_frame(self) -> None:
        """Suspend until the next animation-frame tick."""

    @abstractmethod
    def now(self) -> float:
        """Monotonic clock in milliseconds."""

    @abstractmethod
    async def host_preferences(self) -> HostPreferences:
        ...


GeometryScript = Union[Sequence[Geometry], Callable[[int], Geometry]]


class StaticSurface(RenderSurface):
    """In-memory surface over a captured DOMNode tree with a virtual frame clock.

    ``frames`` scripts the root geometry per tick: a sequence (index = ticks
    elapsed, last entry repeats) or a callable taking the tick number. Without
    it the root's captured geometry is returned on every read.
    """

    def __init__(
        self,
        root: Optional[DOMNode],
        viewport: Sequence[float] = (1440, 900),
        frames: Optional[GeometryScript] = None,
        frame_ms: float = DEFAULT_FRAME_MS,
        available: bool = True,
        reduced_motion: bool = False,
        dark_scheme: bool = False,
    ):
        self.root = root
        self.viewport = (float(viewport[0]), float(viewport[1]))
        if frames is not None and not callable(frames):
            frames = list(frames)
            if not frames:
                raise ValueError("frames must hold at least one geometry")
        self.frames = frames
        self.frame_ms = frame_ms
        self.available = available
        self.reduced_motion = reduced_motion
        self.dark_scheme = dark_scheme
        self.ticks = 0
        self.reads = 0
        self._clock = 0.0

    async def validate_environment(self) -> None:
        if not self.available:
            raise RenderEnvironmentError("No rendering surface available for measurement")

    async def resolve(self, root: Any) -> Optional[DOMNode]:
        if root is None:
            return None
        if isinstance(root, DOMNode):
            return root
        if isinstance(root, str):
            if self.root is None:
                return None
            for node in self.root.iter():
                if matches_selector(node, root):
                    return node
            return None
        return None

    async def read_geometry(self, handle: DOMNode) -> Geometry:
        self.reads += 1
        if self.frames is None:
            g = handle.geometry
            return Geometry(g.width, g.height, g.x, g.y)
        if callable(self.frames):
            return self.frames(self.ticks)
        return self.frames[min(self.ticks, len(self.frames) - 1)]

    async def capture(self, handle: DOMNode, ignore_selectors: Sequence[str] = ()) -> DOMNode:
        snapshot = copy.deepcopy(handle)
        return mark_ignored(snapshot, ignore_selectors)

    async def next_frame(self) -> None:
        self.ticks += 1
        self._clock += self.frame_ms
        await asyncio.sleep(0)

    def now(self) -> float:
        return self._clock

    async def host_preferences(self) -> HostPreferences:
        return HostPreferences(
            prefers_reduced_motion=self.reduced_motion,
            prefers_dark_scheme=self.dark_scheme,
            viewport_width=self.viewport[0],
            viewport_height=self.viewport[1],
        )

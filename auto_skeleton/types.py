"""
Data model shared by the analyzer and the generator.
"""

import html
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

DEFAULT_ANIMATION_DURATION = 1500
DEFAULT_ANALYSIS_TIMEOUT = 5000
DEFAULT_MAX_DEPTH = 10
DEFAULT_MEASUREMENT_THRESHOLD = 5
DEFAULT_CACHE_SIZE = 50
VIEWPORT_MARGIN = 100

Dimension = Union[int, float, str]


class ElementType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    BUTTON = "button"
    INPUT = "input"
    CONTAINER = "container"
    ICON = "icon"
    AVATAR = "avatar"
    CARD = "card"
    LIST = "list"
    UNKNOWN = "unknown"


class Shape(str, Enum):
    RECTANGULAR = "rectangular"
    CIRCULAR = "circular"
    ROUNDED = "rounded"


class ContainerType(str, Enum):
    FLEX = "flex"
    GRID = "grid"
    BLOCK = "block"
    INLINE_BLOCK = "inline-block"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class AnimationType(str, Enum):
    SHIMMER = "shimmer"
    PULSE = "pulse"
    WAVE = "wave"
    FADE = "fade"
    NONE = "none"


class ThemeType(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


ANIMATION_DIRECTIONS = ("normal", "reverse", "ltr", "rtl")


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class Geometry:
    width: float
    height: float
    x: float = 0.0
    y: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height, "x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Geometry":
        data = data or {}
        return cls(
            width=float(data.get("width") or 0.0),
            height=float(data.get("height") or 0.0),
            x=float(data.get("x", data.get("left")) or 0.0),
            y=float(data.get("y", data.get("top")) or 0.0),
        )


@dataclass(frozen=True)
class VisualStyle:
    background_color: Optional[str] = None
    border_radius: Optional[str] = None
    margin: Optional[str] = None
    padding: Optional[str] = None
    font_size: Optional[str] = None
    font_weight: Optional[str] = None
    line_height: Optional[str] = None
    display: Optional[str] = None
    position: Optional[str] = None
    flex_direction: Optional[str] = None
    flex_wrap: Optional[str] = None
    justify_content: Optional[str] = None
    align_items: Optional[str] = None
    grid_template_columns: Optional[str] = None
    gap: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class DOMNode:
    """Plain-data capture of one rendered element and its subtree."""

    tag_name: str
    geometry: Geometry = field(default_factory=lambda: Geometry(0.0, 0.0))
    style: Dict[str, str] = field(default_factory=dict)
    element_id: str = ""
    class_names: List[str] = field(default_factory=list)
    role: Optional[str] = None
    text_content: str = ""
    children: List["DOMNode"] = field(default_factory=list)
    ignored: bool = False

    def __post_init__(self) -> None:
        self.tag_name = (self.tag_name or "").lower()

    def iter(self) -> Iterator["DOMNode"]:
        yield self
        for child in self.children:
            yield from child.iter()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag_name,
            "id": self.element_id,
            "classes": list(self.class_names),
            "role": self.role,
            "text": self.text_content,
            "bbox": self.geometry.to_dict(),
            "style": dict(self.style),
            "ignored": self.ignored,
            "children": [c.to_dict() for c in self.children],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DOMNode":
        classes = data.get("classes") or []
        if isinstance(classes, str):
            classes = classes.split()
        return cls(
            tag_name=data.get("tag") or data.get("tag_name") or "div",
            geometry=Geometry.from_dict(data.get("bbox") or data.get("geometry")),
            style=dict(data.get("style") or {}),
            element_id=data.get("id") or "",
            class_names=[c for c in classes if c],
            role=data.get("role"),
            text_content=data.get("text") or "",
            children=[cls.from_dict(c) for c in data.get("children") or []],
            ignored=bool(data.get("ignored", False)),
        )


@dataclass(frozen=True)
class AnalyzedElement:
    id: str
    tag_name: str
    geometry: Geometry
    style: VisualStyle
    children: Tuple["AnalyzedElement", ...] = ()
    text_content: Optional[str] = None
    is_visible: bool = True
    element_type: ElementType = ElementType.UNKNOWN
    class_names: Tuple[str, ...] = ()

    def walk(self) -> Iterator["AnalyzedElement"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tag_name": self.tag_name,
            "geometry": self.geometry.to_dict(),
            "style": self.style.to_dict(),
            "children": [c.to_dict() for c in self.children],
            "text_content": self.text_content,
            "is_visible": self.is_visible,
            "element_type": self.element_type.value,
            "class_names": list(self.class_names),
        }


@dataclass(frozen=True)
class LayoutInfo:
    container_type: ContainerType = ContainerType.BLOCK
    direction: Optional[str] = None
    wrap: Optional[bool] = None
    gap: float = 0
    align_items: Optional[str] = None
    justify_content: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class ComponentMetadata:
    complexity: Complexity
    responsive: bool = False
    component_name: Optional[str] = None
    analysis_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class AnalysisResult:
    elements: Tuple[AnalyzedElement, ...]
    layout: LayoutInfo
    metadata: ComponentMetadata

    def walk(self) -> Iterator[AnalyzedElement]:
        for element in self.elements:
            yield from element.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elements": [e.to_dict() for e in self.elements],
            "layout": self.layout.to_dict(),
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class AnimationConfig:
    """Animation settings; ``None`` fields are left to lower-priority defaults when merged."""

    type: AnimationType = AnimationType.SHIMMER
    duration: Optional[int] = None
    delay: Optional[int] = None
    direction: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, AnimationType):
            object.__setattr__(self, "type", AnimationType(self.type))

    def merge(self, other: Union[None, "AnimationConfig", Dict[str, Any]]) -> "AnimationConfig":
        if other is None:
            return self
        if isinstance(other, AnimationConfig):
            updates = {f.name: getattr(other, f.name) for f in fields(other)}
        else:
            updates = dict(other)
        updates = {k: v for k, v in updates.items() if v is not None}
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


BUILTIN_ANIMATION = AnimationConfig(
    type=AnimationType.SHIMMER, duration=DEFAULT_ANIMATION_DURATION, delay=0, direction="normal"
)


@dataclass(frozen=True)
class ThemeConfig:
    type: ThemeType = ThemeType.LIGHT
    base_color: Optional[str] = None
    highlight_color: Optional[str] = None
    border_radius: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, ThemeType):
            object.__setattr__(self, "type", ThemeType(self.type))

    def merge(self, other: Union[None, "ThemeConfig", Dict[str, Any]]) -> "ThemeConfig":
        if other is None:
            return self
        if isinstance(other, ThemeConfig):
            updates = {f.name: getattr(other, f.name) for f in fields(other)}
        else:
            updates = dict(other)
        updates = {k: v for k, v in updates.items() if v is not None}
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class PlaceholderConfig:
    type: ElementType
    width: Dimension
    height: Dimension
    shape: Shape = Shape.RECTANGULAR
    lines: Optional[int] = None
    animation: AnimationConfig = BUILTIN_ANIMATION
    style: Dict[str, Any] = field(default_factory=dict)
    element_id: Optional[str] = None
    line_height: Optional[float] = None
    children: List["PlaceholderConfig"] = field(default_factory=list)

    def walk(self) -> Iterator["PlaceholderConfig"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self, include_children: bool = True) -> Dict[str, Any]:
        data = {
            "element_id": self.element_id,
            "type": self.type.value,
            "width": self.width,
            "height": self.height,
            "shape": self.shape.value,
            "animation": self.animation.to_dict(),
            "style": dict(self.style),
        }
        if self.lines is not None:
            data["lines"] = self.lines
        if self.line_height is not None:
            data["line_height"] = self.line_height
        if include_children and self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


UNITLESS_PROPS = {"opacity", "z-index", "flex-grow", "flex-shrink", "font-weight", "line-height", "order"}


def css_value(prop: str, value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        if prop in UNITLESS_PROPS:
            return f"{value:g}"
        return f"{round(value, 2):g}px"
    return str(value)


@dataclass
class SkeletonNode:
    """Renderable placeholder node."""

    tag: str = "div"
    class_name: str = ""
    style: Dict[str, Any] = field(default_factory=dict)
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["SkeletonNode"] = field(default_factory=list)
    text: str = ""

    def iter(self) -> Iterator["SkeletonNode"]:
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, class_name: str) -> List["SkeletonNode"]:
        return [n for n in self.iter() if class_name in n.class_name.split()]

    def style_text(self) -> str:
        return "; ".join(f"{k}: {css_value(k, v)}" for k, v in self.style.items() if v is not None)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"tag": self.tag, "class": self.class_name, "style": dict(self.style)}
        if self.attributes:
            data["attributes"] = dict(self.attributes)
        if self.text:
            data["text"] = self.text
        data["children"] = [c.to_dict() for c in self.children]
        return data

    def to_html(self, indent: int = 0) -> str:
        pad = "  " * indent
        attrs = []
        if self.class_name:
            attrs.append(f'class="{html.escape(self.class_name)}"')
        style = self.style_text()
        if style:
            attrs.append(f'style="{html.escape(style)}"')
        for key, value in self.attributes.items():
            attrs.append(f'{key}="{html.escape(str(value))}"')
        open_tag = f"<{self.tag}" + ("" if not attrs else " " + " ".join(attrs)) + ">"
        if not self.children:
            return f"{pad}{open_tag}{html.escape(self.text)}</{self.tag}>"
        inner = "\n".join(c.to_html(indent + 1) for c in self.children)
        return f"{pad}{open_tag}\n{inner}\n{pad}</{self.tag}>"


@dataclass(frozen=True)
class GenerationMetadata:
    generation_time: float
    complexity: int
    element_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GenerationResult:
    renderable_tree: SkeletonNode
    configs: Tuple[PlaceholderConfig, ...]
    metadata: GenerationMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configs": [c.to_dict(include_children=False) for c in self.configs],
            "metadata": self.metadata.to_dict(),
            "tree": self.renderable_tree.to_dict(),
        }


@dataclass(frozen=True)
class HostPreferences:
    prefers_reduced_motion: bool = False
    prefers_dark_scheme: bool = False
    viewport_width: float = 1440
    viewport_height: float = 900

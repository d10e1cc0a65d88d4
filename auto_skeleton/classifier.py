"""
Element classification - first matching rule wins.
"""

from typing import Iterable, Optional, Sequence, Union

from .types import ElementType

IMAGE_TAGS = {"img"}
INPUT_TAGS = {"input", "textarea", "select"}
CONTAINER_TAGS = {"div", "section", "article"}
LAYOUT_DISPLAYS = {"flex", "grid"}

CLASS_RULES = [
    (ElementType.AVATAR, ["avatar", "profile", "user-image"]),
    (ElementType.ICON, ["icon", "svg-icon", "fa-", "icon-"]),
    (ElementType.CARD, ["card", "panel", "tile"]),
    (ElementType.LIST, ["list", "menu", "nav"]),
]


def split_classes(class_names: Union[None, str, Iterable[str]]) -> Sequence[str]:
    if not class_names:
        return []
    if isinstance(class_names, str):
        return class_names.split()
    tokens = []
    for name in class_names:
        tokens.extend(str(name).split())
    return tokens


def has_any_class(class_names: Union[None, str, Iterable[str]], patterns: Iterable[str]) -> bool:
    tokens = [t.lower() for t in split_classes(class_names)]
    return any(p.lower() in token for p in patterns for token in tokens)


def classify(
    tag: str,
    class_names: Union[None, str, Iterable[str]] = None,
    display: Optional[str] = None,
    role: Optional[str] = None,
    text_content: Optional[str] = None,
) -> ElementType:
    tag = (tag or "").lower()
    display = (display or "").strip().lower()

    if tag in IMAGE_TAGS:
        return ElementType.IMAGE
    if tag == "button" or (role or "").lower() == "button":
        return ElementType.BUTTON
    if tag in INPUT_TAGS:
        return ElementType.INPUT

    for element_type, patterns in CLASS_RULES:
        if has_any_class(class_names, patterns):
            return element_type

    if (text_content or "").strip() and display not in LAYOUT_DISPLAYS:
        return ElementType.TEXT

    if display in LAYOUT_DISPLAYS or tag in CONTAINER_TAGS:
        return ElementType.CONTAINER

    return ElementType.UNKNOWN

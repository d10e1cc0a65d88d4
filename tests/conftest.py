"""Shared fixtures: in-memory DOM trees for the StaticSurface."""

import pytest

from auto_skeleton.surface import StaticSurface
from auto_skeleton.types import DOMNode, Geometry

VISIBLE = {"display": "block", "visibility": "visible", "opacity": "1"}


def build_node(
    tag,
    width=0,
    height=0,
    x=0,
    y=0,
    style=None,
    children=None,
    text="",
    classes=None,
    element_id="",
    role=None,
):
    merged = dict(VISIBLE)
    merged.update(style or {})
    return DOMNode(
        tag_name=tag,
        geometry=Geometry(width, height, x, y),
        style=merged,
        element_id=element_id,
        class_names=list(classes or []),
        role=role,
        text_content=text,
        children=list(children or []),
    )


@pytest.fixture
def make_node():
    return build_node


@pytest.fixture
def card_root(make_node):
    """Heading + image scenario: an 80x20 h1 and a 320x180 img."""
    return make_node(
        "div",
        600,
        400,
        element_id="app",
        children=[
            make_node("h1", 80, 20, y=0, text="Title", style={"font-size": "20px"}),
            make_node("img", 320, 180, y=30),
        ],
    )


@pytest.fixture
def card_surface(card_root):
    return StaticSurface(card_root)

"""Tests for SkeletonGenerator: configs, overrides, motion and tree assembly."""

import pytest

from auto_skeleton.analyzer import TreeAnalyzer
from auto_skeleton.config import GeneratorConfig, SkeletonOptions
from auto_skeleton.errors import GenerationFailedError
from auto_skeleton.generator import SkeletonGenerator, error_tree, fallback_tree, text_placeholder
from auto_skeleton.surface import StaticSurface
from auto_skeleton.types import (
    AnalysisResult,
    AnalyzedElement,
    AnimationConfig,
    AnimationType,
    Complexity,
    ComponentMetadata,
    ContainerType,
    ElementType,
    Geometry,
    HostPreferences,
    LayoutInfo,
    Shape,
    ThemeConfig,
    VisualStyle,
)


async def analyze_root(root, **surface_kwargs):
    surface = StaticSurface(root, **surface_kwargs)
    return await TreeAnalyzer(surface).analyze(root), surface


def single(element_type, width, height, **kwargs):
    element = AnalyzedElement(
        id=kwargs.pop("id", "el-0-1"),
        tag_name=kwargs.pop("tag_name", "div"),
        geometry=Geometry(width, height),
        style=kwargs.pop("style", VisualStyle()),
        element_type=element_type,
        **kwargs,
    )
    return AnalysisResult(
        elements=(element,),
        layout=LayoutInfo(),
        metadata=ComponentMetadata(complexity=Complexity.SIMPLE),
    )


class TestScenarios:
    """End-to-end generation over analyzed trees."""

    @pytest.mark.asyncio
    async def test_heading_and_image(self, card_root):
        analysis, _ = await analyze_root(card_root)
        result = SkeletonGenerator().generate(analysis)
        text, image = result.configs
        assert text.type == ElementType.TEXT
        assert text.width == 80
        assert text.height == pytest.approx(24)
        assert text.lines == 1
        assert image.type == ElementType.IMAGE
        assert (image.width, image.height) == (320, 180)
        assert image.shape == Shape.ROUNDED
        assert result.metadata.element_count == len(result.configs) == 2
        assert result.metadata.complexity == 4

    @pytest.mark.asyncio
    async def test_three_line_text(self, make_node):
        root = make_node("div", 400, 300, children=[
            make_node("p", 100, 36, text="abcdefghij" * 4, style={"font-size": "10px"}),
        ])
        analysis, _ = await analyze_root(root)
        result = SkeletonGenerator().generate(analysis)
        config = result.configs[0]
        assert config.lines == 3
        lines = result.renderable_tree.find_all("auto-skeleton-line")
        assert len(lines) == config.lines
        assert [line.style["width"] for line in lines] == ["100%", "100%", "70%"]
        assert all(line.style["height"] == pytest.approx(12) for line in lines)
        wrapper = result.renderable_tree.children[0]
        assert wrapper.style["gap"] == 4
        assert result.metadata.complexity == 1 + 3 + 1

    @pytest.mark.asyncio
    async def test_avatar_override(self, make_node):
        root = make_node("div", 400, 300, children=[
            make_node("avatar", 100, 60, style={"border-radius": "8px", "display": "inline-block"}),
        ])
        analysis, _ = await analyze_root(root)

        plain = SkeletonGenerator().generate(analysis)
        assert plain.configs[0].shape == Shape.ROUNDED

        options = SkeletonOptions(custom_overrides={".avatar": {"shape": "circular"}})
        overridden = SkeletonGenerator().generate(analysis, options)
        assert overridden.configs[0].shape == Shape.CIRCULAR
        node = overridden.renderable_tree.children[0]
        assert node.style["border-radius"] == "50%"

    @pytest.mark.asyncio
    async def test_reduced_motion(self, card_root):
        analysis, surface = await analyze_root(card_root, reduced_motion=True)
        host = await surface.host_preferences()
        options = SkeletonOptions(respect_user_motion=True)
        result = SkeletonGenerator().generate(analysis, options, host)
        assert all(c.animation.type == AnimationType.NONE for c in result.configs)
        assert all(n.style.get("animation") in (None, "none") for n in result.renderable_tree.iter())
        assert not result.renderable_tree.find_all("auto-skeleton-shimmer")

    @pytest.mark.asyncio
    async def test_reduced_motion_ignored_without_opt_in(self, card_root):
        analysis, surface = await analyze_root(card_root, reduced_motion=True)
        host = await surface.host_preferences()
        result = SkeletonGenerator().generate(analysis, SkeletonOptions(), host)
        assert all(c.animation.type == AnimationType.SHIMMER for c in result.configs)


class TestAnimationMerge:
    """Built-in <- instance <- options precedence."""

    def test_builtin_default(self):
        config = SkeletonGenerator().generate(single(ElementType.CONTAINER, 100, 40)).configs[0]
        assert config.animation == AnimationConfig(AnimationType.SHIMMER, 1500, 0, "normal")

    def test_instance_default_keeps_builtin_duration(self):
        generator = SkeletonGenerator(animation=AnimationConfig(type=AnimationType.WAVE))
        config = generator.generate(single(ElementType.CONTAINER, 100, 40)).configs[0]
        assert config.animation.type == AnimationType.WAVE
        assert config.animation.duration == 1500

    def test_options_preset_name(self):
        options = SkeletonOptions(animation="pulse")
        config = SkeletonGenerator().generate(single(ElementType.CONTAINER, 100, 40), options).configs[0]
        assert config.animation.type == AnimationType.PULSE
        assert config.animation.duration == 1200
        assert config.animation.delay == 0

    def test_options_partial_dict(self):
        options = SkeletonOptions(animation={"duration": 900})
        generator = SkeletonGenerator(animation=AnimationConfig(type=AnimationType.FADE))
        config = generator.generate(single(ElementType.CONTAINER, 100, 40), options).configs[0]
        assert config.animation.type == AnimationType.FADE
        assert config.animation.duration == 900


class TestOverrides:
    """Override key priority and merge semantics."""

    def test_id_beats_tag(self):
        analysis = single(ElementType.CONTAINER, 100, 40, id="section-0-hero", tag_name="section")
        options = SkeletonOptions(custom_overrides={
            "section": {"height": 11},
            "section-0-hero": {"height": 99},
        })
        assert SkeletonGenerator().generate(analysis, options).configs[0].height == 99

    def test_dot_tag_beats_tag(self):
        analysis = single(ElementType.CONTAINER, 100, 40, tag_name="section")
        options = SkeletonOptions(custom_overrides={"section": {"height": 11}, ".section": {"height": 22}})
        assert SkeletonGenerator().generate(analysis, options).configs[0].height == 22

    def test_type_class_key(self):
        analysis = single(ElementType.CONTAINER, 100, 40)
        options = SkeletonOptions(custom_overrides={".auto-skeleton-container": {"width": "50%"}})
        assert SkeletonGenerator().generate(analysis, options).configs[0].width == "50%"

    def test_no_match_leaves_config(self):
        analysis = single(ElementType.CONTAINER, 100, 40)
        options = SkeletonOptions(custom_overrides={"span": {"width": 1}})
        config = SkeletonGenerator().generate(analysis, options).configs[0]
        assert (config.width, config.height) == (100, 40)

    def test_partial_animation_override(self):
        analysis = single(ElementType.IMAGE, 320, 180, tag_name="img")
        options = SkeletonOptions(custom_overrides={"img": {"animation": {"duration": 3000}}})
        config = SkeletonGenerator().generate(analysis, options).configs[0]
        assert config.animation.type == AnimationType.SHIMMER
        assert config.animation.duration == 3000

    def test_unknown_field_fails_generation(self):
        analysis = single(ElementType.CONTAINER, 100, 40)
        options = SkeletonOptions(custom_overrides={"div": {"colour": "red"}})
        with pytest.raises(GenerationFailedError) as info:
            SkeletonGenerator().generate(analysis, options)
        assert info.value.generation_time >= 0
        assert isinstance(info.value.__cause__, ValueError)


class TestSizing:
    """Type enhancement and min sizes."""

    def test_min_width_and_height(self):
        options = SkeletonOptions(min_width=60, min_height=30)
        config = SkeletonGenerator().generate(single(ElementType.CONTAINER, 30, 12), options).configs[0]
        assert (config.width, config.height) == (60, 30)

    def test_min_width_skips_relative(self):
        options = SkeletonOptions(min_width=60)
        config = SkeletonGenerator().generate(single(ElementType.CONTAINER, 0, 12), options).configs[0]
        assert config.width == "100%"

    @pytest.mark.asyncio
    async def test_min_sizes_keep_avatar_square(self, make_node):
        root = make_node("div", 400, 300, children=[make_node("div", 30, 30, classes=["avatar"])])
        analysis, _ = await analyze_root(root)
        options = SkeletonOptions(min_width=60, min_height=10)
        config = SkeletonGenerator().generate(analysis, options).configs[0]
        assert config.type == ElementType.AVATAR
        assert (config.width, config.height) == (30, 30)
        assert config.shape == Shape.CIRCULAR

    def test_zero_height_image_gets_wide_ratio(self):
        config = SkeletonGenerator().generate(single(ElementType.IMAGE, 320, 0)).configs[0]
        assert (config.width, config.height) == (320, 180)

    def test_circular_image_stays_circular(self):
        analysis = single(ElementType.IMAGE, 64, 64, style=VisualStyle(border_radius="50%"))
        assert SkeletonGenerator().generate(analysis).configs[0].shape == Shape.CIRCULAR

    def test_padding_always_zero(self):
        analysis = single(ElementType.CONTAINER, 100, 40,
                          style=VisualStyle(padding="16px", position="relative", margin="8px 0"))
        style = SkeletonGenerator().generate(analysis).configs[0].style
        assert style["padding"] == "0"
        assert style["position"] == "static"
        assert style["margin"] == "8px 0"


class TestHierarchy:
    """Nested configs for grouping elements."""

    @pytest.fixture
    def card_analysis_root(self, make_node):
        return make_node("div", 600, 400, children=[
            make_node("div", 300, 200, classes=["card"], children=[
                make_node("h3", 200, 24, text="Heading", style={"font-size": "20px"}),
                make_node("p", 200, 40, text="Some supporting text"),
            ]),
        ])

    @pytest.mark.asyncio
    async def test_preserved(self, card_analysis_root):
        analysis, _ = await analyze_root(card_analysis_root)
        result = SkeletonGenerator().generate(analysis)
        card = result.configs[0]
        assert card.type == ElementType.CARD
        assert len(card.children) == 2
        assert [c.type for c in result.configs] == [ElementType.CARD, ElementType.TEXT, ElementType.TEXT]
        assert result.metadata.element_count == 3
        group = result.renderable_tree.children[0]
        assert "auto-skeleton-group" in group.class_name.split()
        assert len(group.children) == 2

    @pytest.mark.asyncio
    async def test_flat(self, card_analysis_root):
        analysis, _ = await analyze_root(card_analysis_root)
        generator = SkeletonGenerator(config=GeneratorConfig(preserve_hierarchy=False))
        result = generator.generate(analysis)
        assert len(result.configs) == 1
        assert result.configs[0].children == []


class TestTree:
    """Renderable tree assembly and theming."""

    def test_root_from_flex_layout(self):
        analysis = AnalysisResult(
            elements=single(ElementType.CONTAINER, 100, 40).elements,
            layout=LayoutInfo(container_type=ContainerType.FLEX, direction="column", gap=12),
            metadata=ComponentMetadata(complexity=Complexity.SIMPLE),
        )
        tree = SkeletonGenerator().generate(analysis).renderable_tree
        assert tree.class_name == "auto-skeleton-root"
        assert tree.style["display"] == "flex"
        assert tree.style["flex-direction"] == "column"
        assert tree.style["gap"] == 12
        assert tree.style["width"] == "100%"
        assert tree.attributes["aria-busy"] == "true"
        html = tree.to_html()
        assert 'class="auto-skeleton-root"' in html
        assert "gap: 12px" in html

    def test_leaf_paint(self):
        tree = SkeletonGenerator().generate(single(ElementType.CONTAINER, 100, 40)).renderable_tree
        leaf = tree.children[0]
        assert leaf.class_name.split() == ["auto-skeleton-element", "auto-skeleton-container", "auto-skeleton-shimmer"]
        assert leaf.style["background-color"] == "#e0e0e0"
        assert leaf.style["border-radius"] == "4px"
        assert leaf.style["animation"] == "auto-skeleton-shimmer 1500ms infinite normal"
        assert leaf.attributes["data-element-id"] == "el-0-1"

    def test_dark_and_custom_radius(self):
        generator = SkeletonGenerator(theme=ThemeConfig(type="dark", border_radius=12))
        analysis = single(ElementType.IMAGE, 320, 180, tag_name="img")
        leaf = generator.generate(analysis).renderable_tree.children[0]
        assert leaf.style["background-color"] == "#2d2d2d"
        assert leaf.style["border-radius"] == "12px"

    def test_auto_theme_follows_host(self):
        generator = SkeletonGenerator(theme=ThemeConfig(type="auto"))
        host = HostPreferences(prefers_dark_scheme=True)
        leaf = generator.generate(single(ElementType.CONTAINER, 100, 40), host=host).renderable_tree.children[0]
        assert leaf.style["background-color"] == "#2d2d2d"

    def test_options_theme_base_color(self):
        options = SkeletonOptions(theme={"base_color": "#abcdef"})
        leaf = SkeletonGenerator().generate(single(ElementType.CONTAINER, 100, 40), options).renderable_tree.children[0]
        assert leaf.style["background-color"] == "#abcdef"


class TestStaticTrees:
    """Fallback, error and standalone text placeholders."""

    def test_fallback(self):
        tree = fallback_tree(ThemeConfig(base_color="#111111"))
        assert tree.style["height"] == 200
        assert tree.style["background-color"] == "#111111"
        assert tree.attributes["aria-busy"] == "true"

    def test_error(self):
        tree = error_tree()
        assert tree.class_name == "auto-skeleton-error"
        assert tree.text == "Skeleton loading failed"

    def test_text_placeholder_last_line_width(self):
        tree = text_placeholder(3, last_line_width="60%")
        assert [c.style["width"] for c in tree.children] == ["100%", "100%", "60%"]
        single_line = text_placeholder(1, width=200)
        assert single_line.children == []
        assert single_line.style["width"] == 200

"""Tests for animation presets and transforms."""

import pytest

from auto_skeleton import animation
from auto_skeleton.types import AnimationConfig, AnimationType, ThemeConfig


class TestPresets:
    """Preset lookup and construction."""

    def test_get_preset(self):
        assert animation.get_preset("fast_shimmer").duration == 800
        assert animation.get_preset("Fast-Shimmer") is animation.FAST_SHIMMER
        assert animation.get_preset("sparkle") is None

    def test_reverse_shimmer(self):
        preset = animation.get_preset("reverse_shimmer")
        assert preset.type == AnimationType.SHIMMER
        assert preset.direction == "reverse"

    def test_resolve_animation(self):
        assert animation.resolve_animation("pulse") is animation.PULSE
        assert animation.resolve_animation({"duration": 10}) == {"duration": 10}
        assert animation.resolve_animation(None) is None
        with pytest.raises(ValueError):
            animation.resolve_animation("sparkle")

    def test_create_custom(self):
        custom = animation.create_custom("pulse", 900, delay=50)
        assert custom == AnimationConfig(AnimationType.PULSE, 900, 50, "normal")

    def test_element_type_and_loading_state(self):
        assert animation.animation_for_element_type("list") is animation.WAVE
        assert animation.animation_for_element_type("icon") is animation.FADE
        assert animation.animation_for_element_type("mystery") is animation.SHIMMER
        assert animation.loading_state_animation("error") is animation.SLOW_PULSE
        assert animation.loading_state_animation("initial") is animation.FAST_SHIMMER


class TestTransforms:
    """Pure duration/delay/type transforms."""

    def test_respect_user_preferences(self):
        assert animation.respect_user_preferences(animation.SHIMMER, True).type == AnimationType.NONE
        assert animation.respect_user_preferences(animation.SHIMMER, False) is animation.SHIMMER
        assert animation.respect_user_preferences(animation.SHIMMER, True, respect_reduced_motion=False).type \
            == AnimationType.SHIMMER

    @pytest.mark.parametrize("complexity,expected", [("simple", 1200), ("medium", 1500), ("complex", 1950)])
    def test_scale_for_complexity(self, complexity, expected):
        assert animation.scale_for_complexity(animation.SHIMMER, complexity).duration == expected

    def test_adapt_for_theme(self):
        assert animation.adapt_for_theme(animation.SHIMMER, ThemeConfig(type="dark")).duration == 1800
        assert animation.adapt_for_theme(animation.SHIMMER, ThemeConfig()).duration == 1500

    def test_staggered(self):
        assert animation.create_staggered(animation.SHIMMER, 3).delay == 300
        assert animation.create_staggered(AnimationConfig(delay=50), 2, 25).delay == 100

    def test_synchronized(self):
        synced = animation.create_synchronized([animation.PULSE, animation.WAVE, animation.FADE])
        assert [a.duration for a in synced] == [2000, 2000, 2000]
        assert animation.create_synchronized([]) == []

    def test_optimize_for_performance(self):
        assert animation.optimize_for_performance(animation.WAVE, 60).type == AnimationType.NONE
        reduced = animation.optimize_for_performance(animation.WAVE, 30)
        assert reduced.type == AnimationType.PULSE
        assert reduced.duration == 1000
        assert animation.optimize_for_performance(animation.WAVE, 10) is animation.WAVE

    def test_optimal_duration(self):
        assert animation.calculate_optimal_duration(animation.SHIMMER, 100, 100).duration == 1800
        assert animation.calculate_optimal_duration(animation.SHIMMER, 1000, 1000).duration == 2400

    @pytest.mark.parametrize("width,expected", [(500, 1200), (1000, 1500), (2000, 1800)])
    def test_responsive(self, width, expected):
        assert animation.create_responsive_animation(animation.SHIMMER, width).duration == expected

    def test_transition(self):
        result = animation.create_transition(animation.SHIMMER, animation.PULSE)
        assert result["intermediate"].type == AnimationType.FADE
        assert result["intermediate"].duration == 300
        assert result["final"] is animation.PULSE


class TestValidation:
    """validate_animation."""

    def test_valid(self):
        assert animation.validate_animation(animation.SHIMMER) == {"is_valid": True, "errors": []}
        assert animation.validate_animation(animation.NONE)["is_valid"]

    def test_invalid_direction_and_duration(self):
        result = animation.validate_animation({"type": "shimmer", "duration": 0, "direction": "sideways"})
        assert not result["is_valid"]
        assert len(result["errors"]) == 2

    def test_negative_values(self):
        result = animation.validate_animation({"type": "bounce", "duration": -1, "delay": -5})
        assert "Invalid animation type: bounce" in result["errors"]
        assert "Animation delay cannot be negative" in result["errors"]


class TestCss:
    """CSS output."""

    def test_animation_css(self):
        assert animation.animation_css(animation.SHIMMER) == "auto-skeleton-shimmer 1500ms infinite normal"
        assert animation.animation_css(animation.NONE) == "none"
        assert animation.animation_css(AnimationConfig(AnimationType.PULSE, 1200, 200, "rtl")) \
            == "auto-skeleton-pulse 1200ms 200ms infinite reverse"
        assert animation.animation_css(AnimationConfig(AnimationType.WAVE)) == "auto-skeleton-wave 1500ms infinite normal"

    def test_keyframes(self):
        css = animation.generate_css_keyframes("blink", {"0%": {"opacity": "1"}})
        assert css == "@keyframes blink {\n  0% {\n    opacity: 1;\n  }\n}"

    def test_stylesheet_covers_every_animated_type(self):
        sheet = animation.skeleton_stylesheet()
        for name in ["shimmer", "pulse", "wave", "fade"]:
            assert f"@keyframes auto-skeleton-{name}" in sheet
        assert "prefers-reduced-motion" in sheet

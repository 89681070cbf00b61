"""
Tests for filter settings and the Pillow filter chain
"""
import pytest
from PIL import Image

from imagen_studio.filters import applied_channels, apply_filters
from imagen_studio.schemas import FilterChannel, FilterSettings


def pixel(image):
    return image.getpixel((0, 0))


def solid(color, mode="RGB"):
    return Image.new(mode, (4, 4), color)


def assert_close(actual, expected, tolerance=1):
    assert all(abs(a - e) <= tolerance for a, e in zip(actual, expected)), (actual, expected)


class TestFilterSettings:
    """Tests for FilterSettings"""

    def test_defaults(self):
        filters = FilterSettings()

        assert (
            filters.brightness, filters.contrast, filters.saturate,
            filters.grayscale, filters.sepia, filters.invert,
        ) == (100, 100, 100, 0, 0, 0)
        assert filters.is_neutral()

    def test_css_order(self):
        filters = FilterSettings(invert=10, brightness=150, sepia=20.5)

        assert filters.css() == (
            "brightness(150%) contrast(100%) saturate(100%) "
            "grayscale(0%) sepia(20.5%) invert(10%)"
        )

    @pytest.mark.parametrize("channel,value", [
        ("brightness", -1),
        ("grayscale", 101),
        ("sepia", -5),
        ("invert", 150),
    ])
    def test_out_of_domain_rejected(self, channel, value):
        filters = FilterSettings()
        with pytest.raises(ValueError):
            setattr(filters, channel, value)

    @pytest.mark.parametrize("channel", ["brightness", "contrast", "saturate", "grayscale"])
    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_rejected(self, channel, value):
        filters = FilterSettings()
        with pytest.raises(ValueError):
            setattr(filters, channel, value)

        with pytest.raises(ValueError):
            FilterSettings(**{channel: value})

    def test_brightness_above_200_allowed(self):
        filters = FilterSettings(brightness=300)

        assert filters.brightness == 300


class TestApplyFilters:
    """Tests for apply_filters"""

    def test_neutral_is_identity(self):
        image = solid((200, 100, 50))

        assert pixel(apply_filters(image, FilterSettings())) == (200, 100, 50)

    def test_brightness(self):
        result = apply_filters(solid((200, 100, 50)), FilterSettings(brightness=50))

        assert pixel(result) == (100, 50, 25)

    def test_contrast_zero_is_mid_gray(self):
        result = apply_filters(solid((200, 10, 90)), FilterSettings(contrast=0))

        assert_close(pixel(result), (128, 128, 128))

    def test_full_grayscale(self):
        result = apply_filters(solid((255, 0, 0)), FilterSettings(grayscale=100))

        assert_close(pixel(result), (54, 54, 54))

    def test_full_sepia_on_white(self):
        result = apply_filters(solid((255, 255, 255)), FilterSettings(sepia=100))

        assert_close(pixel(result), (255, 255, 239))

    def test_saturate_zero_is_gray(self):
        r, g, b = pixel(apply_filters(solid((255, 0, 0)), FilterSettings(saturate=0)))

        assert abs(r - g) <= 1 and abs(g - b) <= 1

    def test_full_invert(self):
        result = apply_filters(solid((10, 20, 30)), FilterSettings(invert=100))

        assert pixel(result) == (245, 235, 225)

    def test_chain_order(self):
        # brightness first: 200 -> 100, then invert -> 155
        # (invert first would give 55 -> 27)
        filters = FilterSettings(invert=100, brightness=50)

        assert applied_channels(filters) == [FilterChannel.BRIGHTNESS, FilterChannel.INVERT]
        assert pixel(apply_filters(solid((200, 200, 200)), filters)) == (155, 155, 155)

    def test_alpha_preserved(self):
        image = solid((200, 100, 50, 77), mode="RGBA")

        result = apply_filters(image, FilterSettings(invert=100))

        assert result.mode == "RGBA"
        assert pixel(result)[3] == 77

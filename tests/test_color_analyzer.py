"""
Unit tests for ColorAnalyzer module
"""

import numpy as np
import pytest

from iridology.core.color_analyzer import ColorAnalyzer, ColorConfig
from iridology.schemas.analysis import ColorProfile, IrisColorType
from iridology.utils.color_space import rgb_to_hsv


@pytest.fixture
def analyzer():
    return ColorAnalyzer()


def _profile(hue=0.0, saturation=0.5, dominant=IrisColorType.GRAY):
    return ColorProfile(
        red=100.0,
        green=100.0,
        blue=100.0,
        brightness=0.4,
        saturation=saturation,
        dominant_color=dominant,
        hue=hue,
        pixel_count=10,
    )


# ================================================================
# 색상 분류
# ================================================================


@pytest.mark.parametrize(
    "rgb, expected",
    [
        ((0.1, 0.2, 0.8), IrisColorType.BLUE),
        ((0.2, 0.6, 0.3), IrisColorType.GREEN),
        ((0.6, 0.4, 0.2), IrisColorType.BROWN),
        ((0.6, 0.6, 0.2), IrisColorType.HAZEL),
        ((0.25, 0.16, 0.05), IrisColorType.AMBER),
        ((0.5, 0.5, 0.5), IrisColorType.GRAY),
        ((0.1, 0.1, 0.1), IrisColorType.MIXED),
        ((0.9, 0.1, 0.6), IrisColorType.MIXED),
    ],
)
def test_classify_color(analyzer, rgb, expected):
    hue, _, _ = rgb_to_hsv(*rgb)
    assert analyzer.classify_color(*rgb, hue) is expected


def test_classify_color_gray_threshold_configurable():
    analyzer = ColorAnalyzer(ColorConfig(gray_min_value=0.05))
    assert analyzer.classify_color(0.1, 0.1, 0.1, 0.0) is IrisColorType.GRAY


# ================================================================
# analyze_pixels
# ================================================================


def test_uniform_gray_profile(analyzer):
    pixels = np.full((500, 3), 128, dtype=np.uint8)
    profile = analyzer.analyze_pixels(pixels)
    assert profile.red == pytest.approx(128.0)
    assert profile.brightness == pytest.approx(128 / 255)
    assert profile.saturation == pytest.approx(0.0)
    assert profile.dominant_color is IrisColorType.GRAY
    assert profile.dominant_color.is_neutral
    assert profile.secondary_colors == ()
    assert profile.color_variation == pytest.approx(0.0)
    assert profile.pixel_count == 500


def test_empty_pixels_give_empty_profile(analyzer):
    profile = analyzer.analyze_pixels(np.zeros((0, 3), dtype=np.uint8))
    assert profile.is_empty
    assert profile == ColorProfile.empty()
    assert profile.dominant_color is IrisColorType.MIXED


def test_profile_values_in_range(analyzer):
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(2000, 3), dtype=np.uint8)
    profile = analyzer.analyze_pixels(pixels)
    assert 0.0 <= profile.brightness <= 1.0
    assert 0.0 <= profile.saturation <= 1.0
    assert 0.0 <= profile.color_variation <= 1.0
    assert all(0.0 <= c <= 255.0 for c in (profile.red, profile.green, profile.blue))
    assert len(profile.secondary_colors) <= 2
    assert profile.dominant_color not in profile.secondary_colors


def test_secondary_colors_exclude_dominant(analyzer):
    """반은 순청색, 반은 순녹색 → 평균색 GREEN, 보조색 BLUE"""
    pixels = np.vstack([np.tile([0, 0, 255], (100, 1)), np.tile([0, 255, 0], (100, 1))]).astype(np.uint8)
    profile = analyzer.analyze_pixels(pixels)
    assert profile.dominant_color is IrisColorType.GREEN
    assert profile.secondary_colors == (IrisColorType.BLUE,)
    # hue 240 / 120 → 표준편차 60도
    assert profile.color_variation == pytest.approx(60.0 / 360.0)
    assert profile.description == "Green with Blue accents"


def test_secondary_colors_need_min_pixels(analyzer):
    pixels = np.vstack([np.tile([0, 0, 255], (10, 1)), np.tile([0, 255, 0], (10, 1))]).astype(np.uint8)
    assert analyzer.analyze_pixels(pixels).secondary_colors == ()


def test_analyze_overall_color(analyzer, gray_image):
    profile = analyzer.analyze_overall_color(gray_image)
    assert profile.dominant_color is IrisColorType.GRAY
    assert profile.pixel_count == 100 * 100


def test_analyze_overall_color_radius_ratio(dark_center_image):
    analyzer = ColorAnalyzer(ColorConfig(overall_radius_ratio=0.2))
    profile = analyzer.analyze_overall_color(dark_center_image)
    assert profile.red == pytest.approx(80.0)
    assert profile.green == pytest.approx(0.0)
    assert profile.pixel_count < 100 * 100


# ================================================================
# 히스토그램 / 이상 색소
# ================================================================


def test_color_histogram(analyzer):
    pixels = np.array([[0, 10, 255], [0, 20, 255], [5, 10, 255]], dtype=np.uint8)
    hist = analyzer.get_color_histogram(pixels)
    assert set(hist) == {"red", "green", "blue"}
    assert all(h.shape == (256,) for h in hist.values())
    assert hist["red"][0] == 2 and hist["red"][5] == 1
    assert hist["green"][10] == 2
    assert hist["blue"][255] == 3
    assert all(h.sum() == 3 for h in hist.values())


def test_unusual_pigmentation_by_hue(analyzer):
    overall = _profile(dominant=IrisColorType.BLUE)
    assert analyzer.detect_unusual_pigmentation(_profile(hue=30.0), overall)


def test_unusual_pigmentation_by_saturation(analyzer):
    overall = _profile(dominant=IrisColorType.BLUE)
    assert analyzer.detect_unusual_pigmentation(_profile(hue=210.0, saturation=0.95), overall)


def test_typical_pigmentation(analyzer):
    overall = _profile(dominant=IrisColorType.BLUE)
    assert not analyzer.detect_unusual_pigmentation(_profile(hue=200.0, saturation=0.5), overall)

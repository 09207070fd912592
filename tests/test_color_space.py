import numpy as np
import pytest

from iridology.utils.color_space import hue_difference, rgb_array_to_hsv, rgb_to_hsv


@pytest.mark.parametrize(
    "rgb, expected",
    [
        ((1.0, 0.0, 0.0), (0.0, 1.0, 1.0)),
        ((0.0, 1.0, 0.0), (120.0, 1.0, 1.0)),
        ((0.0, 0.0, 1.0), (240.0, 1.0, 1.0)),
        ((0.5, 0.5, 0.5), (0.0, 0.0, 0.5)),
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
    ],
)
def test_rgb_to_hsv(rgb, expected):
    h, s, v = rgb_to_hsv(*rgb)
    assert h == pytest.approx(expected[0])
    assert s == pytest.approx(expected[1])
    assert v == pytest.approx(expected[2])


def test_rgb_to_hsv_magenta_wraps():
    h, _, _ = rgb_to_hsv(1.0, 0.0, 0.5)
    assert h == pytest.approx(330.0)


def test_rgb_array_to_hsv_matches_scalar():
    samples = np.array(
        [[0.1, 0.2, 0.8], [0.6, 0.4, 0.2], [0.6, 0.6, 0.2], [0.3, 0.3, 0.3], [1.0, 0.0, 0.5], [0.0, 0.5, 0.5]]
    )
    hsv = rgb_array_to_hsv(samples)
    assert hsv.shape == (6, 3)
    for row, (h, s, v) in zip(samples, hsv):
        expected = rgb_to_hsv(*row)
        assert h == pytest.approx(expected[0])
        assert s == pytest.approx(expected[1])
        assert v == pytest.approx(expected[2])


def test_hue_difference_is_unsigned():
    assert hue_difference(30.0, 220.0) == pytest.approx(190.0)
    assert hue_difference(220.0, 30.0) == pytest.approx(190.0)
    assert hue_difference(350.0, 10.0) == pytest.approx(340.0)

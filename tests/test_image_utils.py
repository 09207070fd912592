import numpy as np
import pytest

from iridology.utils.image_utils import (
    ImageDecodeError,
    ImageValidationError,
    decode_image,
    encode_png,
    to_rgb,
    validate_image,
)


def test_validate_image_ok(gray_image):
    validate_image(gray_image)


@pytest.mark.parametrize(
    "image",
    [
        [[0, 0, 0]],
        np.zeros((10, 10, 3), dtype=np.float32),
        np.zeros((10, 10), dtype=np.uint8),
        np.zeros((10, 10, 2), dtype=np.uint8),
        np.zeros((0, 10, 3), dtype=np.uint8),
    ],
)
def test_validate_image_rejects(image):
    with pytest.raises(ImageValidationError):
        validate_image(image)


def test_to_rgb_drops_alpha():
    rgba = np.zeros((4, 4, 4), dtype=np.uint8)
    rgba[..., 0] = 10
    rgba[..., 3] = 255
    rgb = to_rgb(rgba)
    assert rgb.shape == (4, 4, 3)
    assert np.all(rgb[..., 0] == 10)


def test_decode_png_keeps_channel_order():
    image = np.zeros((8, 8, 3), dtype=np.uint8)
    image[..., 0] = 200  # red
    decoded = decode_image(encode_png(image))
    assert decoded.shape == (8, 8, 3)
    assert np.array_equal(decoded, image)


@pytest.mark.parametrize("data", [b"", b"\x00\x01\x02 garbage"])
def test_decode_image_errors(data):
    with pytest.raises(ImageDecodeError):
        decode_image(data)

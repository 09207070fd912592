import json
from pathlib import Path

import numpy as np
import pytest

from iridology.core.zone_segmenter import ZoneSegmenter
from iridology.pipeline import IridologyPipeline
from iridology.utils.image_utils import encode_png


@pytest.fixture
def tmp_json(tmp_path: Path):
    def _make(data, name="sample.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return path

    return _make


@pytest.fixture
def gray_image():
    # 100x100 균일 회색 (128)
    return np.full((100, 100, 3), 128, dtype=np.uint8)


@pytest.fixture
def black_image():
    return np.zeros((100, 100, 3), dtype=np.uint8)


@pytest.fixture
def dark_center_image():
    """회색 바탕 + 중심부(정규화 반경 < 0.28) 짙은 적색"""
    image = np.full((100, 100, 3), 128, dtype=np.uint8)
    _, distance = ZoneSegmenter.polar_grid(100, 100)
    image[distance < 0.28] = (80, 0, 0)
    return image


@pytest.fixture
def gray_png_bytes(gray_image):
    return encode_png(gray_image)


@pytest.fixture
def pipeline():
    return IridologyPipeline()

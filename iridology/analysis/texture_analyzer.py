"""
Texture Analyzer Module

Zone 픽셀 집합의 균일도(uniformity)와 밀도(density)를 계산한다.
- uniformity = 1 - (픽셀별 RGB 제곱편차 합의 평균 / 255²), 0~1 clamp
- density = 채널 평균 / 255
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from iridology.schemas.analysis import PatternType, TextureFeatures

logger = logging.getLogger(__name__)

# 채널당 최대 제곱편차 (255²)
MAX_SQUARED_DEVIATION = 65025.0


@dataclass
class TextureConfig:
    """
    TextureAnalyzer 설정

    Attributes:
        min_sample_count: 텍스처 계산 최소 픽셀 수 (미만이면 빈 결과)
    """

    min_sample_count: int = 10


class TextureAnalyzer:
    """
    텍스처 분석기

    패턴 검출은 기본적으로 UNIFORM 단일 태그만 부여하며
    pattern_strength = uniformity 로 둔다.
    """

    def __init__(self, config: Optional[TextureConfig] = None):
        self.config = config or TextureConfig()

    def analyze_texture(self, pixels: np.ndarray) -> TextureFeatures:
        """
        픽셀 집합의 텍스처 특징 계산.

        Args:
            pixels: (N, 3) RGB uint8 배열

        Returns:
            TextureFeatures. 픽셀 수가 min_sample_count 미만이면 TextureFeatures.empty()
        """
        pixels = np.asarray(pixels).reshape(-1, 3)
        count = pixels.shape[0]
        if count < self.config.min_sample_count:
            logger.debug(f"Insufficient texture sample: {count} < {self.config.min_sample_count}")
            return TextureFeatures.empty()

        values = pixels.astype(np.float64)
        mean = values.mean(axis=0)

        # 세 채널 제곱편차를 합산한 뒤 픽셀 수로 나눔
        variance = float(np.sum((values - mean) ** 2) / count)
        uniformity = float(np.clip(1.0 - variance / MAX_SQUARED_DEVIATION, 0.0, 1.0))
        density = float(np.clip(mean.sum() / (3.0 * 255.0), 0.0, 1.0))

        return TextureFeatures(
            uniformity=uniformity,
            density=density,
            patterns=(PatternType.UNIFORM,),
            pattern_strength=uniformity,
        )

"""
Color Analyzer Module

픽셀 집합의 평균 색상, 밝기, 채도를 계산하고 홍채 색상 분류를 수행한다.
전체 이미지 기준(baseline) 프로파일과 Zone별 프로파일을 모두 제공한다.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from iridology.core.zone_segmenter import ZoneSegmenter
from iridology.schemas.analysis import ColorProfile, IrisColorType
from iridology.utils.color_space import hue_difference, rgb_array_to_hsv, rgb_to_hsv
from iridology.utils.image_utils import to_rgb

logger = logging.getLogger(__name__)


@dataclass
class ColorConfig:
    """
    ColorAnalyzer 설정

    Attributes:
        gray_min_value: gray 분류 최소 평균 밝기 (0~1)
        gray_max_spread: gray 분류 최대 채널 편차 (0~1)
        secondary_min_pixels: 보조 색상 계산 최소 픽셀 수
        secondary_sample_size: 보조 색상 계산 샘플 수
        secondary_min_fraction: 보조 색상으로 인정할 최소 비율
        max_secondary_colors: 보조 색상 최대 개수
        variation_min_pixels: 색상 변동 계산 최소 픽셀 수
        variation_sample_size: 색상 변동 계산 샘플 수
        overall_radius_ratio: 전체 프로파일 샘플링 반경 비율 (None=전체 이미지)
        unusual_hue_delta: 이상 색소 판정 hue 차이 (도)
        unusual_saturation_delta: 이상 색소 판정 채도 편차 (0.5 기준)
    """

    gray_min_value: float = 0.3
    gray_max_spread: float = 0.15
    secondary_min_pixels: int = 100
    secondary_sample_size: int = 1000
    secondary_min_fraction: float = 0.1
    max_secondary_colors: int = 2
    variation_min_pixels: int = 10
    variation_sample_size: int = 500
    overall_radius_ratio: Optional[float] = None
    unusual_hue_delta: float = 60.0
    unusual_saturation_delta: float = 0.3


class ColorAnalyzer:
    """
    색상 분석기

    알고리즘:
    1. 채널별 평균 (0~255)
    2. brightness = 채널 평균 / 255, saturation = (max-min)/max
    3. 평균 색상의 hue와 기준 밴드로 대표 색상 분류
    4. 샘플 픽셀 분류 빈도로 보조 색상 산출
    """

    def __init__(self, config: Optional[ColorConfig] = None):
        self.config = config or ColorConfig()

    def analyze_pixels(self, pixels: np.ndarray) -> ColorProfile:
        """
        픽셀 집합의 색상 프로파일 계산.

        Args:
            pixels: (N, 3) RGB uint8 배열

        Returns:
            ColorProfile. 빈 입력이면 ColorProfile.empty() (pixel_count=0)
        """
        pixels = np.asarray(pixels).reshape(-1, 3)
        count = int(pixels.shape[0])
        if count == 0:
            return ColorProfile.empty()

        mean_rgb = pixels.astype(np.float64).mean(axis=0)
        red, green, blue = (float(v) for v in mean_rgb)
        r, g, b = red / 255.0, green / 255.0, blue / 255.0

        hue, saturation, _ = rgb_to_hsv(r, g, b)
        brightness = (red + green + blue) / (3.0 * 255.0)
        dominant = self.classify_color(r, g, b, hue)

        return ColorProfile(
            red=red,
            green=green,
            blue=blue,
            brightness=float(np.clip(brightness, 0.0, 1.0)),
            saturation=float(np.clip(saturation, 0.0, 1.0)),
            dominant_color=dominant,
            hue=hue,
            secondary_colors=self._find_secondary_colors(pixels, dominant),
            color_variation=self._calculate_color_variation(pixels),
            pixel_count=count,
        )

    def analyze_overall_color(self, image: np.ndarray) -> ColorProfile:
        """
        전체 이미지 기준 색상 프로파일 (Zone 비교용 baseline).

        overall_radius_ratio가 설정되면 중심 원 내부 픽셀만 사용한다.
        """
        image = to_rgb(image)
        ratio = self.config.overall_radius_ratio
        if ratio is None:
            pixels = image.reshape(-1, 3)
        else:
            height, width = image.shape[:2]
            _, distance = ZoneSegmenter.polar_grid(width, height)
            pixels = image[distance < ratio]

        profile = self.analyze_pixels(pixels)
        logger.debug(
            f"Overall color: {profile.dominant_color.key}, brightness={profile.brightness:.3f}, "
            f"saturation={profile.saturation:.3f}, variation={profile.color_variation:.3f}"
        )
        return profile

    def classify_color(self, r: float, g: float, b: float, hue: float) -> IrisColorType:
        """
        정규화 RGB(0~1)와 hue(도)로 홍채 색상 분류.

        규칙은 순서대로 적용되며 처음 일치하는 분류를 반환한다.
        """
        if 180 <= hue <= 260 and b > r and b > g:
            return IrisColorType.BLUE
        if 80 <= hue <= 180 and g > r * 0.9:
            return IrisColorType.GREEN
        if 20 <= hue <= 40 and r > 0.3:
            return IrisColorType.BROWN
        if 40 <= hue <= 80:
            return IrisColorType.HAZEL
        if 30 <= hue <= 60 and r > g > b:
            return IrisColorType.AMBER

        spread = max(r, g, b) - min(r, g, b)
        if (r + g + b) / 3.0 > self.config.gray_min_value and spread < self.config.gray_max_spread:
            return IrisColorType.GRAY

        return IrisColorType.MIXED

    def get_color_histogram(self, pixels: np.ndarray) -> Dict[str, np.ndarray]:
        """채널별 256-bin 히스토그램"""
        pixels = np.asarray(pixels, dtype=np.uint8).reshape(-1, 3)
        return {
            "red": np.bincount(pixels[:, 0], minlength=256),
            "green": np.bincount(pixels[:, 1], minlength=256),
            "blue": np.bincount(pixels[:, 2], minlength=256),
        }

    def detect_unusual_pigmentation(self, profile: ColorProfile, overall: ColorProfile) -> bool:
        """Zone 색상이 전체 대표 색상과 크게 다른지 판정"""
        hue_diff = hue_difference(profile.hue, overall.dominant_color.reference_hue)
        # 300도 이상 차이는 hue 경계 근처로 보고 제외
        if self.config.unusual_hue_delta < hue_diff < 360.0 - self.config.unusual_hue_delta:
            return True
        return abs(profile.saturation - 0.5) > self.config.unusual_saturation_delta

    def _sample(self, pixels: np.ndarray, sample_size: int) -> np.ndarray:
        step = max(1, pixels.shape[0] // max(1, sample_size))
        return pixels[::step]

    def _classify_samples(self, pixels: np.ndarray) -> Tuple[IrisColorType, ...]:
        normalized = pixels.astype(np.float64) / 255.0
        hsv = rgb_array_to_hsv(normalized)
        return tuple(
            self.classify_color(float(r), float(g), float(b), float(h))
            for (r, g, b), h in zip(normalized, hsv[:, 0])
        )

    def _find_secondary_colors(self, pixels: np.ndarray, dominant: IrisColorType) -> Tuple[IrisColorType, ...]:
        if pixels.shape[0] < self.config.secondary_min_pixels:
            return ()

        sample = self._sample(pixels, self.config.secondary_sample_size)
        counts = Counter(self._classify_samples(sample))
        threshold = len(sample) * self.config.secondary_min_fraction

        secondary = [color for color, n in counts.most_common() if n > threshold and color != dominant]
        return tuple(secondary[: self.config.max_secondary_colors])

    def _calculate_color_variation(self, pixels: np.ndarray) -> float:
        if pixels.shape[0] < self.config.variation_min_pixels:
            return 0.0

        sample = self._sample(pixels, self.config.variation_sample_size)
        hues = rgb_array_to_hsv(sample.astype(np.float64) / 255.0)[:, 0]
        return float(np.clip(np.std(hues) / 360.0, 0.0, 1.0))

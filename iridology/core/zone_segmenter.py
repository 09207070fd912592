"""
Zone Segmenter Module

이미지 픽셀을 중심 기준 정규화 극좌표로 변환하고, 각 픽셀이 홍채학 Zone에
포함되는지 판정한다. Zone별 픽셀 집합, 마스크, bounding box, 중심점을 제공한다.

좌표계:
- 중심 = (W/2, H/2), max_radius = min(W, H)/2
- angle = atan2(dy, dx)를 0~2π로 정규화 (이미지 좌표, y 아래쪽)
- distance = 픽셀 거리 / max_radius
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Tuple, Union

import numpy as np

from iridology.core.zone_catalog import TWO_PI, ZONE_CATALOG, EyeSide, IridologyZone, ZoneCatalog
from iridology.schemas.analysis import Point2D
from iridology.utils.image_utils import to_rgb

logger = logging.getLogger(__name__)


@dataclass
class SegmenterConfig:
    """ZoneSegmenter 설정"""

    bbox_samples: int = 20  # bounding box 계산용 각도 샘플 수
    bbox_padding: int = 5  # bounding box 여백 (픽셀)


@dataclass(frozen=True)
class ZoneBounds:
    """Zone의 축 정렬 bounding box (픽셀)"""

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height


@lru_cache(maxsize=16)
def _polar_grid(width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    (angle, normalized_distance) 그리드를 이미지 크기별로 1회 계산.

    반환 배열은 읽기 전용이며 여러 Zone/분석 호출에서 공유된다.
    """
    center_x = width / 2.0
    center_y = height / 2.0
    max_radius = min(center_x, center_y)

    y, x = np.ogrid[:height, :width]
    dx = x - center_x
    dy = y - center_y
    distance = np.sqrt(dx**2 + dy**2)
    angle = np.arctan2(dy, dx)
    angle = np.where(angle < 0, angle + TWO_PI, angle)

    normalized = distance / max_radius if max_radius > 0 else np.full_like(distance, np.inf)

    angle.setflags(write=False)
    normalized.setflags(write=False)
    return angle, normalized


class ZoneSegmenter:
    """정규화 극좌표 기반 Zone 분할기"""

    def __init__(self, config: Optional[SegmenterConfig] = None, catalog: ZoneCatalog = ZONE_CATALOG):
        self.config = config or SegmenterConfig()
        self.catalog = catalog

    # ------------------------------------------------------------------
    # 좌표 변환
    # ------------------------------------------------------------------

    @staticmethod
    def normalized_polar(x: float, y: float, width: int, height: int) -> Tuple[float, float]:
        """
        단일 픽셀 좌표를 (angle, normalized_distance)로 변환.

        Returns:
            (angle 0~2π, distance / max_radius)
        """
        center = Point2D(width / 2.0, height / 2.0)
        point = Point2D(float(x), float(y))
        max_radius = min(width, height) / 2.0

        angle = center.angle_to(point)
        if angle < 0:
            angle += TWO_PI
        distance = center.distance_to(point)
        return angle, (distance / max_radius if max_radius > 0 else math.inf)

    @staticmethod
    def polar_grid(width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
        return _polar_grid(int(width), int(height))

    def zone_mask(self, width: int, height: int, zone: IridologyZone) -> np.ndarray:
        """Zone 포함 여부 bool 마스크 (H × W)"""
        angle, distance = self.polar_grid(width, height)

        radial = (distance >= zone.inner_radius) & (distance <= zone.outer_radius)
        if zone.wraps_around:
            angular = (angle >= zone.start_angle) | (angle <= zone.end_angle)
        else:
            angular = (angle >= zone.start_angle) & (angle <= zone.end_angle)
        return radial & angular

    # ------------------------------------------------------------------
    # 픽셀 추출
    # ------------------------------------------------------------------

    def extract_zone_pixels(self, image: np.ndarray, zone: IridologyZone) -> np.ndarray:
        """
        Zone에 포함되는 픽셀 추출.

        Args:
            image: RGB(A) 이미지 (H × W × C, uint8)
            zone: 대상 Zone

        Returns:
            (N, 3) uint8 RGB 픽셀 배열. 포함 픽셀이 없으면 (0, 3) 빈 배열.
        """
        image = to_rgb(image)
        height, width = image.shape[:2]
        mask = self.zone_mask(width, height, zone)
        pixels = image[mask]

        if pixels.shape[0] == 0:
            logger.warning(f"Zone {zone.id} contains no pixels in {width}x{height} image")
        else:
            logger.debug(f"Zone {zone.id}: {pixels.shape[0]} pixels")
        return pixels

    def map_all_zones(self, image: np.ndarray, eye_side: Union[EyeSide, str, bool]) -> Dict[str, np.ndarray]:
        """눈 방향의 모든 Zone 픽셀을 카탈로그 순서대로 추출"""
        return {zone.id: self.extract_zone_pixels(image, zone) for zone in self.catalog.zones_for(eye_side)}

    def create_zone_mask(self, width: int, height: int, zone: IridologyZone) -> np.ndarray:
        """Zone 영역 흰색(255), 외부 검정(0)의 단일 채널 마스크"""
        return np.where(self.zone_mask(width, height, zone), 255, 0).astype(np.uint8)

    # ------------------------------------------------------------------
    # Bounding box / 중심
    # ------------------------------------------------------------------

    def calculate_zone_bounds(self, width: int, height: int, zone: IridologyZone) -> Optional[ZoneBounds]:
        """
        Zone의 bounding box 근사 계산.

        Zone의 각도 범위를 bbox_samples개로 샘플링하여 내/외곽 반경 위치의
        min/max x,y를 구한 뒤 padding을 더하고 이미지 범위로 clamp한다.
        곡률이 큰 Zone에서는 실제 범위보다 작게 나올 수 있다.

        Returns:
            ZoneBounds, 폭/높이가 0 이하이면 None
        """
        center_x = width / 2.0
        center_y = height / 2.0
        max_radius = min(center_x, center_y)

        inner = zone.inner_radius * max_radius
        outer = zone.outer_radius * max_radius
        span = zone.angular_span
        samples = max(1, self.config.bbox_samples)

        min_x, max_x = float(width), 0.0
        min_y, max_y = float(height), 0.0

        for i in range(samples):
            angle = zone.start_angle + span * i / samples
            cos_a = math.cos(angle)
            sin_a = math.sin(angle)
            for radius in (inner, outer):
                x = center_x + radius * cos_a
                y = center_y + radius * sin_a
                min_x = min(min_x, x)
                max_x = max(max_x, x)
                min_y = min(min_y, y)
                max_y = max(max_y, y)

        padding = self.config.bbox_padding
        min_x = float(np.clip(min_x - padding, 0, width - 1))
        max_x = float(np.clip(max_x + padding, 0, width - 1))
        min_y = float(np.clip(min_y - padding, 0, height - 1))
        max_y = float(np.clip(max_y + padding, 0, height - 1))

        box_w = int(max_x - min_x)
        box_h = int(max_y - min_y)
        if box_w <= 0 or box_h <= 0:
            logger.debug(f"Degenerate bounds for zone {zone.id}: {box_w}x{box_h}")
            return None

        return ZoneBounds(left=int(min_x), top=int(min_y), width=box_w, height=box_h)

    def extract_zone_image(self, image: np.ndarray, zone: IridologyZone) -> Optional[np.ndarray]:
        """Zone bounding box로 자른 부분 이미지 (bounds가 없으면 None)"""
        image = to_rgb(image)
        height, width = image.shape[:2]
        bounds = self.calculate_zone_bounds(width, height, zone)
        if bounds is None:
            return None
        return image[bounds.top : bounds.bottom, bounds.left : bounds.right].copy()

    def get_zone_center(self, width: int, height: int, zone: IridologyZone) -> Point2D:
        """중간 반경·중간 각도의 닫힌 형식 중심점 (실제 픽셀 무게중심 아님)"""
        center_x = width / 2.0
        center_y = height / 2.0
        max_radius = min(center_x, center_y)

        radius = zone.mid_radius * max_radius
        angle = zone.mid_angle
        return Point2D(center_x + radius * math.cos(angle), center_y + radius * math.sin(angle))

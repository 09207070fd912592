"""
Zone Catalog Module

전통 홍채학 차트(Bernard Jensen)를 기반으로 한 좌/우 눈 Zone 정의.
각 Zone은 각도 범위, 정규화 반경 범위, 신체 계통, 설명 문구로 구성된다.

좌표계:
- 각도 0 = 3시 방향, 이미지 좌표(y 아래쪽) 기준 atan2 증가 방향
- 반경은 이미지 중심~가장 가까운 가장자리 거리로 정규화 (0.0~1.0)
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple, Union

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


class EyeSide(Enum):
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Union["EyeSide", str, bool]) -> "EyeSide":
        """
        문자열/불리언 입력을 EyeSide로 변환.

        bool은 기존 is_left_eye 플래그 호환용 (True=LEFT).
        """
        if isinstance(value, EyeSide):
            return value
        if isinstance(value, bool):
            return cls.LEFT if value else cls.RIGHT
        normalized = str(value).strip().lower()
        if normalized in ("left", "l", "os"):
            return cls.LEFT
        if normalized in ("right", "r", "od"):
            return cls.RIGHT
        raise ValueError(f"Unknown eye side: {value!r}")


class BodySystem(Enum):
    DIGESTIVE = "Digestive"
    RESPIRATORY = "Respiratory"
    CARDIOVASCULAR = "Cardiovascular"
    NERVOUS = "Nervous"
    URINARY = "Urinary"
    IMMUNE = "Immune"
    ENDOCRINE = "Endocrine"
    MUSCULOSKELETAL = "Musculoskeletal"


def clock_to_radians(hour: float) -> float:
    """시계 방향 위치(시)를 라디안으로 변환, 0~2π 범위로 정규화"""
    angle = ((math.pi / 2) - (hour * math.pi / 6)) % TWO_PI
    # 부동소수 오차로 -0이 2π 직전 값이 되는 경우 (3시 방향)
    if math.isclose(angle, TWO_PI, abs_tol=1e-9):
        return 0.0
    return angle


@dataclass(frozen=True)
class IridologyZone:
    """
    홍채 Zone 정의 (불변).

    start_angle > end_angle 이면 0/2π 경계를 넘는 구간을 의미한다.
    전체 링은 start_angle=0, end_angle=2π 로 표현한다.
    """

    id: str
    name: str
    body_system: BodySystem
    start_angle: float
    end_angle: float
    inner_radius: float
    outer_radius: float
    description: str
    wellness_reflections: Tuple[str, ...]

    def __post_init__(self):
        if not (0.0 <= self.inner_radius <= self.outer_radius <= 1.0):
            raise ValueError(
                f"Zone {self.id}: radii must satisfy 0 <= inner <= outer <= 1 "
                f"(got {self.inner_radius}, {self.outer_radius})"
            )
        if not (0.0 <= self.start_angle < TWO_PI) or not (0.0 <= self.end_angle <= TWO_PI):
            raise ValueError(f"Zone {self.id}: angles must lie in [0, 2π] (got {self.start_angle}, {self.end_angle})")

    @property
    def wraps_around(self) -> bool:
        return self.start_angle > self.end_angle

    @property
    def angular_span(self) -> float:
        """각도 폭 (라디안). 경계를 넘는 구간도 양수로 계산"""
        if self.wraps_around:
            return TWO_PI - self.start_angle + self.end_angle
        return self.end_angle - self.start_angle

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.angular_span / 2.0) % TWO_PI

    @property
    def mid_radius(self) -> float:
        return (self.inner_radius + self.outer_radius) / 2.0

    def contains_angle(self, angle: float) -> bool:
        angle = angle % TWO_PI
        if self.wraps_around:
            return angle >= self.start_angle or angle <= self.end_angle
        return self.start_angle <= angle <= self.end_angle

    def contains_point(self, angle: float, radius: float) -> bool:
        """정규화 극좌표 (angle, radius)가 Zone 내부인지 판정"""
        return self.inner_radius <= radius <= self.outer_radius and self.contains_angle(angle)


def _zone(
    zone_id: str,
    name: str,
    system: BodySystem,
    start: float,
    end: float,
    inner: float,
    outer: float,
    description: str,
    reflections: List[str],
) -> IridologyZone:
    return IridologyZone(
        id=zone_id,
        name=name,
        body_system=system,
        start_angle=start,
        end_angle=end,
        inner_radius=inner,
        outer_radius=outer,
        description=description,
        wellness_reflections=tuple(reflections),
    )


# 우안(Right eye) Zone 정의
_RIGHT_EYE_ZONES = (
    # 동공 영역 (소화계 중심)
    _zone(
        "re_stomach", "Stomach", BodySystem.DIGESTIVE, 0.0, TWO_PI, 0.0, 0.3,
        "Central digestive area",
        [
            "How is your digestion after meals?",
            "Consider meal timing and portion sizes",
            "Reflect on your hydration habits",
            "Are you chewing your food thoroughly?",
        ],
    ),
    _zone(
        "re_liver", "Liver", BodySystem.DIGESTIVE, clock_to_radians(7), clock_to_radians(5), 0.3, 0.6,
        "Liver and detoxification zone",
        [
            "How are your energy levels throughout the day?",
            "Consider your body's natural detox processes",
            "Reflect on sleep quality and rest",
            "Are you supporting your liver with nutrition?",
        ],
    ),
    _zone(
        "re_gallbladder", "Gallbladder", BodySystem.DIGESTIVE, clock_to_radians(6), clock_to_radians(5), 0.4, 0.6,
        "Gallbladder zone",
        [
            "How do you feel after fatty meals?",
            "Consider balanced nutrition",
            "Reflect on dietary fat sources",
        ],
    ),
    _zone(
        "re_lung", "Right Lung", BodySystem.RESPIRATORY, clock_to_radians(3), clock_to_radians(2), 0.4, 0.7,
        "Right respiratory zone",
        [
            "Are you practicing deep breathing?",
            "Consider air quality in your environment",
            "Reflect on your breathing patterns",
            "Do you get adequate fresh air daily?",
        ],
    ),
    _zone(
        "re_kidney", "Right Kidney", BodySystem.URINARY, clock_to_radians(8), clock_to_radians(7), 0.5, 0.7,
        "Right kidney and adrenal zone",
        [
            "How is your hydration?",
            "Consider your stress levels",
            "Reflect on your body's rest needs",
            "Are you drinking enough water daily?",
        ],
    ),
    _zone(
        "re_brain", "Right Brain Hemisphere", BodySystem.NERVOUS, clock_to_radians(1), clock_to_radians(11), 0.6, 0.8,
        "Right brain and nervous system",
        [
            "How are your stress levels?",
            "Consider mental clarity and focus",
            "Reflect on your sleep quality",
            "Are you taking breaks for mental rest?",
        ],
    ),
    # 4시~3시 구간은 0/2π 경계를 넘는다
    _zone(
        "re_heart", "Heart", BodySystem.CARDIOVASCULAR, clock_to_radians(4), clock_to_radians(3), 0.4, 0.6,
        "Cardiovascular zone",
        [
            "How is your cardiovascular activity?",
            "Consider movement and exercise",
            "Reflect on emotional wellness",
            "Are you moving your body regularly?",
        ],
    ),
    _zone(
        "re_lymphatic", "Lymphatic System", BodySystem.IMMUNE, 0.0, TWO_PI, 0.8, 1.0,
        "Lymphatic and immune zone",
        [
            "How is your overall vitality?",
            "Consider immune system support",
            "Reflect on rest and recovery",
            "Are you managing stress effectively?",
        ],
    ),
    _zone(
        "re_intestines", "Intestines", BodySystem.DIGESTIVE, clock_to_radians(8), clock_to_radians(4), 0.3, 0.5,
        "Intestinal zone",
        [
            "How is your digestive regularity?",
            "Consider fiber and water intake",
            "Reflect on gut-friendly foods",
        ],
    ),
    _zone(
        "re_thyroid", "Thyroid", BodySystem.ENDOCRINE, clock_to_radians(10), clock_to_radians(9), 0.5, 0.7,
        "Thyroid and metabolic zone",
        [
            "How are your energy levels?",
            "Consider metabolic health",
            "Reflect on temperature regulation",
        ],
    ),
    # 동공 영역과 림프 링 사이를 채우는 섬모체 영역
    _zone(
        "re_ciliary", "Ciliary Zone", BodySystem.MUSCULOSKELETAL, 0.0, TWO_PI, 0.3, 0.8,
        "Ciliary zone between the collarette and the lymphatic ring",
        [
            "How does your body feel after long periods of sitting?",
            "Consider gentle stretching during the day",
            "Reflect on your posture while working",
        ],
    ),
)

# 좌안(Left eye) Zone 정의: 우안의 좌우 대칭 위치
_LEFT_EYE_ZONES = (
    _zone(
        "le_stomach", "Stomach", BodySystem.DIGESTIVE, 0.0, TWO_PI, 0.0, 0.3,
        "Central digestive area",
        [
            "How is your digestion after meals?",
            "Consider meal timing and portion sizes",
            "Reflect on your hydration habits",
        ],
    ),
    _zone(
        "le_heart", "Heart", BodySystem.CARDIOVASCULAR, clock_to_radians(9), clock_to_radians(8), 0.4, 0.6,
        "Heart zone (left eye)",
        [
            "How is your cardiovascular wellness?",
            "Consider emotional balance",
            "Reflect on stress management",
            "Are you nurturing your heart health?",
        ],
    ),
    _zone(
        "le_lung", "Left Lung", BodySystem.RESPIRATORY, clock_to_radians(10), clock_to_radians(9), 0.4, 0.7,
        "Left respiratory zone",
        [
            "Are you practicing deep breathing?",
            "Consider air quality in your environment",
            "Reflect on your breathing patterns",
        ],
    ),
    _zone(
        "le_kidney", "Left Kidney", BodySystem.URINARY, clock_to_radians(5), clock_to_radians(4), 0.5, 0.7,
        "Left kidney and adrenal zone",
        [
            "How is your hydration?",
            "Consider your stress levels",
            "Reflect on your body's rest needs",
        ],
    ),
    _zone(
        "le_spleen", "Spleen", BodySystem.IMMUNE, clock_to_radians(8), clock_to_radians(7), 0.4, 0.6,
        "Spleen and immune function",
        [
            "How is your immune resilience?",
            "Consider rest and recovery",
            "Reflect on stress management",
        ],
    ),
    _zone(
        "le_brain", "Left Brain Hemisphere", BodySystem.NERVOUS, clock_to_radians(1), clock_to_radians(11), 0.6, 0.8,
        "Left brain and nervous system",
        [
            "How are your stress levels?",
            "Consider mental clarity and focus",
            "Reflect on your sleep quality",
        ],
    ),
    _zone(
        "le_lymphatic", "Lymphatic System", BodySystem.IMMUNE, 0.0, TWO_PI, 0.8, 1.0,
        "Lymphatic and immune zone",
        [
            "How is your overall vitality?",
            "Consider immune system support",
            "Reflect on rest and recovery",
        ],
    ),
    _zone(
        "le_intestines", "Intestines", BodySystem.DIGESTIVE, clock_to_radians(8), clock_to_radians(4), 0.3, 0.5,
        "Intestinal zone",
        [
            "How is your digestive regularity?",
            "Consider fiber and water intake",
            "Reflect on gut-friendly foods",
        ],
    ),
    _zone(
        "le_ciliary", "Ciliary Zone", BodySystem.MUSCULOSKELETAL, 0.0, TWO_PI, 0.3, 0.8,
        "Ciliary zone between the collarette and the lymphatic ring",
        [
            "How does your body feel after long periods of sitting?",
            "Consider gentle stretching during the day",
            "Reflect on your posture while working",
        ],
    ),
)


class ZoneCatalog:
    """
    눈 방향별 Zone 목록을 보관하는 읽기 전용 조회 테이블.

    프로세스 시작 시 한 번 생성되어(ZONE_CATALOG) 모든 분석 호출에서 공유된다.
    """

    def __init__(self, zones_by_eye: Mapping[EyeSide, Tuple[IridologyZone, ...]]):
        self._zones: Mapping[EyeSide, Tuple[IridologyZone, ...]] = MappingProxyType(
            {side: tuple(zones) for side, zones in zones_by_eye.items()}
        )
        index: Dict[str, IridologyZone] = {}
        for zones in self._zones.values():
            for zone in zones:
                if zone.id in index:
                    raise ValueError(f"Duplicate zone id: {zone.id}")
                index[zone.id] = zone
        self._by_id: Mapping[str, IridologyZone] = MappingProxyType(index)
        logger.debug(f"ZoneCatalog built: {', '.join(f'{s.value}={len(z)}' for s, z in self._zones.items())}")

    def eye_sides(self) -> List[EyeSide]:
        return list(self._zones.keys())

    def zones_for(self, eye_side: Union[EyeSide, str, bool]) -> Tuple[IridologyZone, ...]:
        return self._zones[EyeSide.parse(eye_side)]

    def get_zone(self, zone_id: str) -> IridologyZone:
        try:
            return self._by_id[zone_id]
        except KeyError:
            raise KeyError(f"Unknown zone id: {zone_id}") from None

    def zones_by_system(self, system: BodySystem, eye_side: Union[EyeSide, str, bool]) -> List[IridologyZone]:
        return [z for z in self.zones_for(eye_side) if z.body_system == system]

    def all_body_systems(self) -> List[BodySystem]:
        systems = {z.body_system for zones in self._zones.values() for z in zones}
        return sorted(systems, key=lambda s: s.value)


ZONE_CATALOG = ZoneCatalog({EyeSide.RIGHT: _RIGHT_EYE_ZONES, EyeSide.LEFT: _LEFT_EYE_ZONES})

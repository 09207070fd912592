"""
Iridology Analysis Data Schemas

분석 결과를 표현하는 값 객체(value object) 모음.
모든 객체는 분석 1회마다 새로 생성되며 이후 변경되지 않는다.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from iridology.core.zone_catalog import BodySystem, EyeSide, IridologyZone


@dataclass(frozen=True)
class Point2D:
    """이미지 좌표계의 2D 점 (x 오른쪽, y 아래쪽)"""

    x: float
    y: float

    def squared_distance_to(self, other: "Point2D") -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return dx * dx + dy * dy

    def distance_to(self, other: "Point2D") -> float:
        return math.sqrt(self.squared_distance_to(other))

    def angle_to(self, other: "Point2D") -> float:
        """other 방향 각도 (라디안, atan2 규약 -π ~ π)"""
        return math.atan2(other.y - self.y, other.x - self.x)


class IrisColorType(Enum):
    """홍채 색상 분류 (display name, 기준 hue)"""

    BLUE = ("blue", "Blue", 220.0)
    GREEN = ("green", "Green", 130.0)
    BROWN = ("brown", "Brown", 30.0)
    HAZEL = ("hazel", "Hazel", 60.0)
    GRAY = ("gray", "Gray", 0.0)
    AMBER = ("amber", "Amber", 45.0)
    MIXED = ("mixed", "Mixed", 0.0)

    def __init__(self, key: str, display_name: str, reference_hue: float):
        self.key = key
        self.display_name = display_name
        self.reference_hue = reference_hue

    @property
    def is_neutral(self) -> bool:
        return self in (IrisColorType.GRAY, IrisColorType.MIXED)


class PatternType(Enum):
    RADIAL = "Radial fibers"
    CIRCULAR = "Circular rings"
    CRYPTS = "Crypts"
    FURROWS = "Furrows"
    SPOTS = "Pigmentation spots"
    UNIFORM = "Uniform texture"


class InsightCategory(Enum):
    """인사이트 카테고리 (5종 고정)"""

    NUTRITION = "nutrition"
    ACTIVITY = "activity"
    STRESS = "stress"
    LIFESTYLE = "lifestyle"
    GENERAL = "general"

    @property
    def display_name(self) -> str:
        return {
            InsightCategory.NUTRITION: "Nutrition",
            InsightCategory.ACTIVITY: "Physical Activity",
            InsightCategory.STRESS: "Stress & Rest",
            InsightCategory.LIFESTYLE: "Lifestyle",
            InsightCategory.GENERAL: "General Wellness",
        }[self]


@dataclass(frozen=True)
class ColorProfile:
    """
    픽셀 집합의 색상 통계.

    Attributes:
        red, green, blue: 채널 평균 (0~255)
        brightness: 채널 평균 / 255 (0~1)
        saturation: HSV 채도 (max-min)/max (0~1)
        dominant_color: 대표 색상 분류
        hue: 평균 색상의 HSV hue (도, 0~360)
        secondary_colors: 보조 색상 (최대 2개, 빈도순)
        color_variation: hue 표준편차 / 360 (0~1)
        pixel_count: 통계에 사용된 픽셀 수 (0이면 빈 프로파일)
    """

    red: float
    green: float
    blue: float
    brightness: float
    saturation: float
    dominant_color: IrisColorType
    hue: float = 0.0
    secondary_colors: Tuple[IrisColorType, ...] = ()
    color_variation: float = 0.0
    pixel_count: int = 0

    @classmethod
    def empty(cls) -> "ColorProfile":
        return cls(red=0.0, green=0.0, blue=0.0, brightness=0.0, saturation=0.0, dominant_color=IrisColorType.MIXED)

    @property
    def is_empty(self) -> bool:
        return self.pixel_count == 0

    @property
    def has_distinct_zones(self) -> bool:
        return self.color_variation > 0.3

    @property
    def color_description(self) -> str:
        return f"{self.dominant_color.display_name} tones"

    @property
    def description(self) -> str:
        if not self.secondary_colors:
            return f"Predominantly {self.dominant_color.display_name}"
        secondary = ", ".join(c.display_name for c in self.secondary_colors)
        return f"{self.dominant_color.display_name} with {secondary} accents"


@dataclass(frozen=True)
class TextureFeatures:
    """텍스처 특징 (uniformity = 1 - 정규화 분산, density = 평균 밝기)"""

    uniformity: float
    density: float
    patterns: Tuple[PatternType, ...] = ()
    pattern_strength: float = 0.0

    @classmethod
    def empty(cls) -> "TextureFeatures":
        return cls(uniformity=0.0, density=0.0)

    @property
    def is_uniform(self) -> bool:
        return self.uniformity > 0.7

    @property
    def primary_pattern(self) -> Optional[PatternType]:
        return self.patterns[0] if self.patterns else None


@dataclass(frozen=True)
class ZoneAnalysis:
    """
    Zone 1개의 분석 결과.

    is_notable 판정 임계값은 ScoringConfig.notable_threshold에서 복사되어
    결과와 함께 보관된다.
    """

    zone: IridologyZone
    color_profile: ColorProfile
    texture_features: TextureFeatures
    observations: Tuple[str, ...]
    significance_score: float
    notable_threshold: float = 0.5

    @property
    def is_notable(self) -> bool:
        return self.significance_score >= self.notable_threshold

    @property
    def primary_observation(self) -> Optional[str]:
        return self.observations[0] if self.observations else None


@dataclass(frozen=True)
class WellnessInsight:
    id: str
    body_system: BodySystem
    title: str
    description: str
    reflection_prompts: Tuple[str, ...]
    category: InsightCategory
    confidence: float
    related_zones: Tuple[str, ...] = ()

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence > 0.7

    @property
    def confidence_level(self) -> str:
        if self.confidence > 0.8:
            return "Strong"
        if self.confidence > 0.6:
            return "Moderate"
        return "Subtle"


@dataclass(frozen=True)
class IridologyAnalysis:
    """
    한 쪽 눈의 전체 분석 결과 (루트 객체).

    zone_analyses는 카탈로그 순서와 1:1 대응한다.
    """

    id: str
    eye_side: EyeSide
    zone_analyses: Tuple[ZoneAnalysis, ...]
    insights: Tuple[WellnessInsight, ...]
    overall_color_profile: ColorProfile
    timestamp: datetime
    analysis_confidence: float
    processing_time_ms: float = field(default=0.0, compare=False)

    def get_insights_for_system(self, body_system: BodySystem) -> List[WellnessInsight]:
        return [i for i in self.insights if i.body_system == body_system]

    def get_zone_analysis(self, zone_id: str) -> Optional[ZoneAnalysis]:
        for analysis in self.zone_analyses:
            if analysis.zone.id == zone_id:
                return analysis
        return None

    @property
    def body_systems(self) -> List[BodySystem]:
        systems = {insight.body_system for insight in self.insights}
        return sorted(systems, key=lambda s: s.value)

    @property
    def notable_zones(self) -> List[ZoneAnalysis]:
        return [z for z in self.zone_analyses if z.is_notable]

    @property
    def summary(self) -> str:
        return f"{len(self.insights)} wellness insights across {len(self.body_systems)} body systems"

    def to_dict(self) -> Dict[str, Any]:
        """JSON 직렬화 가능한 dict로 변환"""
        return {
            "id": self.id,
            "eye_side": self.eye_side.value,
            "timestamp": self.timestamp.isoformat(),
            "analysis_confidence": float(self.analysis_confidence),
            "processing_time_ms": float(self.processing_time_ms),
            "overall_color_profile": _color_profile_to_dict(self.overall_color_profile),
            "zone_analyses": [
                {
                    "zone_id": z.zone.id,
                    "zone_name": z.zone.name,
                    "body_system": z.zone.body_system.value,
                    "color_profile": _color_profile_to_dict(z.color_profile),
                    "texture_features": {
                        "uniformity": float(z.texture_features.uniformity),
                        "density": float(z.texture_features.density),
                        "patterns": [p.name.lower() for p in z.texture_features.patterns],
                        "pattern_strength": float(z.texture_features.pattern_strength),
                    },
                    "observations": list(z.observations),
                    "significance_score": float(z.significance_score),
                    "is_notable": z.is_notable,
                }
                for z in self.zone_analyses
            ],
            "insights": [
                {
                    "id": i.id,
                    "body_system": i.body_system.value,
                    "title": i.title,
                    "description": i.description,
                    "reflection_prompts": list(i.reflection_prompts),
                    "category": i.category.value,
                    "confidence": float(i.confidence),
                    "related_zones": list(i.related_zones),
                }
                for i in self.insights
            ],
            "summary": self.summary,
        }


def _color_profile_to_dict(profile: ColorProfile) -> Dict[str, Any]:
    return {
        "red": float(profile.red),
        "green": float(profile.green),
        "blue": float(profile.blue),
        "brightness": float(profile.brightness),
        "saturation": float(profile.saturation),
        "hue": float(profile.hue),
        "dominant_color": profile.dominant_color.key,
        "secondary_colors": [c.key for c in profile.secondary_colors],
        "color_variation": float(profile.color_variation),
        "pixel_count": int(profile.pixel_count),
    }

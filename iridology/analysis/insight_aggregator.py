"""
Insight Aggregator Module

Zone별 색상/텍스처 특징을 유의도 점수(significance)와 관찰 문구로 변환하고,
신체 계통별로 묶어 웰니스 인사이트를 생성한다.

점수 정책(가중치·임계값)은 모두 ScoringConfig 하나에 모여 있으며
InsightAggregator 생성 시 명시적으로 주입된다.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from iridology.core.zone_catalog import BodySystem, EyeSide, IridologyZone
from iridology.schemas.analysis import (
    ColorProfile,
    InsightCategory,
    TextureFeatures,
    WellnessInsight,
    ZoneAnalysis,
)

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA_OBSERVATION = "Insufficient data for this zone"

# 신체 계통 → 인사이트 카테고리 (모든 BodySystem에 대해 정의)
SYSTEM_CATEGORIES: Dict[BodySystem, InsightCategory] = {
    BodySystem.DIGESTIVE: InsightCategory.NUTRITION,
    BodySystem.RESPIRATORY: InsightCategory.ACTIVITY,
    BodySystem.CARDIOVASCULAR: InsightCategory.ACTIVITY,
    BodySystem.MUSCULOSKELETAL: InsightCategory.ACTIVITY,
    BodySystem.NERVOUS: InsightCategory.STRESS,
    BodySystem.URINARY: InsightCategory.LIFESTYLE,
    BodySystem.IMMUNE: InsightCategory.LIFESTYLE,
    BodySystem.ENDOCRINE: InsightCategory.LIFESTYLE,
}


def category_for_system(system: Union[BodySystem, str]) -> InsightCategory:
    """
    신체 계통의 인사이트 카테고리.

    문자열 입력 중 알 수 없는 계통은 GENERAL로 처리한다.
    """
    if not isinstance(system, BodySystem):
        try:
            system = BodySystem(system)
        except ValueError:
            return InsightCategory.GENERAL
    return SYSTEM_CATEGORIES[system]


@dataclass(frozen=True)
class ScoringConfig:
    """
    유의도 점수 및 인사이트 생성 정책

    Attributes:
        brightness_low / brightness_high: 정상 밝기 구간 (벗어나면 brightness_weight 가산)
        saturation_threshold / saturation_weight: 채도 초과 시 가산
        uniformity_threshold / uniformity_weight: 균일도 미달 시 가산
        observation_weight: 관찰 문구 1개당 가산
        dark_threshold / light_threshold / intensity_threshold: 관찰 문구 생성 임계값
        notable_threshold: is_notable 판정 기준 (score >= threshold)
        generic_confidence: notable zone 없는 계통의 인사이트 신뢰도
        generic_prompt_count: 일반 인사이트에 사용하는 질문 개수
        confidence_scale / confidence_floor: 전체 신뢰도 = mean × scale + floor
    """

    brightness_low: float = 0.3
    brightness_high: float = 0.7
    brightness_weight: float = 0.3
    saturation_threshold: float = 0.5
    saturation_weight: float = 0.2
    uniformity_threshold: float = 0.6
    uniformity_weight: float = 0.2
    observation_weight: float = 0.1
    dark_threshold: float = 0.3
    light_threshold: float = 0.7
    intensity_threshold: float = 0.6
    notable_threshold: float = 0.5
    generic_confidence: float = 0.5
    generic_prompt_count: int = 2
    confidence_scale: float = 0.7
    confidence_floor: float = 0.3


class InsightAggregator:
    """
    Zone 분석 결과 집계기

    1. Zone별 관찰 문구 생성 (비어 있지 않음 보장)
    2. 가산식 유의도 점수 (0~1 clamp)
    3. 신체 계통별 그룹화 → 인사이트
    4. 전체 분석 신뢰도
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def compute_significance(
        self, color_profile: ColorProfile, texture_features: TextureFeatures, observations: Sequence[str]
    ) -> float:
        cfg = self.config
        score = 0.0

        # 밝기 극단값
        if color_profile.brightness < cfg.brightness_low or color_profile.brightness > cfg.brightness_high:
            score += cfg.brightness_weight

        if color_profile.saturation > cfg.saturation_threshold:
            score += cfg.saturation_weight

        if texture_features.uniformity < cfg.uniformity_threshold:
            score += cfg.uniformity_weight

        score += cfg.observation_weight * len(observations)

        # 합계가 1을 넘는 것은 정상이며 clamp로 포화시킨다
        return float(np.clip(score, 0.0, 1.0))

    def generate_observations(
        self, zone: IridologyZone, color_profile: ColorProfile, overall_profile: ColorProfile
    ) -> Tuple[str, ...]:
        cfg = self.config
        observations: List[str] = []

        if color_profile.brightness < cfg.dark_threshold:
            observations.append(f"Darker pigmentation in {zone.name} zone")
        elif color_profile.brightness > cfg.light_threshold:
            observations.append(f"Lighter coloration in {zone.name} zone")

        if color_profile.saturation > cfg.intensity_threshold:
            observations.append(f"Notable color intensity in {zone.name}")

        if color_profile.dominant_color != overall_profile.dominant_color:
            observations.append(f"Color variation in {zone.name} area")

        if not observations:
            observations.append(f"{zone.name} shows typical characteristics")

        return tuple(observations)

    def empty_zone_analysis(self, zone: IridologyZone) -> ZoneAnalysis:
        """픽셀이 없는 Zone의 최소 분석 결과 (유의도 0)"""
        return ZoneAnalysis(
            zone=zone,
            color_profile=ColorProfile.empty(),
            texture_features=TextureFeatures.empty(),
            observations=(INSUFFICIENT_DATA_OBSERVATION,),
            significance_score=0.0,
            notable_threshold=self.config.notable_threshold,
        )

    def build_zone_analysis(
        self,
        zone: IridologyZone,
        color_profile: ColorProfile,
        texture_features: TextureFeatures,
        overall_profile: ColorProfile,
    ) -> ZoneAnalysis:
        observations = self.generate_observations(zone, color_profile, overall_profile)
        significance = self.compute_significance(color_profile, texture_features, observations)
        return ZoneAnalysis(
            zone=zone,
            color_profile=color_profile,
            texture_features=texture_features,
            observations=observations,
            significance_score=significance,
            notable_threshold=self.config.notable_threshold,
        )

    def generate_insights(
        self, zone_analyses: Sequence[ZoneAnalysis], eye_side: Union[EyeSide, str, bool]
    ) -> Tuple[WellnessInsight, ...]:
        """
        신체 계통별 인사이트 생성 (계통 첫 등장 순서 유지).

        - notable zone이 있으면 그중 유의도가 가장 높은 zone의 설명/질문 사용
          (동점이면 카탈로그 순서상 앞선 zone)
        - 없으면 계통 전체에 대한 일반 인사이트 (신뢰도 generic_confidence)
        """
        eye_side = EyeSide.parse(eye_side)
        groups: Dict[BodySystem, List[ZoneAnalysis]] = {}
        for analysis in zone_analyses:
            groups.setdefault(analysis.zone.body_system, []).append(analysis)

        insights: List[WellnessInsight] = []
        for system, analyses in groups.items():
            insight_id = f"{eye_side.value}-{system.value.lower()}"
            category = category_for_system(system)
            notable = [a for a in analyses if a.is_notable]

            if notable:
                top = max(notable, key=lambda a: a.significance_score)
                insights.append(
                    WellnessInsight(
                        id=insight_id,
                        body_system=system,
                        title=top.zone.name,
                        description=top.zone.description,
                        reflection_prompts=tuple(top.zone.wellness_reflections),
                        category=category,
                        confidence=top.significance_score,
                        related_zones=tuple(a.zone.id for a in notable),
                    )
                )
            else:
                first_zone = analyses[0].zone
                insights.append(
                    WellnessInsight(
                        id=insight_id,
                        body_system=system,
                        title=f"{system.value} System",
                        description=f"General wellness reflection for {system.value}",
                        reflection_prompts=tuple(first_zone.wellness_reflections[: self.config.generic_prompt_count]),
                        category=category,
                        confidence=self.config.generic_confidence,
                        related_zones=tuple(a.zone.id for a in analyses),
                    )
                )

        logger.debug(f"Generated {len(insights)} insights for {eye_side.value} eye")
        return tuple(insights)

    def calculate_confidence(self, zone_analyses: Sequence[ZoneAnalysis]) -> float:
        """전체 신뢰도 = mean(significance) × scale + floor, 빈 입력이면 0.0"""
        if not zone_analyses:
            return 0.0
        mean = float(np.mean([a.significance_score for a in zone_analyses]))
        confidence = mean * self.config.confidence_scale + self.config.confidence_floor
        return float(np.clip(confidence, 0.0, 1.0))

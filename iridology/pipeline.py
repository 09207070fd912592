"""
Iridology Analysis Pipeline Module

ZoneCatalog → ZoneSegmenter → ColorAnalyzer + TextureAnalyzer → InsightAggregator
순서로 모듈을 연결하여 한 쪽 눈의 분석 결과(IridologyAnalysis)를 생성한다.

분석 코어는 동기식 순수 함수이며 파일/네트워크 I/O를 하지 않는다
(analyze_file은 바이트 읽기만 추가한 편의 래퍼).
"""

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from iridology.analysis.insight_aggregator import InsightAggregator
from iridology.analysis.texture_analyzer import TextureAnalyzer
from iridology.config.settings import AnalysisConfig
from iridology.core.color_analyzer import ColorAnalyzer
from iridology.core.zone_catalog import ZONE_CATALOG, EyeSide, IridologyZone, ZoneCatalog
from iridology.core.zone_segmenter import ZoneSegmenter
from iridology.schemas.analysis import ColorProfile, IridologyAnalysis, ZoneAnalysis
from iridology.utils.file_io import read_bytes
from iridology.utils.image_utils import decode_image, to_rgb

logger = logging.getLogger(__name__)


class IridologyPipeline:
    """
    엔드투엔드 홍채 Zone 분석 파이프라인.

    zone_analyses는 항상 카탈로그 Zone 수와 같은 길이이며 순서도 동일하다.
    픽셀이 없는 Zone도 생략하지 않고 최소 분석 결과로 채운다.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None, catalog: ZoneCatalog = ZONE_CATALOG):
        """
        Args:
            config: 분석 설정 (None이면 기본값)
            catalog: Zone 카탈로그 (기본값: 공유 ZONE_CATALOG)
        """
        self.config = config or AnalysisConfig()
        self.catalog = catalog

        self.zone_segmenter = ZoneSegmenter(self.config.segmenter, catalog=catalog)
        self.color_analyzer = ColorAnalyzer(self.config.color)
        self.texture_analyzer = TextureAnalyzer(self.config.texture)
        self.insight_aggregator = InsightAggregator(self.config.scoring)

        logger.info(
            f"IridologyPipeline initialized (parallel={self.config.parallel}, "
            f"notable_threshold={self.config.scoring.notable_threshold})"
        )

    def analyze_iris(self, image_bytes: bytes, eye_side: Union[EyeSide, str, bool]) -> IridologyAnalysis:
        """
        인코딩된 이미지 바이트를 분석.

        Raises:
            ImageDecodeError: 이미지로 해석할 수 없는 바이트 (부분 결과 없음)
        """
        image = decode_image(image_bytes)
        return self.analyze_image(image, eye_side)

    def analyze_file(self, image_path: Union[str, Path], eye_side: Union[EyeSide, str, bool]) -> IridologyAnalysis:
        logger.info(f"Processing image: {image_path}")
        return self.analyze_iris(read_bytes(Path(image_path)), eye_side)

    def analyze_image(self, image: np.ndarray, eye_side: Union[EyeSide, str, bool]) -> IridologyAnalysis:
        """
        디코딩된 RGB 이미지를 분석.

        Args:
            image: (H × W × 3|4) uint8 RGB(A) 배열
            eye_side: 눈 방향

        Returns:
            IridologyAnalysis
        """
        start_time = datetime.now()
        eye_side = EyeSide.parse(eye_side)
        image = to_rgb(image)
        zones = self.catalog.zones_for(eye_side)

        logger.debug(f"Analyzing {eye_side.value} eye: {image.shape[1]}x{image.shape[0]}, {len(zones)} zones")

        # 1. 전체 색상 프로파일 (baseline, 1회)
        overall_profile = self.color_analyzer.analyze_overall_color(image)

        # 2. Zone별 분석
        zone_analyses = self._analyze_zones(image, zones, overall_profile)

        # 3. 인사이트 및 신뢰도
        insights = self.insight_aggregator.generate_insights(zone_analyses, eye_side)
        confidence = self.insight_aggregator.calculate_confidence(zone_analyses)

        processing_time = (datetime.now() - start_time).total_seconds() * 1000  # ms

        analysis = IridologyAnalysis(
            id=str(uuid.uuid4()),
            eye_side=eye_side,
            zone_analyses=tuple(zone_analyses),
            insights=insights,
            overall_color_profile=overall_profile,
            timestamp=datetime.now(),
            analysis_confidence=confidence,
            processing_time_ms=processing_time,
        )

        logger.info(
            f"Analysis complete: {eye_side.value} eye, {len(zone_analyses)} zones, "
            f"{len(analysis.notable_zones)} notable, confidence={confidence:.2f}, "
            f"time={processing_time:.1f}ms"
        )
        return analysis

    def analyze_zone(self, image: np.ndarray, zone: IridologyZone, overall_profile: ColorProfile) -> ZoneAnalysis:
        """Zone 1개: 분할 → 색상 → 텍스처 → 관찰 → 유의도"""
        pixels = self.zone_segmenter.extract_zone_pixels(image, zone)
        if pixels.shape[0] == 0:
            return self.insight_aggregator.empty_zone_analysis(zone)

        color_profile = self.color_analyzer.analyze_pixels(pixels)
        texture_features = self.texture_analyzer.analyze_texture(pixels)
        analysis = self.insight_aggregator.build_zone_analysis(zone, color_profile, texture_features, overall_profile)

        logger.debug(
            f"Zone {zone.id}: pixels={pixels.shape[0]}, color={color_profile.dominant_color.key}, "
            f"brightness={color_profile.brightness:.3f}, uniformity={texture_features.uniformity:.3f}, "
            f"significance={analysis.significance_score:.2f}"
        )
        return analysis

    def _analyze_zones(self, image: np.ndarray, zones, overall_profile: ColorProfile) -> List[ZoneAnalysis]:
        if not self.config.parallel or len(zones) < 2:
            return [self.analyze_zone(image, zone, overall_profile) for zone in zones]

        # Zone 단위 병렬 처리 후 카탈로그 순서로 재정렬
        results: List[Optional[ZoneAnalysis]] = [None] * len(zones)
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            future_to_index = {
                executor.submit(self.analyze_zone, image, zone, overall_profile): i for i, zone in enumerate(zones)
            }
            for future, index in future_to_index.items():
                results[index] = future.result()

        return results

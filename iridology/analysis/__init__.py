"""
Analysis module - 텍스처 분석 및 인사이트 집계
"""

from iridology.analysis.insight_aggregator import InsightAggregator, ScoringConfig, category_for_system
from iridology.analysis.texture_analyzer import TextureAnalyzer, TextureConfig

__all__ = ["InsightAggregator", "ScoringConfig", "category_for_system", "TextureAnalyzer", "TextureConfig"]

"""
Integration tests for IridologyPipeline
"""

import json

import numpy as np
import pytest

from iridology.config.settings import AnalysisConfig
from iridology.core.zone_catalog import ZONE_CATALOG, EyeSide
from iridology.pipeline import IridologyPipeline
from iridology.schemas.analysis import IrisColorType
from iridology.utils.image_utils import ImageDecodeError, encode_png


@pytest.mark.parametrize("side", [EyeSide.LEFT, EyeSide.RIGHT])
def test_zone_analyses_follow_catalog(pipeline, gray_image, side):
    result = pipeline.analyze_image(gray_image, side)
    assert result.eye_side is side
    assert [z.zone.id for z in result.zone_analyses] == [z.id for z in ZONE_CATALOG.zones_for(side)]


@pytest.mark.parametrize("side", ["left", "right"])
def test_uniform_gray_image(pipeline, gray_image, side):
    result = pipeline.analyze_image(gray_image, side)

    assert result.overall_color_profile.dominant_color is IrisColorType.GRAY
    for za in result.zone_analyses:
        assert za.color_profile.dominant_color is IrisColorType.GRAY
        assert za.texture_features.uniformity == pytest.approx(1.0)
        assert za.texture_features.density == pytest.approx(128 / 255)
        assert za.observations == (f"{za.zone.name} shows typical characteristics",)
        assert za.significance_score == pytest.approx(0.1)
        assert not za.is_notable

    assert result.notable_zones == []
    assert result.analysis_confidence == pytest.approx(0.1 * 0.7 + 0.3)
    assert all(i.confidence == pytest.approx(0.5) for i in result.insights)
    assert {i.body_system for i in result.insights} == {z.body_system for z in ZONE_CATALOG.zones_for(side)}


def test_black_image(pipeline, black_image):
    result = pipeline.analyze_image(black_image, "left")
    for za in result.zone_analyses:
        assert za.color_profile.brightness == pytest.approx(0.0)
        assert za.texture_features.uniformity == pytest.approx(1.0)
        assert f"Darker pigmentation in {za.zone.name} zone" in za.observations
        assert za.significance_score == pytest.approx(0.4)


def test_dark_center_is_notable(pipeline, dark_center_image):
    result = pipeline.analyze_image(dark_center_image, "right")
    stomach = result.get_zone_analysis("re_stomach")

    assert stomach.is_notable
    assert "Darker pigmentation in Stomach zone" in stomach.observations
    assert "Color variation in Stomach area" in stomach.observations

    digestive = [i for i in result.insights if i.body_system.value == "Digestive"]
    assert len(digestive) == 1
    assert digestive[0].title == "Stomach"
    assert digestive[0].related_zones == ("re_stomach",)
    assert digestive[0].confidence == pytest.approx(stomach.significance_score)


def test_results_are_bounded(pipeline):
    rng = np.random.default_rng(11)
    image = rng.integers(0, 256, size=(80, 120, 3), dtype=np.uint8)
    result = pipeline.analyze_image(image, "left")

    assert 0.0 <= result.analysis_confidence <= 1.0
    for za in result.zone_analyses:
        assert 0.0 <= za.significance_score <= 1.0
        assert za.observations
    for insight in result.insights:
        assert 0.0 <= insight.confidence <= 1.0


def test_analysis_is_repeatable(pipeline, dark_center_image):
    first = pipeline.analyze_image(dark_center_image, "right")
    second = pipeline.analyze_image(dark_center_image, "right")
    assert first.id != second.id
    assert first.zone_analyses == second.zone_analyses
    assert first.insights == second.insights
    assert first.overall_color_profile == second.overall_color_profile
    assert first.analysis_confidence == second.analysis_confidence


def test_parallel_matches_sequential(dark_center_image):
    sequential = IridologyPipeline().analyze_image(dark_center_image, "left")
    parallel = IridologyPipeline(AnalysisConfig(parallel=True, max_workers=3)).analyze_image(dark_center_image, "left")
    assert parallel.zone_analyses == sequential.zone_analyses
    assert parallel.insights == sequential.insights


def test_tiny_image_gives_empty_zones(pipeline):
    image = np.full((1, 1, 3), 200, dtype=np.uint8)
    result = pipeline.analyze_image(image, "right")

    assert len(result.zone_analyses) == len(ZONE_CATALOG.zones_for("right"))
    for za in result.zone_analyses:
        assert za.significance_score == 0.0
        assert za.observations == ("Insufficient data for this zone",)
    assert result.analysis_confidence == pytest.approx(0.3)


def test_rgba_input(pipeline, gray_image):
    rgba = np.dstack([gray_image, np.full((100, 100), 255, dtype=np.uint8)])
    result = pipeline.analyze_image(rgba, "left")
    expected = pipeline.analyze_image(gray_image, "left")
    assert result.zone_analyses == expected.zone_analyses


# ================================================================
# 바이트 / 파일 입력
# ================================================================


def test_analyze_iris_bytes(pipeline, gray_png_bytes, gray_image):
    from_bytes = pipeline.analyze_iris(gray_png_bytes, "right")
    from_array = pipeline.analyze_image(gray_image, "right")
    assert from_bytes.zone_analyses == from_array.zone_analyses


@pytest.mark.parametrize("data", [b"", b"not an image at all"])
def test_analyze_iris_invalid_bytes(pipeline, data):
    with pytest.raises(ImageDecodeError):
        pipeline.analyze_iris(data, "left")


def test_analyze_iris_invalid_eye(pipeline, gray_png_bytes):
    with pytest.raises(ValueError):
        pipeline.analyze_iris(gray_png_bytes, "middle")


def test_analyze_file(pipeline, tmp_path, dark_center_image):
    path = tmp_path / "eye.png"
    path.write_bytes(encode_png(dark_center_image))
    result = pipeline.analyze_file(path, EyeSide.RIGHT)
    assert result.get_zone_analysis("re_stomach").is_notable


def test_analyze_file_missing(pipeline, tmp_path):
    with pytest.raises(FileNotFoundError):
        pipeline.analyze_file(tmp_path / "missing.png", "left")


# ================================================================
# 결과 객체
# ================================================================


def test_to_dict_is_json_serializable(pipeline, dark_center_image):
    result = pipeline.analyze_image(dark_center_image, "right")
    data = json.loads(json.dumps(result.to_dict()))

    assert data["eye_side"] == "right"
    assert len(data["zone_analyses"]) == len(result.zone_analyses)
    assert data["zone_analyses"][0]["zone_id"] == "re_stomach"
    assert data["zone_analyses"][0]["texture_features"]["patterns"] == ["uniform"]
    assert data["overall_color_profile"]["dominant_color"] == "gray"
    assert data["summary"] == result.summary


def test_result_helpers(pipeline, gray_image):
    result = pipeline.analyze_image(gray_image, "left")
    assert result.get_zone_analysis("le_spleen").zone.name == "Spleen"
    assert result.get_zone_analysis("re_spleen") is None
    assert result.body_systems == sorted(result.body_systems, key=lambda s: s.value)
    immune = [i for s in result.body_systems for i in result.get_insights_for_system(s) if s.value == "Immune"]
    assert len(immune) == 1
    assert result.summary == f"{len(result.insights)} wellness insights across {len(result.body_systems)} body systems"

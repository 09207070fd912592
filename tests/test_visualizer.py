"""
Tests for ZoneVisualizer

- Body-system overlay blending
- Zone centre markers
- Significance chart (figure / file output)
"""

from datetime import datetime

import matplotlib.pyplot as plt
import numpy as np
import pytest

from iridology.core.zone_catalog import BodySystem, EyeSide
from iridology.schemas.analysis import ColorProfile, IridologyAnalysis
from iridology.visualizer import VisualizationError, VisualizerConfig, ZoneVisualizer


@pytest.fixture
def visualizer():
    return ZoneVisualizer()


@pytest.fixture
def gray_analysis(pipeline, gray_image):
    return pipeline.analyze_image(gray_image, "right")


def test_visualize_zones_blends_center(visualizer, gray_image):
    """Center pixel lies only in the stomach zone (Digestive colour)"""
    overlay = visualizer.visualize_zones(gray_image, EyeSide.RIGHT)

    assert overlay.shape == gray_image.shape
    assert overlay.dtype == np.uint8
    assert overlay[50, 50].tolist() == [191, 114, 114]


def test_visualize_zones_leaves_corners(visualizer, gray_image):
    overlay = visualizer.visualize_zones(gray_image, "left")
    assert overlay[0, 0].tolist() == [128, 128, 128]
    assert np.all(gray_image == 128)  # input untouched


def test_visualize_zones_custom_colors(gray_image):
    config = VisualizerConfig(system_colors={BodySystem.DIGESTIVE: (0, 0, 0)}, blend_ratio=1.0)
    overlay = ZoneVisualizer(config).visualize_zones(gray_image, "right")
    assert overlay[50, 50].tolist() == [0, 0, 0]


def test_visualize_zones_fallback_color(gray_image):
    config = VisualizerConfig(system_colors={}, fallback_color=(10, 20, 30), blend_ratio=1.0)
    overlay = ZoneVisualizer(config).visualize_zones(gray_image, "left")
    assert overlay[50, 50].tolist() == [10, 20, 30]


def test_draw_zone_centers(visualizer, gray_image):
    marked = visualizer.draw_zone_centers(gray_image, "right")
    assert marked.shape == gray_image.shape
    assert not np.array_equal(marked, gray_image)
    assert np.all(gray_image == 128)


def test_plot_significance_figure(visualizer, gray_analysis):
    fig = visualizer.plot_significance(gray_analysis)

    assert isinstance(fig, plt.Figure)
    ax = fig.get_axes()[0]
    assert len(ax.patches) == len(gray_analysis.zone_analyses)

    plt.close(fig)


def test_plot_significance_saves_file(visualizer, gray_analysis, tmp_path):
    output_path = tmp_path / "charts" / "significance.png"
    result = visualizer.plot_significance(gray_analysis, output_path)

    assert result == output_path
    assert output_path.exists()
    assert output_path.stat().st_size > 0


def test_plot_significance_empty_analysis(visualizer):
    analysis = IridologyAnalysis(
        id="empty",
        eye_side=EyeSide.LEFT,
        zone_analyses=(),
        insights=(),
        overall_color_profile=ColorProfile.empty(),
        timestamp=datetime(2025, 1, 1),
        analysis_confidence=0.0,
    )
    with pytest.raises(VisualizationError):
        visualizer.plot_significance(analysis)

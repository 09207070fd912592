"""
Zone Visualizer

Provides visualization helpers for iridology analysis results: body-system
zone overlay, zone centre markers and a per-zone significance chart.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import cv2
import matplotlib.pyplot as plt
import numpy as np

from iridology.core.zone_catalog import ZONE_CATALOG, BodySystem, EyeSide, ZoneCatalog
from iridology.core.zone_segmenter import ZoneSegmenter
from iridology.schemas.analysis import IridologyAnalysis
from iridology.utils.image_utils import to_rgb

DEFAULT_SYSTEM_COLORS: Dict[BodySystem, Tuple[int, int, int]] = {
    BodySystem.DIGESTIVE: (255, 100, 100),
    BodySystem.RESPIRATORY: (100, 150, 255),
    BodySystem.CARDIOVASCULAR: (255, 50, 50),
    BodySystem.NERVOUS: (200, 100, 255),
    BodySystem.URINARY: (100, 200, 255),
    BodySystem.IMMUNE: (100, 255, 100),
    BodySystem.ENDOCRINE: (255, 200, 100),
    BodySystem.MUSCULOSKELETAL: (180, 180, 120),
}


@dataclass
class VisualizerConfig:
    """Visualizer configuration"""

    # Overlay (RGB colours)
    system_colors: Dict[BodySystem, Tuple[int, int, int]] = field(default_factory=lambda: dict(DEFAULT_SYSTEM_COLORS))
    fallback_color: Tuple[int, int, int] = (200, 200, 200)
    blend_ratio: float = 0.5  # share of the zone colour in the blended pixel
    skip_full_ring_zones: bool = False

    # Centre markers
    marker_color: Tuple[int, int, int] = (255, 255, 255)
    marker_size: int = 6
    marker_thickness: int = 1

    # Significance chart
    chart_figure_size: Tuple[int, int] = (10, 5)
    chart_dpi: int = 100
    notable_color: str = "#d9534f"
    regular_color: str = "#5bc0de"
    show_threshold_line: bool = True


class VisualizationError(Exception):
    """Base exception for visualization errors"""

    pass


class ZoneVisualizer:
    """
    Iridology zone visualizer

    All images are RGB uint8 arrays; nothing is written to disk unless an
    output path is given.
    """

    def __init__(
        self,
        config: Optional[VisualizerConfig] = None,
        segmenter: Optional[ZoneSegmenter] = None,
        catalog: ZoneCatalog = ZONE_CATALOG,
    ):
        self.config = config or VisualizerConfig()
        self.catalog = catalog
        self.segmenter = segmenter or ZoneSegmenter(catalog=catalog)

    def visualize_zones(self, image: np.ndarray, eye_side: Union[EyeSide, str, bool]) -> np.ndarray:
        """
        Blend each zone's body-system colour into the image.

        Zones are painted in catalog order, so later zones are blended on top
        of earlier ones where they overlap.

        Args:
            image: Input image (RGB, np.ndarray)
            eye_side: Which eye's zone layout to draw

        Returns:
            Overlaid image (RGB, np.ndarray)
        """
        image = to_rgb(image)
        height, width = image.shape[:2]
        overlay = image.astype(np.float32)
        ratio = float(np.clip(self.config.blend_ratio, 0.0, 1.0))

        for zone in self.catalog.zones_for(eye_side):
            if self.config.skip_full_ring_zones and zone.angular_span >= 2 * np.pi:
                continue
            color = np.array(self.config.system_colors.get(zone.body_system, self.config.fallback_color), np.float32)
            mask = self.segmenter.zone_mask(width, height, zone)
            overlay[mask] = overlay[mask] * (1.0 - ratio) + color * ratio

        return np.clip(overlay, 0, 255).astype(np.uint8)

    def draw_zone_centers(self, image: np.ndarray, eye_side: Union[EyeSide, str, bool]) -> np.ndarray:
        """Draw a cross marker at every zone's closed-form centre point."""
        out = to_rgb(image).copy()
        height, width = out.shape[:2]
        for zone in self.catalog.zones_for(eye_side):
            center = self.segmenter.get_zone_center(width, height, zone)
            cv2.drawMarker(
                out,
                (int(round(center.x)), int(round(center.y))),
                self.config.marker_color,
                cv2.MARKER_CROSS,
                self.config.marker_size,
                self.config.marker_thickness,
            )
        return out

    def plot_significance(self, analysis: IridologyAnalysis, output_path: Optional[Path] = None):
        """
        Bar chart of per-zone significance scores.

        Args:
            analysis: Analysis result
            output_path: Save the chart here (figure is closed afterwards)

        Returns:
            matplotlib Figure when output_path is None, otherwise the saved path
        """
        if not analysis.zone_analyses:
            raise VisualizationError("Analysis has no zone results to plot")

        names = [z.zone.name for z in analysis.zone_analyses]
        scores = [z.significance_score for z in analysis.zone_analyses]
        colors = [self.config.notable_color if z.is_notable else self.config.regular_color for z in analysis.zone_analyses]

        fig, ax = plt.subplots(figsize=self.config.chart_figure_size, dpi=self.config.chart_dpi)
        ax.bar(range(len(names)), scores, color=colors)
        ax.set_xticks(range(len(names)))
        ax.set_xticklabels(names, rotation=45, ha="right")
        ax.set_ylim(0.0, 1.0)
        ax.set_ylabel("Significance")
        ax.set_title(f"Zone significance ({analysis.eye_side.value} eye, confidence {analysis.analysis_confidence:.2f})")

        if self.config.show_threshold_line:
            threshold = analysis.zone_analyses[0].notable_threshold
            ax.axhline(threshold, color="gray", linestyle="--", linewidth=1, label=f"Notable ≥ {threshold:.2f}")
            ax.legend(loc="upper right")

        fig.tight_layout()

        if output_path is None:
            return fig

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(str(output_path), dpi=self.config.chart_dpi, bbox_inches="tight")
        plt.close(fig)
        return output_path

"""
Core Algorithm Modules

Contains the main algorithmic components for iris zone analysis:
- ZoneCatalog: Fixed per-eye zone layout in normalized polar coordinates
- ZoneSegmenter: Pixel-to-zone mapping, masks, bounding boxes
- ColorAnalyzer: Color profiling and iris color classification
"""

__all__ = [
    "ZoneCatalog",
    "ZoneSegmenter",
    "ColorAnalyzer",
]

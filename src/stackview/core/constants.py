"""
Layout and rendering defaults for stackview.

Defines the pixel sizes, minimum sizes, and fallback values consumed by
``stackview.io.config.ViewDefaults``. This module is zero-IO and uses only the Python
standard library.

Notes:
    - ViewDefaults copies these values into an immutable configuration object; the
      pipeline never reads this module directly.
    - Pixel values describe the render surface handed over by the host.
"""

from __future__ import annotations

__all__ = [
    "MARGIN_TOP",
    "MARGIN_RIGHT",
    "MARGIN_BOTTOM",
    "MARGIN_LEFT",
    "SVG_TOP_PADDING",
    "SVG_BOTTOM_PADDING",
    "SCROLLBAR_SPACE",
    "PLOT_TITLE_HEIGHT",
    "X_LABEL_SPACE",
    "HEATMAP_SPACE",
    "LEGEND_HEIGHT",
    "LEGEND_TOP_MARGIN",
    "MIN_PLOT_HEIGHT",
    "MIN_PLOT_WIDTH",
    "BREAK_GAP_SIZE",
    "TOOLTIP_PRECISION",
    "HEATMAP_BINS",
    "HEATMAP_COLOR_SCHEME",
    "MAXIMUM_ZOOM",
    "REGION_OVERLAY_OPACITY",
    "LEGEND_PALETTE",
    "PLOT_SETTINGS",
    "AXIS_SETTINGS",
    "AXIS_LABEL_SETTINGS",
    "OVERLAY_PLOT_SETTINGS",
    "Y_RANGE_SETTINGS",
    "X_AXIS_BREAK_SETTINGS",
    "COLOR_SETTINGS",
    "HEATMAP_SETTINGS",
    "ZOOMING_SETTINGS",
    "LEGEND_SETTINGS",
    "TOOLTIP_TITLE_SETTINGS",
    "GENERAL_SETTINGS",
]

# Per-plot margins around the drawing area (top/bottom are reserved once per plot).
MARGIN_TOP: int = 10
MARGIN_RIGHT: int = 30
MARGIN_BOTTOM: int = 20
MARGIN_LEFT: int = 50

# Padding above the first and below the last plot of the canvas.
SVG_TOP_PADDING: int = 0
SVG_BOTTOM_PADDING: int = 0

# Space the host keeps free for scrollbars on both axes.
SCROLLBAR_SPACE: int = 10

# Decoration strips.
PLOT_TITLE_HEIGHT: int = 20
X_LABEL_SPACE: int = 20
HEATMAP_SPACE: int = 20
LEGEND_HEIGHT: int = 20
LEGEND_TOP_MARGIN: int = 5

# Below these sizes the canvas grows instead of shrinking plots further.
MIN_PLOT_HEIGHT: int = 50
MIN_PLOT_WIDTH: int = 100

# Neighboring axis values further apart than this are a break (seconds for dates).
BREAK_GAP_SIZE: float = 1.0

TOOLTIP_PRECISION: int = 2
HEATMAP_BINS: int = 100
HEATMAP_COLOR_SCHEME: str = "interpolateBuGn"
MAXIMUM_ZOOM: int = 30
REGION_OVERLAY_OPACITY: float = 0.2

# Fallback colors for categorical legends and region stripes, cycled by sorted value.
LEGEND_PALETTE: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)

# Persisted configuration groups (host wire names) and their property names.
PLOT_SETTINGS: str = "plotSettings"
AXIS_SETTINGS: str = "axisSettings"
AXIS_LABEL_SETTINGS: str = "axisLabelSettings"
OVERLAY_PLOT_SETTINGS: str = "overlayPlotSettings"
Y_RANGE_SETTINGS: str = "yRangeSettings"
X_AXIS_BREAK_SETTINGS: str = "xAxisBreakSettings"
COLOR_SETTINGS: str = "colorSettings"
HEATMAP_SETTINGS: str = "heatmapSettings"
ZOOMING_SETTINGS: str = "zoomingSettings"
LEGEND_SETTINGS: str = "legendSettings"
TOOLTIP_TITLE_SETTINGS: str = "tooltipTitleSettings"
GENERAL_SETTINGS: str = "generalSettings"

"""
stackview.viz: the data-to-view-model pipeline.

## Modules
- extract: raw dataset -> intermediate DataModel, fatal validation
- settings: three-layer settings resolution, auto Y bounds
- axis_break: dense-rank axis mapping and break points
- legends: categorical and filter legends, visibility rule
- layout: vertical stacking geometry and the shared x scale
- overlays: interval rectangles and run-length encoded region stripes
- tooltips: type-aware value formatting
- heatmap: equal-width heatmap strip binning
- palette: seeded default colors
- model: intermediate and view model types
- pipeline: stage orchestration, build_view_model
"""

from .model import ViewModel
from .pipeline import PipelineResult, build_view_model

__all__ = ["ViewModel", "PipelineResult", "build_view_model"]

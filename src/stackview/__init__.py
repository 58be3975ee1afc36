"""
stackview: turn a tabular dataset into a laid-out multi-plot view model.

One axis column plus N series columns (and optional tooltip, legend, filter-legend,
interval-overlay and region-overlay columns) go in; per-plot geometry, colors, axis-break
compression, legend selection state, overlay rectangles and formatted tooltips come out.

## Public API
- build_view_model: run the full pipeline and return a PipelineResult.
- RawDataset, RawColumn, Viewport: input contract.
- ViewDefaults: immutable configuration defaults (env/TOML loaders).
"""

from __future__ import annotations

from .core.schema import RawColumn, RawDataset, Viewport
from .io.config import ViewDefaults
from .viz.pipeline import PipelineResult, build_view_model

__all__ = [
    "build_view_model",
    "PipelineResult",
    "RawColumn",
    "RawDataset",
    "Viewport",
    "ViewDefaults",
]

__version__ = "0.1.0"

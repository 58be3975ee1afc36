"""
stackview.io: configuration defaults and file loading.

## Public API
- ViewDefaults: immutable configuration defaults with env/TOML loaders.
- load_dataset: read a CSV/Parquet table plus a JSON role file into a RawDataset.

## Import DAG discipline
- Depends only on stdlib, polars, and stackview.core.*.
- MUST NOT import stackview.viz or app.
"""

from __future__ import annotations

from .config import Margins, PlotDefaults, ViewDefaults
from .read import load_dataset

__all__ = [
    "Margins",
    "PlotDefaults",
    "ViewDefaults",
    "load_dataset",
]

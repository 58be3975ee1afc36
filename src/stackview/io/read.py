"""
Dataset loading for command-line hosts.

Reads a CSV or Parquet table with polars together with a JSON role file and produces
the RawDataset contract consumed by the pipeline. Interactive hosts build RawDataset
directly and never touch this module.

Role file format::

    {
      "columns": [
        {"name": "time", "roles": ["axis"]},
        {"name": "temp", "roles": ["series", "tooltip"], "objects": {"plotSettings": {"plotStyle": "line"}}},
        {"name": "phase", "roles": ["visual_overlay"], "type": "text"}
      ],
      "objects": {"xAxisBreakSettings": {"enable": true}}
    }

Notes
- Column ids are the column positions in the table, so they are stable per file.
- Axis columns land in ``categories``; everything else in ``values``.
- ``type`` is inferred from the polars dtype unless the role file names it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import polars as pl
from pydantic import ValidationError

from stackview.core.errors import ConfigError
from stackview.core.grammar import ColumnRole, ColumnType
from stackview.core.schema import RawColumn, RawDataset

__all__ = ["read_table", "infer_column_type", "load_dataset"]


def read_table(path: str | Path) -> pl.DataFrame:
    """Read a CSV or Parquet table, parsing date-like CSV columns."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Required file not found: {p}")
    if p.suffix.lower() in (".parquet", ".pq"):
        return pl.read_parquet(p)
    return pl.read_csv(p, try_parse_dates=True)


def infer_column_type(dtype: pl.DataType) -> ColumnType:
    """Map a polars dtype to the closed ColumnType variant."""
    if isinstance(dtype, (pl.Datetime, pl.Date)):
        return ColumnType.DATE_TIME
    if dtype.is_integer():
        return ColumnType.INTEGER
    if dtype.is_float() or dtype.is_decimal():
        return ColumnType.NUMERIC
    return ColumnType.TEXT


def _load_roles(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Required file not found: {p}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"role file {p} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("columns"), list):
        raise ConfigError(f"role file {p} must contain a 'columns' list")
    return data


def load_dataset(table_path: str | Path, roles_path: str | Path) -> RawDataset:
    """
    Load a table and its role file into a RawDataset.

    Args:
        table_path: CSV or Parquet file.
        roles_path: JSON role file (see module docstring).

    Returns:
        RawDataset: Columns in role-file order, axis columns as categories.

    Raises:
        FileNotFoundError: If either file is missing.
        ConfigError: If the role file is malformed, names an unknown column, or gives an
            unknown role or type.
    """
    df = read_table(table_path)
    role_file = _load_roles(roles_path)
    positions = {name: i for i, name in enumerate(df.columns)}

    categories: list[RawColumn] = []
    values: list[RawColumn] = []
    for entry in role_file["columns"]:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise ConfigError(f"role entry without a name: {entry!r}")
        name = entry["name"]
        if name not in positions:
            raise ConfigError(f"role file names unknown column {name!r}")
        series = df.get_column(name)
        if series.dtype == pl.Boolean:
            # Booleans travel as 0/1 so filter legends classify them as boolean.
            series = series.cast(pl.Int8)
        try:
            column = RawColumn(
                display_name=str(entry.get("display_name", name)),
                column_id=positions[name],
                type=entry.get("type") or infer_column_type(series.dtype),
                roles=entry.get("roles", []),
                values=series.to_list(),
                highlights=entry.get("highlights"),
                objects=entry.get("objects", {}),
            )
        except ValidationError as exc:
            raise ConfigError(f"role entry for {name!r} is invalid: {exc}") from exc
        if column.has_role(ColumnRole.AXIS):
            categories.append(column)
        else:
            values.append(column)

    objects = role_file.get("objects", {})
    try:
        return RawDataset(
            categories=categories,
            values=values,
            objects=objects if isinstance(objects, dict) else {},
        )
    except ValidationError as exc:
        raise ConfigError(f"role file objects are invalid: {exc}") from exc

"""
Pydantic v2 models for the raw dataset handed over by the host.

Responsibilities
- Describe the two parallel column collections (categories and values), each column
  with its roles, declared type, stable id, optional per-column configuration, and an
  optional highlighted-values array.
- Normalize role and type strings through grammar helpers once, at the boundary.
- Describe the render surface (viewport).

Style
- Zero-IO (stdlib + pydantic only).
- Models forbid unknown fields so host adapter mistakes surface early.

Examples
--------
>>> from stackview.core.schema import RawColumn, RawDataset
>>> x = RawColumn(display_name="t", column_id=0, type="numeric", roles=["axis"], values=[1, 2])
>>> y = RawColumn(display_name="y", column_id=1, type="numeric", roles=["series"], values=[3, 4])
>>> [c.display_name for c in RawDataset(categories=[x], values=[y]).columns()]
['t', 'y']
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .grammar import ColumnRole, ColumnType, column_role_from_value, column_type_from_value

__all__ = [
    "ConfigObjects",
    "RawColumn",
    "RawDataset",
    "Viewport",
]

# group name -> property name -> value
ConfigObjects = dict[str, dict[str, Any]]


class RawColumn(BaseModel):
    """
    One raw column as delivered by the host.

    Attributes:
        display_name (str): Column display name.
        column_id (int): Stable source-column id (unique within a dataset).
        type (ColumnType): Declared source type.
        roles (list[ColumnRole]): Roles the column fills; a column may fill several.
        values (list[Any]): Raw values, positionally aligned with the axis.
        highlights (list[Any] | None): Optional highlighted/filtered values.
        objects (ConfigObjects): Per-column configuration overrides.

    Notes:
        ``roles`` also accepts a mapping ``{"axis": True, ...}``; only truthy entries count.
    """

    model_config = ConfigDict(extra="forbid")

    display_name: str
    column_id: int
    type: ColumnType = ColumnType.NUMERIC
    roles: list[ColumnRole] = Field(default_factory=list)
    values: list[Any] = Field(default_factory=list)
    highlights: list[Any] | None = None
    objects: ConfigObjects = Field(default_factory=dict)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> ColumnType:
        return column_type_from_value(v)

    @field_validator("roles", mode="before")
    @classmethod
    def _normalize_roles(cls, v: Any) -> list[ColumnRole]:
        if v is None:
            return []
        if isinstance(v, dict):
            v = [k for k, flag in v.items() if flag]
        if isinstance(v, str):
            v = [v]
        out: list[ColumnRole] = []
        for item in v:
            role = column_role_from_value(item)
            if role not in out:
                out.append(role)
        return out

    def has_role(self, role: ColumnRole) -> bool:
        return role in self.roles


class RawDataset(BaseModel):
    """
    The host's dataset: two parallel column collections plus visual-level configuration.

    Attributes:
        categories (list[RawColumn]): Category columns (typically axis and grouping columns).
        values (list[RawColumn]): Value columns (typically series).
        objects (ConfigObjects): Visual-level configuration overrides.
    """

    model_config = ConfigDict(extra="forbid")

    categories: list[RawColumn] = Field(default_factory=list)
    values: list[RawColumn] = Field(default_factory=list)
    objects: ConfigObjects = Field(default_factory=dict)

    def columns(self) -> Iterator[RawColumn]:
        """Yield categories then values in discovery order, skipping repeated column ids."""
        seen: set[int] = set()
        for column in [*self.categories, *self.values]:
            if column.column_id in seen:
                continue
            seen.add(column.column_id)
            yield column


class Viewport(BaseModel):
    """Render surface dimensions in pixels; validity is checked by the layout stage."""

    model_config = ConfigDict(extra="forbid")

    width: float | None = None
    height: float | None = None

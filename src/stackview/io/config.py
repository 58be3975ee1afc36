"""
Configuration defaults for stackview.

Defines ViewDefaults, a frozen dataclass carrying the immutable hard-coded layer of the
settings resolution (per-column override > visual-level override > ViewDefaults). Values
are sourced from stackview.core.constants and may be adjusted per deployment through
TOML or environment variables.

Source of truth
- stackview.core.constants holds the built-in numbers and colors.
- stackview.viz.settings consumes ViewDefaults as its lowest-priority layer.

Notes
- Precedence for the loaders: env > TOML > defaults.
- Loose values that cannot be coerced are ignored; the previous layer wins.
- The pipeline receives a ViewDefaults instance explicitly; nothing here is global.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from stackview.core.constants import (
    BREAK_GAP_SIZE,
    HEATMAP_BINS,
    HEATMAP_COLOR_SCHEME,
    HEATMAP_SPACE,
    LEGEND_HEIGHT,
    LEGEND_PALETTE,
    LEGEND_TOP_MARGIN,
    MARGIN_BOTTOM,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
    MAXIMUM_ZOOM,
    MIN_PLOT_HEIGHT,
    MIN_PLOT_WIDTH,
    PLOT_TITLE_HEIGHT,
    REGION_OVERLAY_OPACITY,
    SCROLLBAR_SPACE,
    SVG_BOTTOM_PADDING,
    SVG_TOP_PADDING,
    TOOLTIP_PRECISION,
    X_LABEL_SPACE,
)
from stackview.core.errors import ConfigError
from stackview.core.grammar import (
    AxisDisplayMode,
    OverlayStyle,
    PlotStyle,
    axis_display_mode_from_value,
    overlay_style_from_value,
    plot_style_from_value,
)

__all__ = ["Margins", "PlotDefaults", "ViewDefaults"]


@dataclass(frozen=True)
class Margins:
    top: int = MARGIN_TOP
    right: int = MARGIN_RIGHT
    bottom: int = MARGIN_BOTTOM
    left: int = MARGIN_LEFT


@dataclass(frozen=True)
class PlotDefaults:
    """
    Hard-coded per-plot settings used when neither the column nor the visual overrides them.

    Notes:
        - fill has no entry here: the default plot color comes from the palette service.
        - y_min/y_min_fixed default to a fixed 0 floor; y_max is always auto unless fixed.
    """

    plot_style: PlotStyle = PlotStyle.SCATTER
    use_legend_color: bool = False
    show_heatmap: bool = False
    title: str = ""
    overlay_style: OverlayStyle = OverlayStyle.NONE
    overlay_centered: bool = False
    height_factor: float = 1.0
    x_axis_display: AxisDisplayMode = AxisDisplayMode.TICKS_LABELS
    y_axis_display: AxisDisplayMode = AxisDisplayMode.TICKS_LABELS
    y_min: float = 0.0
    y_min_fixed: bool = True
    y_max_fixed: bool = False


@dataclass(frozen=True)
class ViewDefaults:
    """
    Immutable configuration defaults for one pipeline run.

    Attributes:
        margins (Margins): Per-plot margins (top/bottom reserved once per plot).
        svg_top_padding (int): Padding above the first plot.
        svg_bottom_padding (int): Padding below the last plot.
        scrollbar_space (int): Pixels subtracted from both viewport dimensions.
        plot_title_height (int): Strip reserved above a plot with a title.
        x_label_space (int): Strip reserved below a plot whose x axis shows ticks and labels.
        heatmap_space (int): Strip reserved below a plot with a heatmap.
        legend_height (int): Block reserved once when any legend exists.
        legend_top_margin (int): Gap between the last plot and the legend block.
        min_plot_height (int): Minimum height unit; the canvas grows below it.
        min_plot_width (int): Minimum plot width; the canvas grows below it.
        break_gap_size (float): Axis gap above which a break is recorded (seconds for dates).
        axis_break (bool): Whether numeric axes are compressed to dense ranks.
        show_break_lines (bool): Whether the renderer should decorate break points.
        tooltip_precision (int): Decimals for non-integer numeric tooltip values.
        heatmap_bins (int): Number of heatmap strip bins.
        heatmap_color_scheme (str): Sequential color scheme name for heatmaps.
        enable_zoom (bool): Zoom interaction enabled.
        maximum_zoom (int): Maximum zoom factor.
        region_overlay_opacity (float): Opacity of region stripes.
        vertical_ruler_color, overlay_color, y_zero_line_color, break_line_color (str):
            Decoration colors.
        legend_palette (tuple[str, ...]): Fallback colors cycled by sorted legend value.
        plot (PlotDefaults): Per-plot hard-coded defaults.

    Examples:
        >>> from stackview.io.config import ViewDefaults
        >>> ViewDefaults(min_plot_height=80).min_plot_height
        80
    """

    margins: Margins = field(default_factory=Margins)
    svg_top_padding: int = SVG_TOP_PADDING
    svg_bottom_padding: int = SVG_BOTTOM_PADDING
    scrollbar_space: int = SCROLLBAR_SPACE
    plot_title_height: int = PLOT_TITLE_HEIGHT
    x_label_space: int = X_LABEL_SPACE
    heatmap_space: int = HEATMAP_SPACE
    legend_height: int = LEGEND_HEIGHT
    legend_top_margin: int = LEGEND_TOP_MARGIN
    min_plot_height: int = MIN_PLOT_HEIGHT
    min_plot_width: int = MIN_PLOT_WIDTH
    break_gap_size: float = BREAK_GAP_SIZE
    axis_break: bool = False
    show_break_lines: bool = True
    tooltip_precision: int = TOOLTIP_PRECISION
    heatmap_bins: int = HEATMAP_BINS
    heatmap_color_scheme: str = HEATMAP_COLOR_SCHEME
    enable_zoom: bool = True
    maximum_zoom: int = MAXIMUM_ZOOM
    region_overlay_opacity: float = REGION_OVERLAY_OPACITY
    vertical_ruler_color: str = "#000000"
    overlay_color: str = "#000000"
    y_zero_line_color: str = "#CCCCCC"
    break_line_color: str = "#808080"
    legend_palette: tuple[str, ...] = LEGEND_PALETTE
    plot: PlotDefaults = field(default_factory=PlotDefaults)

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: ViewDefaults, cfg: dict[str, Any] | None) -> ViewDefaults:
        """Apply a loose config mapping onto ViewDefaults, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        changes: dict[str, Any] = {}
        for f in fields(base):
            if f.name not in cfg:
                continue
            current = getattr(base, f.name)
            raw = cfg[f.name]
            if f.name == "margins":
                if isinstance(raw, dict):
                    changes["margins"] = _apply_flat(current, raw)
            elif f.name == "plot":
                if isinstance(raw, dict):
                    changes["plot"] = _apply_flat(current, raw)
            else:
                try:
                    changes[f.name] = _coerce_like(current, raw)
                except (TypeError, ValueError):
                    pass
        return replace(base, **changes) if changes else base

    @classmethod
    def from_env(cls, base: ViewDefaults | None = None, prefix: str = "STACKVIEW_") -> ViewDefaults:
        """
        Build ViewDefaults from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - STACKVIEW_<FIELD> for every scalar field (e.g. STACKVIEW_MIN_PLOT_HEIGHT)
            - STACKVIEW_MARGIN_<SIDE> (TOP, RIGHT, BOTTOM, LEFT)
            - STACKVIEW_PLOT_<FIELD> for PlotDefaults fields (e.g. STACKVIEW_PLOT_PLOT_STYLE)
            - STACKVIEW_LEGEND_PALETTE as a comma-separated color list
        """
        s = base or cls()

        def get(name: str) -> str | None:
            return os.getenv(prefix + name.upper())

        mapping: dict[str, Any] = {}
        for f in fields(s):
            if f.name in ("margins", "plot"):
                continue
            v = get(f.name)
            if v:
                mapping[f.name] = v
        for f in fields(s.margins):
            v = get("margin_" + f.name)
            if v:
                mapping.setdefault("margins", {})[f.name] = v
        for f in fields(s.plot):
            v = get("plot_" + f.name)
            if v:
                mapping.setdefault("plot", {})[f.name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> ViewDefaults:
        """
        Build ViewDefaults from a TOML file.

        Search order when `path` is None:
            1) ./stackview.toml (with either a top-level [defaults] table or direct keys)
            2) ./pyproject.toml under [tool.stackview.defaults]

        Returns defaults if no file is present.

        Raises:
            ConfigError: If an explicit `path` is missing or not valid TOML.
        """
        s = cls()

        if path is not None:
            p = Path(path)
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise ConfigError(f"cannot read configuration {p}: {exc}") from exc
            return cls._apply_mapping(s, _defaults_table(p, data))

        for p in (Path.cwd() / "stackview.toml", Path.cwd() / "pyproject.toml"):
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                continue
            cfg = _defaults_table(p, data)
            if cfg:
                return cls._apply_mapping(s, cfg)
        return s

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> ViewDefaults:
        """
        Load ViewDefaults applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (stackview.toml, pyproject.toml).

        Returns:
            ViewDefaults
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s


def _defaults_table(p: Path, data: dict[str, Any]) -> dict[str, Any] | None:
    if p.name == "pyproject.toml":
        tool = data.get("tool", {})
        if not isinstance(tool, dict):
            return None
        section = tool.get("stackview", {})
        if not isinstance(section, dict):
            return None
        cfg = section.get("defaults")
        return cfg if isinstance(cfg, dict) else None
    # stackview.toml - accept either [defaults] table or top-level keys
    if "defaults" in data and isinstance(data["defaults"], dict):
        return data["defaults"]
    return data


def _apply_flat(obj: Any, cfg: dict[str, Any]) -> Any:
    changes: dict[str, Any] = {}
    for f in fields(obj):
        if f.name not in cfg:
            continue
        try:
            changes[f.name] = _coerce_like(getattr(obj, f.name), cfg[f.name])
        except (TypeError, ValueError):
            pass
    return replace(obj, **changes) if changes else obj


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    raise TypeError(f"not a boolean: {v!r}")


def _coerce_like(current: Any, raw: Any) -> Any:
    """Coerce a loose TOML/env value to the type of the field's current value."""
    if isinstance(current, PlotStyle):
        return plot_style_from_value(raw)
    if isinstance(current, OverlayStyle):
        return overlay_style_from_value(raw)
    if isinstance(current, AxisDisplayMode):
        return axis_display_mode_from_value(raw)
    if isinstance(current, bool):
        return _bool(raw)
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    if isinstance(current, tuple):
        items = raw.split(",") if isinstance(raw, str) else list(raw)
        out = tuple(str(c).strip() for c in items if str(c).strip())
        if not out:
            raise ValueError("empty palette")
        return out
    if isinstance(current, str):
        if not isinstance(raw, str):
            raise TypeError(f"not a string: {raw!r}")
        return raw
    raise TypeError(f"unsupported field type {type(current).__name__}")

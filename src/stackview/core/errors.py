"""
Exception and warning types for the stackview pipeline.

Purpose
- Give every fatal pipeline condition its own exception class and ``ErrorKind`` so a
  host can render a kind-specific message.
- Describe non-fatal conditions as ``PipelineWarning`` records that travel alongside a
  (degraded) view model instead of aborting it.

Source of truth and boundaries
- GrammarError is raised by stackview.core.grammar helpers for unknown enum-like strings.
- The viz stages raise PipelineError subclasses; stackview.viz.pipeline converts them
  into a tagged failure result.
- ConfigError is raised by stackview.io.config loaders for unreadable explicit files.

Notes
- stdlib-only, no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "ErrorKind",
    "WarningKind",
    "StackviewError",
    "ConfigError",
    "GrammarError",
    "PipelineError",
    "MissingDatasetError",
    "NoAxisError",
    "AxisCountError",
    "NoValuesError",
    "EmptyValuesError",
    "AxisNullValuesError",
    "InvalidAxisDisplayError",
    "ExtractionError",
    "ViewportSizeError",
    "PipelineWarning",
]


class ErrorKind(str, Enum):
    """Fatal pipeline error kinds (lower_snake values)."""

    MISSING_DATASET = "missing_dataset"
    NO_AXIS = "no_axis"
    AXIS_COUNT = "axis_count"
    NO_VALUES = "no_values"
    EMPTY_VALUES = "empty_values"
    AXIS_NULL_VALUES = "axis_null_values"
    INVALID_AXIS_DISPLAY = "invalid_axis_display"
    EXTRACTION_FAILED = "extraction_failed"
    VIEWPORT_SIZE = "viewport_size"


class WarningKind(str, Enum):
    """Non-fatal pipeline warning kinds (lower_snake values)."""

    OVERLAY_DATA = "overlay_data"
    PLOT_LEGEND = "plot_legend"
    LEGEND_COLOR_MAPPING = "legend_color_mapping"


class StackviewError(Exception):
    """Base class for all stackview errors."""


class ConfigError(StackviewError):
    """
    Raised when an explicitly requested configuration file cannot be read or parsed.

    Notes:
        Implicit lookups (./stackview.toml, ./pyproject.toml) never raise; they fall
        back to defaults.
    """


class GrammarError(StackviewError, ValueError):
    """Raised when an enum-like string does not name a known variant."""


class PipelineError(StackviewError):
    """
    Base class for fatal pipeline conditions.

    Attributes:
        kind (ErrorKind): Stable tag identifying the condition.
        title (str): Short human-readable name for the condition.
    """

    kind: ErrorKind = ErrorKind.EXTRACTION_FAILED
    title: str = "Pipeline Error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        return "The view model could not be built."

    @property
    def message(self) -> str:
        return str(self)


class MissingDatasetError(PipelineError):
    kind = ErrorKind.MISSING_DATASET
    title = "Missing Dataset"

    @classmethod
    def default_message(cls) -> str:
        return "No dataset was supplied."


class NoAxisError(PipelineError):
    kind = ErrorKind.NO_AXIS
    title = "No Axis Error"

    @classmethod
    def default_message(cls) -> str:
        return "There is no data in Axis."


class AxisCountError(PipelineError):
    kind = ErrorKind.AXIS_COUNT
    title = "Axis Error"

    @classmethod
    def default_message(cls) -> str:
        return "Exactly one axis column is required."


class NoValuesError(PipelineError):
    kind = ErrorKind.NO_VALUES
    title = "No Values Error"

    @classmethod
    def default_message(cls) -> str:
        return "There is no data in Values."


class EmptyValuesError(PipelineError):
    kind = ErrorKind.EMPTY_VALUES
    title = "Empty Values Error"

    def __init__(self, column_name: str) -> None:
        self.column_name = column_name
        super().__init__(f"Series column {column_name} contains no values.")


class AxisNullValuesError(PipelineError):
    kind = ErrorKind.AXIS_NULL_VALUES
    title = "Axis Null Values Error"

    def __init__(self, column_name: str) -> None:
        self.column_name = column_name
        super().__init__(f"Axis column {column_name} must not contain null values.")


class InvalidAxisDisplayError(PipelineError):
    kind = ErrorKind.INVALID_AXIS_DISPLAY
    title = "Axis Display Error"

    def __init__(self, value: object, column_name: str | None = None) -> None:
        self.value = value
        where = f" for {column_name}" if column_name else ""
        super().__init__(f"Unrecognized axis display mode {value!r}{where}.")


class ExtractionError(PipelineError):
    """Raised (or wrapped) when columns cannot be turned into the intermediate model."""

    kind = ErrorKind.EXTRACTION_FAILED
    title = "Extraction Error"

    @classmethod
    def default_message(cls) -> str:
        return "The dataset could not be extracted."


class ViewportSizeError(PipelineError):
    kind = ErrorKind.VIEWPORT_SIZE
    title = "Viewport Size Error"

    @classmethod
    def default_message(cls) -> str:
        return "The size of the render surface could not be determined."


@dataclass(frozen=True)
class PipelineWarning:
    """
    Non-fatal condition recorded while the pipeline continues with degraded output.

    Attributes:
        kind (WarningKind): Stable tag identifying the condition.
        message (str): Human-readable description.
    """

    kind: WarningKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}

"""
Core package aggregator for stackview contracts (grammar, raw dataset schema, errors, constants).

## Contracts (single source of truth)
- Grammar: closed variants (column types/roles, plot/overlay styles, axis display modes) and normalization helpers.
- Schema: pydantic models for the host's raw dataset and viewport.
- Errors: fatal PipelineError kinds and non-fatal PipelineWarning records.
- Constants: layout and fallback defaults consumed by stackview.io.config.

## Notes
- Zero‑IO policy: stdlib + pydantic only; no file/network IO.
- Naming policy: enum `.value` strings are lower_snake.

## Downstream usage
- stackview.io: builds ViewDefaults from `constants`; loads files into `schema` models.
- stackview.viz: dispatches on `grammar` enums and raises `errors` types.

## Examples
```python
from stackview.core.grammar import AxisDisplayMode, AXIS_DISPLAY_TABLE
AXIS_DISPLAY_TABLE[AxisDisplayMode.TICKS]  # AxisDisplay(ticks=True, labels=False)
```
"""

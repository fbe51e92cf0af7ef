# tvchartkit

Building blocks for tools that drive TradingView Desktop charts. The package
uses only the standard library. It holds the logic that needs no live chart:
checks, parsing, backups, and the JavaScript expressions to send to the page.

## Install

```
pip install .
pip install ".[test]"   # with pytest
```

## Modules

### `tvchartkit.analyze`

`analyze(source)` runs offline static checks on Pine Script and returns a dict
with `success`, `issue_count` and `diagnostics`, a list of `Diagnostic`
entries (`line`, `column`, `message`, `severity`). A clean script also gets a
`note`. The checks are:

- `array.get`/`array.set` calls with a literal index outside the declared size.
- `first()`/`last()` calls on arrays declared with size 0.
- `strategy.entry`/`strategy.close` used with no `strategy()` declaration.
- Pine versions older than v5.

### `tvchartkit.safety`

- `infer_script_metadata(source)` returns a `ScriptMetadata` with the script's
  name, type and version.
- `source_sha256(source)` and `line_count(source)` fingerprint a source.
- `enrich_snapshot(snapshot)` fills in the hash, counts and metadata of a
  `SourceSnapshot`. `snapshot_to_result(snapshot)` turns it into a dict.
- `create_backup(snapshot, reason, root)` writes a `.pine` file and a
  `backup.json` manifest into a new `session-<timestamp>` directory. By default
  that directory goes under `research/pine-source-safety`, relative to the
  working directory. It returns a `BackupRecord`, and
  `BackupRecord.to_result()` turns that into a dict.
- `load_backup(path, expected_sha256)` reads a manifest or a `.pine` file and
  returns a `LoadedBackup`. It raises `BackupError` if the hash is missing or
  does not match.
- `safe_filename_part(value)` reduces a name to characters that are safe in a
  file name.
- `marker_counts(markers)` splits editor markers into errors and warnings and
  returns a `MarkerCounts`.

### `tvchartkit.pane`

- `resolve_layout(layout)` turns a layout code, or an alias such as `single`,
  `2x2` or `quad`, into a layout code. It raises `ValueError` for an unknown
  layout.
- `layout_name(code)` gives the readable name of a layout code.
- `set_layout_expression(layout)` and `focus_pane_expression(index)` build the
  page expressions for those actions.

### `tvchartkit.tab`

- `filter_tradingview_tabs(targets)` keeps the TradingView pages from a list of
  debugger targets.
- `switch_tab(tab_id, host, port)` activates a tab through the debug port's
  `/json/activate` endpoint. It raises `TabSwitchError` on failure.

### `tvchartkit.replay`

- `wv(path)` wraps an expression so that an observable value is unwrapped.
- `validate_autoplay_delay(speed_ms)` accepts 0 or less (toggle only) or one of
  100, 143, 200, 300, 1000, 2000, 3000, 5000 or 10000 ms. Any other value
  raises `ValueError`.
- `trade_expression(action)` builds the expression for `buy`, `sell` or
  `close`.
- `select_date_expression(date)` builds the expression that selects a
  `YYYY-MM-DD` date, taken as midnight UTC.

### `tvchartkit.drawing`

- `DrawPoint` and `DrawShapeArgs` describe a shape.
  `DrawShapeArgs.validate()` raises `ValueError` if a coordinate is NaN or
  infinite.
- `create_shape_expression(args)` builds the expression for a single-point
  shape, or for a multipoint shape when `point2` is set.
- `fmt_num` and `require_finite` are the number helpers behind it.
- `new_entity_id(before, after)` picks out the newly created shape id.

### `tvchartkit.hts`

Helpers that condense chart data into a compact summary.

- `str_val`, `num_val`, `parse_first_numeric` and `round2` read and round
  loosely typed values.
- `study_signal(name, value)` classifies an indicator value as overbought,
  oversold, bullish, bearish or neutral.
- `value_direction(value)` says whether a value is above, below or at zero.
- `parse_continuous_symbol(symbol)` splits a futures symbol such as
  `NYMEX:NG1!` into a `ContinuousContract`.
- `summarize_bars(bars)` gives the last bar, the change, the change percentage
  and the volume relative to the average of the prior bars.

## Example

```python
from tvchartkit.analyze import analyze
from tvchartkit.pane import resolve_layout
from tvchartkit.hts import parse_continuous_symbol

report = analyze('//@version=6\nindicator("T")\narr = array.new_int(3)\nv = array.get(arr, 5)')
print(report["issue_count"])          # 1

print(resolve_layout("quad"))         # "4"

contract = parse_continuous_symbol("NYMEX:CL2!")
print(contract.base_symbol, contract.roll_number)   # CL 2
```

## What it does not do

The package has no server and no command-line tool. Apart from
`switch_tab`, it does not connect to a running chart. The caller evaluates the
expressions it builds and passes the results back to its helpers.

## Tests

```
pytest
```
"""
Export Functionality for SeedSight

Provides export formats for derived statistics:
- JSON (overview, breakdowns, series; complete data)
- CSV (one table: time series or phase samples)
- Excel (XLSX, one sheet per table)
"""

import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

import pandas as pd

from seedsight.analysis.aggregate import Overview, TimeSeriesPoint
from seedsight.analysis.timeline import PhaseSeries
from seedsight.core.constants import MATCH_TYPE_LABELS

logger = logging.getLogger(__name__)


# ============================================================================
# Data Conversion Utilities
# ============================================================================


def dataclass_to_dict(obj: Any) -> Any:
    """Convert a dataclass (or nested dataclasses) to plain JSON-ready values."""
    if isinstance(obj, Overview):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return {key: dataclass_to_dict(value) for key, value in asdict(obj).items()}
    elif isinstance(obj, dict):
        return {k: dataclass_to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [dataclass_to_dict(item) for item in obj]
    elif isinstance(obj, (set, frozenset)):
        return sorted(dataclass_to_dict(item) for item in obj)
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, Path):
        return str(obj)
    return obj


def _date_column(values: pd.Series) -> pd.Series:
    return pd.to_datetime(values, unit="s", utc=True)


def series_to_frame(points: list[TimeSeriesPoint]) -> pd.DataFrame:
    """Match time series as a DataFrame (one row per match)."""
    frame = pd.DataFrame(
        [
            {"date_sec": p.date_sec, "time_ms": p.time_ms, "type": p.type}
            for p in points
        ],
        columns=["date_sec", "time_ms", "type"],
    )
    frame["date"] = _date_column(frame["date_sec"])
    frame["type_label"] = frame["type"].map(lambda t: MATCH_TYPE_LABELS.get(t, "Unknown"))
    return frame


def phases_to_frame(phases: dict[str, PhaseSeries]) -> pd.DataFrame:
    """All phase samples in long format (phase, date, duration)."""
    rows = [
        {
            "phase": name,
            "date_sec": sample.date_sec,
            "duration_ms": sample.duration_ms,
            "type": sample.match_type,
        }
        for name, series in phases.items()
        for sample in series.samples
    ]
    frame = pd.DataFrame(rows, columns=["phase", "date_sec", "duration_ms", "type"])
    frame["date"] = _date_column(frame["date_sec"])
    return frame


def phase_stats_frame(phases: dict[str, PhaseSeries]) -> pd.DataFrame:
    """One row of summary statistics per phase."""
    rows = [{"phase": name, **asdict(series.stats())} for name, series in phases.items()]
    return pd.DataFrame(rows)


# ============================================================================
# JSON Export
# ============================================================================


def export_to_json(
    data: dict[str, Any],
    output_path: Path | None = None,
    indent: int = 2,
    include_metadata: bool = True,
) -> str:
    """
    Export derived statistics to JSON format.

    Args:
        data: Results dictionary (dataclasses are converted)
        output_path: Optional path to write the file
        indent: JSON indentation level
        include_metadata: Whether to include export metadata

    Returns:
        JSON string
    """
    export_data = dataclass_to_dict(data)

    if include_metadata:
        export_data = {
            "_metadata": {
                "exported_at": datetime.now(timezone.utc).isoformat(),
                "format": "seedsight_json",
                "version": "1.0",
            },
            **export_data,
        }

    json_str = json.dumps(export_data, indent=indent, default=str)

    if output_path:
        output_path.write_text(json_str)
        logger.info(f"Exported JSON to: {output_path}")

    return json_str


# ============================================================================
# CSV / Excel Export
# ============================================================================


def export_to_csv(frame: pd.DataFrame, output_path: Path | None = None, delimiter: str = ",") -> str:
    """Write a DataFrame as CSV and return the text."""
    csv_str = frame.to_csv(index=False, sep=delimiter)

    if output_path:
        output_path.write_text(csv_str)
        logger.info(f"Exported CSV to: {output_path}")

    return csv_str


def export_to_excel(sheets: dict[str, pd.DataFrame], output_path: Path) -> None:
    """
    Write several DataFrames to one workbook, one sheet each.

    Timezone-aware date columns are written as naive UTC, which Excel requires.
    """
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        for name, frame in sheets.items():
            out = frame.copy()
            for column in out.select_dtypes(include=["datetimetz"]).columns:
                out[column] = out[column].dt.tz_localize(None)
            out.to_excel(writer, sheet_name=name[:31], index=False)

    logger.info(f"Exported Excel to: {output_path}")


def export_report(
    report: dict[str, Any],
    output_path: Path,
    series: list[TimeSeriesPoint] | None = None,
    phases: dict[str, PhaseSeries] | None = None,
    indent: int = 2,
    delimiter: str = ",",
) -> None:
    """
    Export a stats report, choosing the format from the file extension.

    .json writes the full report; .csv writes the phase samples when present,
    otherwise the match time series; .xlsx writes every table. ``indent`` and
    ``delimiter`` apply to JSON and CSV output.
    """
    suffix = output_path.suffix.lower()

    if suffix == ".json":
        export_to_json(report, output_path, indent=indent)
    elif suffix == ".csv":
        if phases:
            export_to_csv(phases_to_frame(phases), output_path, delimiter=delimiter)
        else:
            export_to_csv(series_to_frame(series or []), output_path, delimiter=delimiter)
    elif suffix == ".xlsx":
        sheets: dict[str, pd.DataFrame] = {}
        if "overview" in report:
            sheets["Overview"] = pd.DataFrame([dataclass_to_dict(report["overview"])])
        if series is not None:
            sheets["Time Series"] = series_to_frame(series)
        if phases:
            sheets["Phase Stats"] = phase_stats_frame(phases)
            sheets["Phase Samples"] = phases_to_frame(phases)
        export_to_excel(sheets, output_path)
    else:
        raise ValueError(f"Unsupported export format: {suffix}")

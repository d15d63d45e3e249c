"""Read and write a transit model as a directory of NTFS-flavoured CSV files.

Layout
------
``operators.txt``       operator_id,operator_name
``lines.txt``           line_id,operator_id,line_name,line_code
``calendar_dates.txt``  service_id,date (YYYYMMDD)
``trips.txt``           trip_id,line_id,service_id,trip_headsign
``stop_times.txt``      trip_id,stop_sequence,stop_time_id,stop_headsign,comment_id

Only the columns above are read; extra columns are ignored. Stop-time
attributes are written back keyed by trip identifier, so positions never
leave memory.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pandas as pd

from .collection import CollectionWithId
from .domain_types import Calendar, Line, Operator, VehicleJourney
from .transit_model import Collections, StopTimeKey, TransitModel

logger = logging.getLogger(__name__)

OPERATOR_COLUMNS: List[str] = ["operator_id", "operator_name"]
LINE_COLUMNS: List[str] = ["line_id", "operator_id", "line_name", "line_code"]
CALENDAR_DATE_COLUMNS: List[str] = ["service_id", "date"]
TRIP_COLUMNS: List[str] = ["trip_id", "line_id", "service_id", "trip_headsign"]
STOP_TIME_COLUMNS: List[str] = [
    "trip_id",
    "stop_sequence",
    "stop_time_id",
    "stop_headsign",
    "comment_id",
]

# attribute map name -> stop_times.txt column
_STOP_TIME_ATTRIBUTES: Dict[str, str] = {
    "stop_time_ids": "stop_time_id",
    "stop_time_headsigns": "stop_headsign",
    "stop_time_comments": "comment_id",
}


def _text(value: object) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def _parse_date(token: str) -> date:
    try:
        return datetime.strptime(token, "%Y%m%d").date()
    except ValueError as exc:
        raise ValueError(f"Invalid calendar date {token!r}, expected YYYYMMDD") from exc


def _read_table(directory: Path, name: str, columns: Sequence[str]) -> pd.DataFrame:
    path = directory / name
    if not path.exists():
        raise FileNotFoundError(f"{name} not found in {directory}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f"{name} is missing required columns: {', '.join(missing)}")
    return df


def _read_optional_table(
    directory: Path, name: str, columns: Sequence[str], required: Sequence[str]
) -> pd.DataFrame:
    if not (directory / name).exists():
        return pd.DataFrame(columns=list(columns))
    return _read_table(directory, name, required)


def read_collections(path: str | Path) -> Collections:
    """Load raw collections without running model validation."""
    directory = Path(path)
    operators_df = _read_table(directory, "operators.txt", OPERATOR_COLUMNS[:1])
    lines_df = _read_table(directory, "lines.txt", LINE_COLUMNS[:2])
    trips_df = _read_table(directory, "trips.txt", TRIP_COLUMNS[:3])
    dates_df = _read_optional_table(
        directory, "calendar_dates.txt", CALENDAR_DATE_COLUMNS, CALENDAR_DATE_COLUMNS
    )
    stop_times_df = _read_optional_table(
        directory, "stop_times.txt", STOP_TIME_COLUMNS, STOP_TIME_COLUMNS[:2]
    )

    operators = CollectionWithId(
        Operator(id=str(row.get("operator_id")), name=_text(row.get("operator_name")) or "")
        for row in operators_df.to_dict("records")
    )
    lines = CollectionWithId(
        Line(
            id=str(row.get("line_id")),
            operator_id=str(row.get("operator_id")),
            name=_text(row.get("line_name")) or "",
            code=_text(row.get("line_code")),
        )
        for row in lines_df.to_dict("records")
    )

    dates_by_service: Dict[str, Set[date]] = {}
    for row in dates_df.to_dict("records"):
        service_id = _text(row.get("service_id"))
        token = _text(row.get("date"))
        if service_id is None:
            continue
        bucket = dates_by_service.setdefault(service_id, set())
        if token is not None:
            bucket.add(_parse_date(token))
    for service_id in trips_df["service_id"]:
        dates_by_service.setdefault(str(service_id), set())
    calendars = CollectionWithId(
        Calendar(id=service_id, dates=frozenset(dates))
        for service_id, dates in dates_by_service.items()
    )

    vehicle_journeys = CollectionWithId(
        VehicleJourney(
            id=str(row.get("trip_id")),
            line_id=str(row.get("line_id")),
            calendar_id=str(row.get("service_id")),
            headsign=_text(row.get("trip_headsign")),
        )
        for row in trips_df.to_dict("records")
    )

    attributes: Dict[str, Dict[StopTimeKey, str]] = {name: {} for name in _STOP_TIME_ATTRIBUTES}
    skipped = 0
    for row in stop_times_df.to_dict("records"):
        vj_idx = vehicle_journeys.get_idx(str(row.get("trip_id")))
        if vj_idx is None:
            skipped += 1
            continue
        sequence = int(str(row.get("stop_sequence")))
        for name, column in _STOP_TIME_ATTRIBUTES.items():
            value = _text(row.get(column))
            if value is not None:
                attributes[name][(vj_idx, sequence)] = value
    if skipped:
        logger.warning("Ignored %d stop times referencing unknown trips", skipped)

    logger.info(
        "Loaded %d operators, %d lines, %d calendars and %d trips from %s",
        len(operators),
        len(lines),
        len(calendars),
        len(vehicle_journeys),
        directory,
    )
    return Collections(
        operators=operators,
        lines=lines,
        calendars=calendars,
        vehicle_journeys=vehicle_journeys,
        **attributes,
    )


def read_model(path: str | Path) -> TransitModel:
    return TransitModel.from_collections(read_collections(path))


def write_model(model: TransitModel, path: str | Path) -> None:
    """Write ``model`` to ``path``, creating the directory when needed."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)

    pd.DataFrame(
        [{"operator_id": op.id, "operator_name": op.name} for op in model.operators],
        columns=OPERATOR_COLUMNS,
    ).to_csv(directory / "operators.txt", index=False)
    pd.DataFrame(
        [
            {
                "line_id": line.id,
                "operator_id": line.operator_id,
                "line_name": line.name,
                "line_code": line.code or "",
            }
            for line in model.lines
        ],
        columns=LINE_COLUMNS,
    ).to_csv(directory / "lines.txt", index=False)
    pd.DataFrame(
        [
            {"service_id": calendar.id, "date": day.strftime("%Y%m%d")}
            for calendar in model.calendars
            for day in sorted(calendar.dates)
        ],
        columns=CALENDAR_DATE_COLUMNS,
    ).to_csv(directory / "calendar_dates.txt", index=False)
    pd.DataFrame(
        [
            {
                "trip_id": vj.id,
                "line_id": vj.line_id,
                "service_id": vj.calendar_id,
                "trip_headsign": vj.headsign or "",
            }
            for vj in model.vehicle_journeys
        ],
        columns=TRIP_COLUMNS,
    ).to_csv(directory / "trips.txt", index=False)

    rows: Dict[StopTimeKey, Dict[str, object]] = {}
    for name, column in _STOP_TIME_ATTRIBUTES.items():
        for (vj_idx, sequence), value in getattr(model, name).items():
            row = rows.setdefault(
                (vj_idx, sequence),
                {
                    "trip_id": model.vehicle_journeys[vj_idx].id,
                    "stop_sequence": sequence,
                    "stop_time_id": "",
                    "stop_headsign": "",
                    "comment_id": "",
                },
            )
            row[column] = value
    pd.DataFrame(
        [rows[key] for key in sorted(rows)], columns=STOP_TIME_COLUMNS
    ).to_csv(directory / "stop_times.txt", index=False)

    logger.info(
        "Wrote %d operators, %d lines, %d calendars and %d trips to %s",
        len(model.operators),
        len(model.lines),
        len(model.calendars),
        len(model.vehicle_journeys),
        directory,
    )


__all__ = ["read_collections", "read_model", "write_model"]

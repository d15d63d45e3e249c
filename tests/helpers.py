from __future__ import annotations

import textwrap
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Tuple

from transit_filter.model import (
    Calendar,
    CollectionWithId,
    Collections,
    Line,
    Operator,
    TransitModel,
    VehicleJourney,
)


def make_collections(
    operators: Iterable[str] = ("O1", "O2", "O3"),
    lines: Iterable[Tuple[str, str, str | None]] = (
        ("L1", "O1", "1"),
        ("L2", "O2", "2"),
        ("L3", "O2", None),
        ("L4", "O3", "4"),
    ),
    calendars: Iterable[str] = ("C1", "C2", "C3", "C4"),
    vehicle_journeys: Iterable[Tuple[str, str, str]] = (
        ("VJ1", "L1", "C1"),
        ("VJ2", "L1", "C2"),
        ("VJ3", "L2", "C2"),
        ("VJ4", "L3", "C3"),
        ("VJ5", "L4", "C4"),
    ),
) -> Collections:
    """Three operators, four lines; C2 is shared by O1 and O2."""
    vjs = CollectionWithId(
        VehicleJourney(id=vj_id, line_id=line_id, calendar_id=calendar_id)
        for vj_id, line_id, calendar_id in vehicle_journeys
    )
    stop_time_ids: Dict[Tuple[int, int], str] = {}
    headsigns: Dict[Tuple[int, int], str] = {}
    comments: Dict[Tuple[int, int], str] = {}
    for idx, vj in vjs.items():
        for sequence in (0, 1):
            stop_time_ids[(idx, sequence)] = f"{vj.id}:st{sequence}"
        headsigns[(idx, 1)] = f"to {vj.id}"
        comments[(idx, 0)] = f"comment-{vj.id}"
    return Collections(
        operators=CollectionWithId(Operator(id=op_id, name=op_id.lower()) for op_id in operators),
        lines=CollectionWithId(
            Line(id=line_id, operator_id=operator_id, name=f"Line {line_id}", code=code)
            for line_id, operator_id, code in lines
        ),
        calendars=CollectionWithId(
            Calendar(id=cal_id, dates=frozenset({date(2024, 1, 1)})) for cal_id in calendars
        ),
        vehicle_journeys=vjs,
        stop_time_ids=stop_time_ids,
        stop_time_headsigns=headsigns,
        stop_time_comments=comments,
    )


def make_model(**kwargs) -> TransitModel:
    return TransitModel.from_collections(make_collections(**kwargs))


def attributes_by_id(model: TransitModel, name: str) -> Dict[Tuple[str, int], str]:
    """Attribute map re-keyed by vehicle journey identifier."""
    return {
        (model.vehicle_journeys[idx].id, sequence): value
        for (idx, sequence), value in getattr(model, name).items()
    }


def write_dataset(directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    files = {
        "operators.txt": """
            operator_id,operator_name
            O1,First
            O2,Second
            """,
        "lines.txt": """
            line_id,operator_id,line_name,line_code
            L1,O1,Line one,1
            L2,O2,Line two,
            """,
        "calendar_dates.txt": """
            service_id,date
            C1,20240101
            C1,20240102
            C2,20240103
            """,
        "trips.txt": """
            trip_id,line_id,service_id,trip_headsign
            T1,L1,C1,North
            T2,L2,C2,
            T3,L2,C3,South
            """,
        "stop_times.txt": """
            trip_id,stop_sequence,stop_time_id,stop_headsign,comment_id
            T1,0,st-1,,
            T1,1,st-2,Centre,
            T3,4,,,note-1
            """,
    }
    for name, body in files.items():
        (directory / name).write_text(textwrap.dedent(body).strip() + "\n", encoding="utf-8")
    return directory

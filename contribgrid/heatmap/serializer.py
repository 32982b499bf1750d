"""Write recovered calendars as JSON."""

from __future__ import annotations

import json
from contribgrid.engine.context import DAY_KEYS, Calendar


def calendar_to_dict(calendar: Calendar) -> dict[str, dict[str, dict[str, int]]]:
    """String-keyed copy with years and weeks in numeric order and days Sunday first."""
    out: dict[str, dict[str, dict[str, int]]] = {}
    for year in sorted(calendar):
        weeks = calendar[year]
        out[str(year)] = {
            str(week): {day: weeks[week][day] for day in DAY_KEYS if day in weeks[week]}
            for week in sorted(weeks)
        }
    return out


def calendar_to_json(calendar: Calendar, indent: int | None = 2) -> str:
    return json.dumps(calendar_to_dict(calendar), indent=indent)

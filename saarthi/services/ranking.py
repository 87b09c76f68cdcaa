"""
Ranking & Filtering - ordered, optionally radius-filtered view of reports.

Pure over a store snapshot: nothing here mutates reports.
"""

from enum import Enum
from typing import Iterable, List, Optional, Union

from saarthi.models.report import RankedReport, Report
from saarthi.utils.geo import Coordinates, distance_km

# Reports without a distance sort after every real distance
MISSING_DISTANCE_KM = 9999.0


class SortBy(str, Enum):
    PRIORITY = "priority"
    DISTANCE = "distance"
    RECENT = "recent"


def _distance_key(item: RankedReport) -> float:
    return item.distance_km if item.distance_km is not None else MISSING_DISTANCE_KM


def annotate_distances(reports: Iterable[Report], observer: Optional[Coordinates]) -> List[RankedReport]:
    """Distance from the observer rounded to 2 decimals; None without coordinates or observer."""
    ranked = []
    for report in reports:
        distance = None
        if observer is not None and report.has_coordinates:
            distance = round(distance_km(observer, (report.lat, report.lng)), 2)
        ranked.append(RankedReport(report=report, distance_km=distance))
    return ranked


def view(
    reports: Iterable[Report],
    observer: Optional[Coordinates] = None,
    radius_km: Optional[float] = None,
    sort_by: Union[SortBy, str] = SortBy.PRIORITY,
) -> List[RankedReport]:
    """
    Rank reports for display.

    Args:
        reports: Store snapshot
        observer: Optional (lat, lng) of the viewer
        radius_km: Drop reports farther than this (only with an observer;
            reports without a distance are dropped too)
        sort_by: priority (desc, then distance asc), distance (asc) or
            recent (created_at desc). Without an observer, distance falls
            back to recent.

    Returns:
        Ranked reports. Sorting is stable for equal keys.
    """
    sort_by = SortBy(sort_by)
    items = annotate_distances(reports, observer)

    if observer is not None and radius_km is not None:
        items = [i for i in items if i.distance_km is not None and i.distance_km <= radius_km]

    if sort_by == SortBy.DISTANCE and observer is None:
        sort_by = SortBy.RECENT

    if sort_by == SortBy.PRIORITY:
        items.sort(key=lambda i: (-i.report.priority, _distance_key(i)))
    elif sort_by == SortBy.DISTANCE:
        items.sort(key=_distance_key)
    else:
        items.sort(key=lambda i: i.report.created_at, reverse=True)
    return items

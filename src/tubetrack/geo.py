"""Great-circle distances and nearest-station ranking."""

import math
from typing import List, Sequence

from .models import RankedStation, Station

EARTH_RADIUS_METERS = 6371000.0

DEFAULT_LIMIT = 10
DEFAULT_MAX_DISTANCE_METERS = 2000.0


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in meters between two WGS84 points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    a = min(1.0, a)  # Float error can push a just past 1
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def nearest_stations(
    lat: float,
    lng: float,
    stations: Sequence[Station],
    limit: int = DEFAULT_LIMIT,
    max_distance_meters: float = DEFAULT_MAX_DISTANCE_METERS,
) -> List[RankedStation]:
    """
    Rank stations by distance from a point.

    Args:
        lat: Latitude of the rider.
        lng: Longitude of the rider.
        stations: Candidate stations.
        limit: Maximum number of results.
        max_distance_meters: Stations further away than this are dropped.

    Returns:
        Stations within range, nearest first. Equal distances keep input order.
        An empty list means nothing is nearby.
    """
    ranked = []
    for station in stations:
        distance = distance_meters(lat, lng, station.lat, station.lng)
        if distance <= max_distance_meters:
            ranked.append(RankedStation(station=station, distance_meters=distance))

    # sort() is stable
    ranked.sort(key=lambda r: r.distance_meters)
    return ranked[:max(limit, 0)]


def format_distance(meters: float) -> str:
    """
    Format a distance for display.

    The unknown-distance sentinel (0) formats as an empty string.
    """
    if meters <= 0:
        return ""
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"

"""Data models for the tubetrack resolution engine."""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class Line:
    """Represents a London Underground line."""
    id: str  # e.g. "victoria", "hammersmith-city"
    display_code: str  # Single-letter TrackerNet code
    name: str
    color: str
    live_feed_reliable: bool
    id_prefix: str  # Leading car number prefix, may be empty or shared
    feed_override_code: Optional[str] = None  # Read another line's TrackerNet feed

    @property
    def feed_code(self) -> str:
        """TrackerNet line code to query for this line."""
        return self.feed_override_code or self.display_code


@dataclass(frozen=True)
class Station:
    """Represents a station on one or more lines."""
    id: str  # NaPTAN id, e.g. "940GZZLUVIC"
    name: str
    lat: float
    lng: float
    lines: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class RankedStation:
    """A station with its distance from the rider. Distance 0 means unknown."""
    station: Station
    distance_meters: float

    @property
    def id(self) -> str:
        return self.station.id

    @property
    def name(self) -> str:
        return self.station.name


@dataclass(frozen=True)
class TrainCandidate:
    """Normalized train record from either live feed."""
    identifier: str  # 5-digit leading car number, "" when the feed has none
    set_number: str = ""
    trip_number: str = ""
    eta_seconds: int = 0
    current_location: str = ""
    destination: str = ""
    destination_code: str = ""
    has_departed: bool = False
    direction: str = ""
    track_code: str = ""
    line_code: str = ""
    station_id: str = ""  # Station the feed was queried for
    station_name: str = ""

    @property
    def is_due(self) -> bool:
        return self.eta_seconds < 60


@dataclass(frozen=True)
class LocationFix:
    """A device position reading."""
    lat: float
    lng: float
    accuracy_meters: float = 0.0
    timestamp: Optional[float] = None  # Unix timestamp of the reading


@dataclass(frozen=True)
class CheckIn:
    """A validated manual check-in ready to hand to a journey logger."""
    identifier: str
    line: Line
    inferred: bool  # True when the line came from the identifier prefix


@dataclass(frozen=True)
class TrainDiscovery:
    """Trains found at a station for one line."""
    line: Line
    station: Station
    candidates: Tuple[TrainCandidate, ...] = field(default_factory=tuple)

    @property
    def no_usable_trains(self) -> bool:
        """True when nothing with a valid identifier came back; suggest manual entry."""
        return len(self.candidates) == 0

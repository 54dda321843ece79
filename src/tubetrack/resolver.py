"""Resolves lines, stations, and trains from rider input and live feeds."""

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .config import Settings, get_settings
from .errors import (
    AmbiguousLineError,
    LocationError,
    MalformedIdentifierError,
    UnknownLineError,
    UnregisteredLineError,
    UnsupportedStationError,
)
from .feeds import parse_trackernet, parse_unified_arrivals
from .geo import nearest_stations
from .identifiers import Ambiguous, Resolved, Unknown, classify, is_well_formed, matches_line
from .lines import LineRegistry
from .models import CheckIn, Line, LocationFix, RankedStation, Station, TrainDiscovery
from .station_codes import CodeNotFound, StationCodeTable

logger = logging.getLogger(__name__)

StationFetcher = Callable[[str], Sequence[Station]]
FeedFetcher = Callable[[str, str], Union[str, bytes]]
LocationReader = Callable[[float, float], LocationFix]
ArrivalsFetcher = Callable[[str], List[Dict[str, Any]]]


class TrainResolver:
    """
    Works out which train a rider is on.

    This class provides methods to:
    - List stations on a line, nearest first when the rider's position is known
    - List trains with a leading car number approaching a station
    - Validate a typed leading car number and infer its line

    Holds no state between calls beyond the read-only tables it is given.
    """

    def __init__(
        self,
        registry: LineRegistry,
        station_codes: StationCodeTable,
        fetch_stations_for_line: StationFetcher,
        fetch_legacy_feed: FeedFetcher,
        read_device_location: Optional[LocationReader] = None,
        settings: Optional[Settings] = None,
        fetch_station_arrivals: Optional[ArrivalsFetcher] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the resolver.

        Args:
            registry: Line registry.
            station_codes: TrackerNet station code table.
            fetch_stations_for_line: Returns the stations on a line. Raises
                StationDirectoryError on failure.
            fetch_legacy_feed: Returns TrackerNet XML for (line code, station code),
                as raw bytes or text.
            read_device_location: Returns the rider's position given (timeout, max age)
                in seconds, raising LocationError. None when the device has no location.
            settings: Engine settings. Defaults to the process-wide settings.
            fetch_station_arrivals: Returns Unified API arrivals for a station id.
            clock: Current Unix time, used to judge how old a location fix is.
        """
        self.registry = registry
        self.station_codes = station_codes
        self.fetch_stations_for_line = fetch_stations_for_line
        self.fetch_legacy_feed = fetch_legacy_feed
        self.read_device_location = read_device_location
        self.settings = settings or get_settings()
        self.fetch_station_arrivals = fetch_station_arrivals
        self._clock = clock

    def _line(self, line_id: str) -> Line:
        """Look up a caller-supplied line id."""
        if line_id not in self.registry:
            raise UnregisteredLineError(f"Unknown line '{line_id}'", line_id=line_id)
        return self.registry.line_by_id(line_id)

    def discover_stations(self, line_id: str, use_location: bool = True) -> List[RankedStation]:
        """
        List stations on a line for the rider to pick from.

        Args:
            line_id: Line id.
            use_location: If False, skip the location read and list alphabetically.

        Returns:
            Nearest stations first when a position is available and something is
            in range. Otherwise every station sorted by name with distance 0.

        Raises:
            UnregisteredLineError: If the line id is not registered.
            StationDirectoryError: If the station list cannot be fetched.
        """
        line = self._line(line_id)
        stations = list(self.fetch_stations_for_line(line.id))

        fix = self._read_location() if use_location else None
        if fix is not None:
            ranked = nearest_stations(
                fix.lat,
                fix.lng,
                stations,
                limit=self.settings.nearby_limit,
                max_distance_meters=self.settings.nearby_max_distance_meters,
            )
            if ranked:
                return ranked
            logger.info(f"No {line.name} stations within {self.settings.nearby_max_distance_meters:.0f}m")

        return self.alphabetical(stations)

    @staticmethod
    def alphabetical(stations: Sequence[Station]) -> List[RankedStation]:
        """All stations sorted by name, with the unknown-distance sentinel."""
        ordered = sorted(stations, key=lambda s: (s.name.casefold(), s.name))
        return [RankedStation(station=s, distance_meters=0.0) for s in ordered]

    def _read_location(self) -> Optional[LocationFix]:
        """Read the device position. Every failure means "no position"."""
        if self.read_device_location is None:
            logger.info("No location provider, listing stations alphabetically")
            return None

        max_age = self.settings.location_max_age_seconds
        try:
            fix = self.read_device_location(self.settings.location_timeout_seconds, max_age)
        except LocationError as e:
            logger.info(f"Location unavailable ({e.reason}), listing stations alphabetically")
            return None

        if fix.timestamp is not None and self._clock() - fix.timestamp > max_age:
            logger.info(f"Location fix older than {max_age:.0f}s, listing stations alphabetically")
            return None
        return fix

    def discover_trains(self, line_id: str, station: Station) -> TrainDiscovery:
        """
        List trains approaching a station that report a leading car number.

        Args:
            line_id: Line id.
            station: Station picked by the rider.

        Returns:
            TrainDiscovery; check no_usable_trains before offering the list.

        Raises:
            UnregisteredLineError: If the line id is not registered.
            UnsupportedStationError: If TrackerNet has no code for the station.
            FeedTimeoutError: If TrackerNet did not answer in time.
            MissingCredentialsError: If the API key is missing or rejected.
            FeedUnavailableError: On any other feed failure.
        """
        line = self._line(line_id)

        station_code = self.station_codes.legacy_code_for(station.id)
        if isinstance(station_code, CodeNotFound):
            raise UnsupportedStationError(
                f"Unknown station code for {station.name}",
                station_id=station.id,
                station_name=station.name,
            )

        markup = self.fetch_legacy_feed(line.feed_code, station_code)
        trains = parse_trackernet(markup)

        candidates = tuple(replace(t, station_id=station.id, station_name=station.name) for t in trains)
        if not candidates:
            logger.info(f"No trains with valid ids at {station.name} ({line.name})")

        return TrainDiscovery(line=line, station=station, candidates=candidates)

    def discover_station_arrivals(self, line_id: str, station: Station) -> TrainDiscovery:
        """
        List Unified API predictions for a line at a station.

        The Unified API only reports set numbers, so these candidates carry no
        identifier and the rider still has to type the car number.

        Raises:
            RuntimeError: If the resolver was built without an arrivals fetcher.
            UnregisteredLineError: If the line id is not registered.
        """
        if self.fetch_station_arrivals is None:
            raise RuntimeError("TrainResolver was created without fetch_station_arrivals")

        line = self._line(line_id)
        payload = self.fetch_station_arrivals(station.id)
        trains = parse_unified_arrivals(payload, line)

        candidates = tuple(replace(t, station_id=station.id, station_name=station.name) for t in trains)
        return TrainDiscovery(line=line, station=station, candidates=candidates)

    def check_in(self, identifier: str, line_id: Optional[str] = None) -> CheckIn:
        """
        Validate a typed leading car number and settle its line.

        Args:
            identifier: Number typed by the rider, exactly as typed.
            line_id: Line picked by the rider, if any. Trusted as given.

        Returns:
            CheckIn for the journey logger.

        Raises:
            MalformedIdentifierError: If the number is not five digits.
            AmbiguousLineError: If several lines share the prefix and no line was given.
            UnknownLineError: If no line uses the prefix and no line was given.
            UnregisteredLineError: If line_id is not a registered line.
        """
        if not is_well_formed(identifier):
            raise MalformedIdentifierError(
                "Please enter a valid 5-digit train number", identifier=identifier
            )

        if line_id:
            line = self._line(line_id)
            if line.live_feed_reliable and not matches_line(identifier, line):
                logger.warning(f"Train {identifier} does not look like a {line.name} train, accepting anyway")
            return CheckIn(identifier=identifier, line=line, inferred=False)

        result = classify(identifier, self.registry)

        if isinstance(result, Resolved):
            return CheckIn(identifier=identifier, line=self.registry.line_by_id(result.line_id), inferred=True)

        if isinstance(result, Ambiguous):
            names = "/".join(self.registry.line_by_id(i).name for i in result.candidate_line_ids)
            raise AmbiguousLineError(
                f"Train {identifier} could be {names} - please select a line",
                identifier=identifier,
                candidate_line_ids=result.candidate_line_ids,
            )

        if isinstance(result, Unknown):
            raise UnknownLineError(
                "Could not identify line from train number. Please select manually.",
                identifier=identifier,
                prefix=result.prefix,
            )

        # Invalid is ruled out by the format check above
        raise MalformedIdentifierError(
            "Please enter a valid 5-digit train number", identifier=identifier
        )


def build_resolver(
    settings: Optional[Settings] = None,
    read_device_location: Optional[LocationReader] = None,
) -> TrainResolver:
    """Wire a TrainResolver to the TfL API with the packaged tables."""
    from .lines import default_registry
    from .station_codes import default_station_codes
    from .tfl_client import TflClient

    settings = settings or get_settings()
    client = TflClient(settings)

    return TrainResolver(
        registry=default_registry(),
        station_codes=default_station_codes(settings.station_codes_path),
        fetch_stations_for_line=client.get_stations_for_line,
        fetch_legacy_feed=client.get_trackernet,
        read_device_location=read_device_location,
        settings=settings,
        fetch_station_arrivals=client.get_station_arrivals,
    )

"""TrackerNet XML and Unified API arrivals parsers.

Both feeds are normalized into TrainCandidate. TrackerNet reports the 5-digit
leading car number; the Unified API only carries the 3-digit set number, so
its candidates have an empty identifier.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Union

from .errors import MalformedFeedError
from .identifiers import is_well_formed
from .models import Line, TrainCandidate

logger = logging.getLogger(__name__)

TRAIN_TAG = "T"


@dataclass(frozen=True)
class FeedElement:
    """A markup element reduced to its local name and attributes."""
    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str, default: str = "") -> str:
        return self.attributes.get(name, default)

    def get_int(self, name: str, default: int = 0) -> int:
        """Integer attribute; missing or unparseable values give `default`."""
        value = self.attributes.get(name)
        if value is None:
            return default
        try:
            return int(value.strip())
        except ValueError:
            return default


def _local_name(name: str) -> str:
    """Strip an ElementTree "{namespace}" prefix."""
    return name.rsplit("}", 1)[-1]


def iter_elements(markup: Union[str, bytes], tag: str) -> Iterator[FeedElement]:
    """
    Yield every element named `tag` in document order, ignoring namespaces.

    Args:
        markup: Raw XML. Bytes are decoded per the XML declaration, UTF-8 by default.
        tag: Local element name to match.

    Raises:
        MalformedFeedError: If the text is not well-formed XML.
    """
    if not markup or not markup.strip():
        return

    try:
        root = ET.fromstring(markup)
    except ET.ParseError as e:
        raise MalformedFeedError("TrackerNet returned unreadable XML", cause=e) from e

    for el in root.iter():
        # Comments and processing instructions have a callable tag
        if not isinstance(el.tag, str) or _local_name(el.tag) != tag:
            continue
        attributes = {_local_name(k): v for k, v in el.attrib.items()}
        yield FeedElement(tag=tag, attributes=attributes)


def train_from_element(element: FeedElement) -> TrainCandidate:
    """Map a TrackerNet <T> element onto a TrainCandidate."""
    return TrainCandidate(
        identifier=element.get("LeadingCarNo"),
        set_number=element.get("SetNo"),
        trip_number=element.get("TripNo"),
        eta_seconds=element.get_int("SecondsTo"),
        current_location=element.get("Location"),
        destination=element.get("Destination"),
        destination_code=element.get("DestCode"),
        has_departed=element.get("Departed") == "1",
        direction=element.get("Direction"),
        track_code=element.get("TrackCode"),
        line_code=element.get("LN"),
    )


def parse_trackernet(markup: Union[str, bytes]) -> List[TrainCandidate]:
    """
    Parse a TrackerNet PredictionDetailed document.

    Trains without a valid 5-digit leading car number are dropped; the feed
    routinely contains placeholder entries. Numbers are taken verbatim, so a
    padded value such as " 11054 " is dropped too.

    Args:
        markup: Raw XML, as bytes or text.

    Returns:
        Trains in document order.
    """
    trains: List[TrainCandidate] = []
    skipped = 0

    for element in iter_elements(markup, TRAIN_TAG):
        train = train_from_element(element)
        if not is_well_formed(train.identifier):
            skipped += 1
            continue
        trains.append(train)

    logger.debug(f"Parsed {len(trains)} trains from TrackerNet ({skipped} without a leading car number)")
    return trains


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value)


def _int(record: Mapping[str, Any], key: str) -> int:
    try:
        return int(record.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def parse_unified_arrivals(
    payload: Iterable[Dict[str, Any]],
    line: Line,
) -> List[TrainCandidate]:
    """
    Normalize Unified API arrival predictions for one line.

    Args:
        payload: Decoded JSON list from /StopPoint/{id}/Arrivals or /Line/{id}/Arrivals.
        line: Line to keep; predictions for other lines are dropped.

    Returns:
        Candidates sorted by time to station, each with an empty identifier.
    """
    trains: List[TrainCandidate] = []

    for record in payload:
        if not isinstance(record, Mapping):
            continue
        line_id = record.get("lineId")
        if line_id and line_id != line.id:
            continue

        trains.append(
            TrainCandidate(
                identifier="",
                set_number=_text(record, "vehicleId"),
                eta_seconds=_int(record, "timeToStation"),
                current_location=_text(record, "currentLocation"),
                destination=_text(record, "destinationName"),
                destination_code=_text(record, "destinationNaptanId"),
                direction=_text(record, "direction"),
                line_code=line.display_code,
                station_id=_text(record, "naptanId"),
                station_name=_text(record, "stationName"),
            )
        )

    trains.sort(key=lambda t: t.eta_seconds)
    return trains

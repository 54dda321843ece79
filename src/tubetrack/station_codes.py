"""TrackerNet station code lookup.

TrackerNet addresses stations by short codes ("VIC", "OXC") that have no
relation to NaPTAN ids, so they come from a static table rather than being
derived.
"""

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_CODES_PATH = Path(__file__).parent / "data" / "station_codes.csv"


@dataclass(frozen=True)
class CodeNotFound:
    """The station has no TrackerNet code; the feed does not cover it."""
    station_id: str


class StationCodeTable:
    """Maps canonical station ids to TrackerNet station codes."""

    def __init__(self, codes: Mapping[str, str]):
        self._codes: Dict[str, str] = dict(codes)

    @classmethod
    def from_csv_text(cls, csv_content: str) -> "StationCodeTable":
        """Parse `naptan_id,code[,name]` rows. Rows missing either key are skipped."""
        reader = csv.DictReader(io.StringIO(csv_content))
        codes: Dict[str, str] = {}

        for row in reader:
            station_id = (row.get("naptan_id") or "").strip()
            code = (row.get("code") or "").strip()
            if not station_id or not code:
                continue
            if station_id in codes and codes[station_id] != code:
                logger.warning(f"Station {station_id} listed twice, keeping {codes[station_id]}")
                continue
            codes[station_id] = code

        return cls(codes)

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> "StationCodeTable":
        """Load a station code table from a CSV file."""
        with open(path, "r", encoding="utf-8") as f:
            table = cls.from_csv_text(f.read())
        logger.debug(f"Loaded {len(table)} TrackerNet station codes from {path}")
        return table

    def legacy_code_for(self, station_id: str) -> Union[str, CodeNotFound]:
        """Get the TrackerNet code for a station, or CodeNotFound."""
        code = self._codes.get(station_id)
        if code is None:
            return CodeNotFound(station_id)
        return code

    def __contains__(self, station_id: str) -> bool:
        return station_id in self._codes

    def __len__(self) -> int:
        return len(self._codes)


def default_station_codes(path: Optional[Path] = None) -> StationCodeTable:
    """Load the packaged station code table, or the one at `path`."""
    return StationCodeTable.from_csv(path or DEFAULT_CODES_PATH)

"""tubetrack - Identify which London Underground train you are riding."""

__version__ = "0.1.0"

from .models import Line, Station, RankedStation, TrainCandidate, LocationFix, CheckIn, TrainDiscovery
from .lines import LineRegistry, default_registry
from .identifiers import Resolved, Ambiguous, Unknown, Invalid, classify
from .station_codes import StationCodeTable, CodeNotFound, default_station_codes
from .resolver import TrainResolver, build_resolver
from .tfl_client import TflClient
from .config import Settings, get_settings

__all__ = [
    "TrainResolver",
    "build_resolver",
    "TflClient",
    "LineRegistry",
    "default_registry",
    "StationCodeTable",
    "CodeNotFound",
    "default_station_codes",
    "classify",
    "Resolved",
    "Ambiguous",
    "Unknown",
    "Invalid",
    "Line",
    "Station",
    "RankedStation",
    "TrainCandidate",
    "LocationFix",
    "CheckIn",
    "TrainDiscovery",
    "Settings",
    "get_settings",
]

"""Example usage of TrainResolver."""

import logging
import sys
from pathlib import Path

# Add src to path so we can import tubetrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tubetrack.config import get_settings
from tubetrack.errors import (
    AmbiguousLineError,
    MalformedInputError,
    NotFoundError,
    TubeTrackError,
)
from tubetrack.geo import format_distance
from tubetrack.models import LocationFix
from tubetrack.resolver import build_resolver

settings = get_settings()

# Set up logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def fixed_location(lat: float, lng: float):
    """Location provider that always reports the same position."""
    def read(timeout: float, max_age: float) -> LocationFix:
        return LocationFix(lat=lat, lng=lng)
    return read


def print_nearby_trains(line_id: str, lat: float = None, lng: float = None):
    """
    List stations on a line, then trains at the nearest one.

    Args:
        line_id: Line id (e.g., "victoria")
        lat: Optional latitude of the rider
        lng: Optional longitude of the rider
    """
    location = fixed_location(lat, lng) if lat is not None and lng is not None else None
    resolver = build_resolver(settings, read_device_location=location)

    print(f"\n{'='*70}")
    print(f"Stations on: {line_id}")
    print(f"{'='*70}\n")

    try:
        stations = resolver.discover_stations(line_id)
        for ranked in stations:
            distance = format_distance(ranked.distance_meters)
            print(f"  {ranked.name:<40} {distance}")

        if not stations:
            print("  No stations found")
            return

        station = stations[0].station
        discovery = resolver.discover_trains(line_id, station)

        print(f"\nTRAINS AT {station.name.upper()}:")
        print("-" * 70)
        if discovery.no_usable_trains:
            print("  No trains with valid IDs found. Try a different station or use manual entry.")
        for train in discovery.candidates:
            eta = "Due" if train.is_due else f"{train.eta_seconds // 60} min"
            print(f"  {train.identifier}  {eta:>6} → {train.destination} ({train.current_location})")

        print("\n" + "=" * 70 + "\n")

    except NotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except TubeTrackError as e:
        logger.error(f"Failed to fetch data: {e}")
        print(f"Error: {e}")
        sys.exit(1)


def interactive_mode():
    """
    Run in interactive mode, checking in typed train numbers.
    """
    print("tubetrack - Manual check-in")
    print("Enter the 5-digit number on the front of the train, optionally followed by a line id")
    print("(Type 'quit' to exit)\n")

    resolver = build_resolver(settings)

    while True:
        try:
            user_input = input("Train number (or 'quit'): ").strip()

            if user_input.lower() in ["quit", "q", "exit"]:
                print("Goodbye!")
                break

            if not user_input:
                continue

            parts = user_input.split()
            line_id = parts[1] if len(parts) > 1 else None

            try:
                check_in = resolver.check_in(parts[0], line_id)
                how = "detected" if check_in.inferred else "selected"
                print(f"Checked in to train {check_in.identifier} on the {check_in.line.name} line ({how})\n")
            except AmbiguousLineError as e:
                print(e.message)
                print(f"  Retry with one of: {', '.join(e.candidate_line_ids)}\n")
            except (MalformedInputError, NotFoundError) as e:
                print(f"{e.message}\n")

        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            break


if __name__ == "__main__":
    if len(sys.argv) > 1:
        # Command line mode: line id, then optional latitude and longitude
        line = sys.argv[1]
        coords = [float(v) for v in sys.argv[2:4]] if len(sys.argv) >= 4 else [None, None]
        print_nearby_trains(line, *coords)
    else:
        # Interactive mode
        interactive_mode()

"""London Underground line registry."""

from typing import Dict, Iterable, List, Tuple

from .models import Line

DEFAULT_LINES: Tuple[Line, ...] = (
    Line("victoria", "V", "Victoria", "#0098D4", True, "11"),
    Line("jubilee", "J", "Jubilee", "#A0A5A9", True, "96"),
    Line("northern", "N", "Northern", "#000000", True, "51"),
    Line("central", "C", "Central", "#E32017", True, "91"),
    # Sub-surface stock shares one numbering range across four lines. Only the
    # District TrackerNet endpoint answers; the other three read it.
    Line("metropolitan", "M", "Metropolitan", "#9B0056", False, "21", feed_override_code="D"),
    Line("district", "D", "District", "#00782A", True, "21"),
    Line("hammersmith-city", "H", "Hammersmith & City", "#F3A9BB", False, "21", feed_override_code="D"),
    Line("circle", "O", "Circle", "#FFD300", False, "21", feed_override_code="D"),
    Line("bakerloo", "B", "Bakerloo", "#B36305", False, ""),
    Line("piccadilly", "P", "Piccadilly", "#003688", False, ""),
)

# TrackerNet line code -> line id
LINE_CODE_MAP: Dict[str, str] = {
    "V": "victoria",
    "J": "jubilee",
    "N": "northern",
    "C": "central",
    "M": "metropolitan",
    "D": "district",
    "H": "hammersmith-city",
    "O": "circle",
    "B": "bakerloo",
    "P": "piccadilly",
}


class LineRegistry:
    """Read-only catalogue of lines, in declaration order."""

    def __init__(self, lines: Iterable[Line], code_map: Dict[str, str] = None):
        self._lines: Tuple[Line, ...] = tuple(lines)
        self._by_id: Dict[str, Line] = {}
        for line in self._lines:
            if line.id in self._by_id:
                raise ValueError(f"Duplicate line id {line.id}")
            self._by_id[line.id] = line

        if code_map is None:
            code_map = {line.display_code: line.id for line in self._lines}
        self._code_map: Dict[str, str] = dict(code_map)

    def line_by_id(self, line_id: str) -> Line:
        """Get a line by id. Ids come from a closed set, so a miss is a KeyError."""
        return self._by_id[line_id]

    def line_by_legacy_code(self, code: str) -> Line:
        """Get a line by its single-letter TrackerNet code."""
        return self._by_id[self._code_map[code]]

    def lines_with_reliable_live_feed(self) -> List[Line]:
        """Lines whose TrackerNet feed reports leading car numbers."""
        return [line for line in self._lines if line.live_feed_reliable]

    def lines_with_prefix(self, prefix: str) -> List[Line]:
        """Lines whose identifier prefix equals `prefix`. Empty prefixes never match."""
        if not prefix:
            return []
        return [line for line in self._lines if line.id_prefix == prefix]

    def all_lines(self) -> List[Line]:
        return list(self._lines)

    def __contains__(self, line_id: str) -> bool:
        return line_id in self._by_id

    def __len__(self) -> int:
        return len(self._lines)


def default_registry() -> LineRegistry:
    """Build the registry of Underground lines."""
    return LineRegistry(DEFAULT_LINES, LINE_CODE_MAP)

"""Leading car number validation and line inference."""

import re
from dataclasses import dataclass
from typing import Tuple, Union

from .lines import LineRegistry
from .models import Line

IDENTIFIER_PATTERN = re.compile(r"\d{5}", re.ASCII)
PREFIX_LENGTH = 2


@dataclass(frozen=True)
class Resolved:
    """The prefix belongs to exactly one line."""
    line_id: str


@dataclass(frozen=True)
class Ambiguous:
    """The prefix is shared; the rider must pick one of these lines."""
    candidate_line_ids: Tuple[str, ...]


@dataclass(frozen=True)
class Unknown:
    """No line uses the prefix."""
    prefix: str


@dataclass(frozen=True)
class Invalid:
    """The input is not a 5-digit identifier."""
    reason: str = "malformed"


ClassificationResult = Union[Resolved, Ambiguous, Unknown, Invalid]


def is_well_formed(identifier: str) -> bool:
    """True if `identifier` is exactly five ASCII digits."""
    return IDENTIFIER_PATTERN.fullmatch(identifier) is not None


def classify(identifier: str, registry: LineRegistry) -> ClassificationResult:
    """
    Infer the line a train belongs to from its leading car number.

    Args:
        identifier: Typed or parsed leading car number.
        registry: Line registry holding the prefix table.

    Returns:
        Resolved, Ambiguous, Unknown, or Invalid. Depends only on the registry
        and the first two digits.
    """
    if not is_well_formed(identifier):
        return Invalid()

    prefix = identifier[:PREFIX_LENGTH]
    lines = registry.lines_with_prefix(prefix)

    if not lines:
        return Unknown(prefix)
    if len(lines) == 1:
        return Resolved(lines[0].id)
    return Ambiguous(tuple(line.id for line in lines))


def matches_line(identifier: str, line: Line) -> bool:
    """True if the identifier is plausible for a line with a reliable feed."""
    if not line.live_feed_reliable or not line.id_prefix:
        return False
    return is_well_formed(identifier) and identifier.startswith(line.id_prefix)

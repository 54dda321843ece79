"""Typed errors for the tubetrack resolution engine.

Every error carries the line, station or identifier it concerns so callers
can render a precise message. All errors inherit from TubeTrackError and can
optionally wrap the exception that caused them.

Taxonomy:
    MalformedInputError       bad identifier shape, re-prompt
    AmbiguousLineError        several lines share the prefix, ask for a line
    NotFoundError             unknown prefix, line id or station code
    UpstreamUnavailableError  network or non-timeout HTTP failure
    UpstreamTimeoutError      upstream did not answer in time
    MissingCredentialsError   API key missing or rejected
    LocationError             device position could not be read
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class TubeTrackError(Exception):
    """Base error for the resolution engine.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class MalformedInputError(TubeTrackError):
    """Input does not have the expected shape."""


@dataclass
class MalformedIdentifierError(MalformedInputError):
    """A train identifier is not exactly five digits.

    Attributes:
        identifier: The rejected input
    """

    identifier: str = ""


@dataclass
class AmbiguousLineError(TubeTrackError):
    """The identifier prefix is shared by several lines.

    Attributes:
        identifier: The identifier being checked in
        candidate_line_ids: Lines the identifier could belong to, in registry order
    """

    identifier: str = ""
    candidate_line_ids: Tuple[str, ...] = ()


@dataclass
class NotFoundError(TubeTrackError):
    """A referenced resource is not known."""


@dataclass
class UnknownLineError(NotFoundError):
    """No line uses the identifier's prefix.

    Attributes:
        identifier: The identifier being checked in
        prefix: The two-digit prefix that matched nothing
    """

    identifier: str = ""
    prefix: str = ""


@dataclass
class UnregisteredLineError(NotFoundError):
    """A line id is not in the registry.

    Attributes:
        line_id: The id that was asked for
    """

    line_id: str = ""


@dataclass
class UnsupportedStationError(NotFoundError):
    """The station has no TrackerNet code.

    Attributes:
        station_id: Canonical station id
        station_name: Display name of the station
    """

    station_id: str = ""
    station_name: str = ""


@dataclass
class UpstreamUnavailableError(TubeTrackError):
    """An upstream service failed or returned an unusable response.

    Attributes:
        path: API path that was requested
        status: HTTP status code, if a response was received
    """

    path: str = ""
    status: Optional[int] = None


@dataclass
class StationDirectoryError(UpstreamUnavailableError):
    """The station list for a line could not be fetched.

    Attributes:
        line_id: Line whose stations were requested
    """

    line_id: str = ""


@dataclass
class FeedUnavailableError(UpstreamUnavailableError):
    """The TrackerNet feed returned a non-success status or failed to connect."""


@dataclass
class MalformedFeedError(UpstreamUnavailableError):
    """The TrackerNet feed returned markup that could not be parsed."""


@dataclass
class UpstreamTimeoutError(TubeTrackError):
    """An upstream service did not answer in time.

    Attributes:
        path: API path that was requested
        timeout_seconds: The bound that was exceeded
    """

    path: str = ""
    timeout_seconds: float = 0.0


@dataclass
class FeedTimeoutError(UpstreamTimeoutError):
    """The TrackerNet feed did not answer in time; the line may not support it."""


@dataclass
class MissingCredentialsError(TubeTrackError):
    """The API rejected the request for lack of a valid application key.

    Attributes:
        path: API path that was requested
        status: 401 or 403
    """

    path: str = ""
    status: Optional[int] = None


@dataclass
class LocationError(TubeTrackError):
    """The device position could not be read.

    Attributes:
        reason: One of "unsupported", "permission_denied", "unavailable", "timeout"
    """

    reason: str = "unavailable"


@dataclass
class ConfigurationError(TubeTrackError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
    """

    setting_name: str = ""

"""TfL API client: station directory, TrackerNet feed, and arrivals."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .config import Settings, get_settings
from .errors import (
    FeedTimeoutError,
    FeedUnavailableError,
    MissingCredentialsError,
    StationDirectoryError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from .models import Station

logger = logging.getLogger(__name__)

STATION_NAME_SUFFIX = " Underground Station"
CREDENTIAL_STATUSES = (401, 403)
FEED_CHUNK_SIZE = 8192


class TflClient:
    """Fetches raw data from the TfL Unified API and TrackerNet."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the client.

        Args:
            settings: Engine settings. Defaults to the process-wide settings.
            session: Optional requests session, e.g. for connection reuse or tests.
            clock: Monotonic seconds, used for the TrackerNet deadline.
        """
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self._base_url = self.settings.api_base_url.rstrip("/")
        self._clock = clock

        if not self.settings.app_key:
            logger.warning("TfL app key not set. TrackerNet requests will be rejected.")

    def _get(self, path: str, timeout: float, stream: bool = False) -> requests.Response:
        """Issue a GET. The app key goes in the query string, never in logs."""
        params = {"app_key": self.settings.app_key} if self.settings.app_key else None
        logger.debug(f"Fetching {path}")
        return self.session.get(f"{self._base_url}{path}", params=params, timeout=timeout, stream=stream)

    def get_stations_for_line(self, line_id: str) -> List[Station]:
        """
        Fetch every station on a line.

        Args:
            line_id: Line id, e.g. "victoria".

        Returns:
            Stations in the order the API lists them.

        Raises:
            StationDirectoryError: On any network, HTTP, or decoding failure.
        """
        path = f"/Line/{line_id}/StopPoints"
        timeout = self.settings.directory_timeout_seconds

        try:
            response = self._get(path, timeout)
        except requests.Timeout as e:
            raise StationDirectoryError(
                f"Timed out loading stations for {line_id}", cause=e, path=path, line_id=line_id
            ) from e
        except requests.RequestException as e:
            raise StationDirectoryError(
                f"Failed to fetch stations for {line_id}", cause=e, path=path, line_id=line_id
            ) from e

        if not response.ok:
            logger.warning(f"Station directory returned {response.status_code} for {line_id}")
            raise StationDirectoryError(
                f"Failed to fetch stations: {response.reason}",
                path=path,
                status=response.status_code,
                line_id=line_id,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise StationDirectoryError(
                f"Station directory returned invalid JSON for {line_id}",
                cause=e,
                path=path,
                status=response.status_code,
                line_id=line_id,
            ) from e

        stations = [self._parse_stop_point(s, line_id) for s in data]
        logger.debug(f"Loaded {len(stations)} stations for {line_id}")
        return stations

    @staticmethod
    def _parse_stop_point(stop_point: Dict[str, Any], line_id: str) -> Station:
        """Convert a Unified API StopPoint into a Station."""
        name = stop_point.get("commonName") or ""
        if name.endswith(STATION_NAME_SUFFIX):
            name = name[: -len(STATION_NAME_SUFFIX)]

        lines = [line.get("id") for line in stop_point.get("lines") or [] if line.get("id")]

        return Station(
            id=stop_point.get("naptanId") or stop_point.get("id") or "",
            name=name,
            lat=float(stop_point.get("lat") or 0.0),
            lng=float(stop_point.get("lon") or 0.0),
            lines=frozenset(lines or [line_id]),
        )

    def get_trackernet(self, line_code: str, station_code: str) -> bytes:
        """
        Fetch the TrackerNet PredictionDetailed document for a station.

        The feed timeout bounds the whole exchange, body included. A server
        that keeps trickling bytes past the deadline is treated as timed out.

        Args:
            line_code: Single-letter TrackerNet line code.
            station_code: TrackerNet station code, e.g. "OXC".

        Returns:
            Raw XML bytes, left for the parser to decode.

        Raises:
            FeedTimeoutError: If TrackerNet does not answer within the feed timeout.
            MissingCredentialsError: On HTTP 401 or 403.
            FeedUnavailableError: On any other failure.
        """
        path = f"/TrackerNet/PredictionDetailed/{line_code}/{station_code}"
        timeout = self.settings.feed_timeout_seconds
        started = self._clock()

        try:
            response = self._get(path, timeout, stream=True)
        except requests.Timeout as e:
            raise self._feed_timeout(path, timeout, line_code, station_code, cause=e) from e
        except requests.RequestException as e:
            raise FeedUnavailableError("Failed to reach TrackerNet", cause=e, path=path) from e

        try:
            logger.debug(f"TrackerNet responded {response.status_code}")

            if response.status_code in CREDENTIAL_STATUSES:
                raise MissingCredentialsError(
                    "TfL API key required for TrackerNet access",
                    path=path,
                    status=response.status_code,
                )
            if not response.ok:
                raise FeedUnavailableError(
                    f"Failed to fetch TrackerNet data: {response.reason}",
                    path=path,
                    status=response.status_code,
                )

            chunks = []
            try:
                for chunk in response.iter_content(chunk_size=FEED_CHUNK_SIZE):
                    chunks.append(chunk)
                    if self._clock() - started > timeout:
                        raise self._feed_timeout(path, timeout, line_code, station_code)
            except requests.Timeout as e:
                raise self._feed_timeout(path, timeout, line_code, station_code, cause=e) from e
            except requests.RequestException as e:
                raise FeedUnavailableError("TrackerNet response was cut short", cause=e, path=path) from e

            return b"".join(chunks)
        finally:
            response.close()

    @staticmethod
    def _feed_timeout(
        path: str,
        timeout: float,
        line_code: str,
        station_code: str,
        cause: Optional[Exception] = None,
    ) -> FeedTimeoutError:
        logger.warning(f"TrackerNet timed out after {timeout}s for {line_code}/{station_code}")
        return FeedTimeoutError(
            "Request timed out. This line may not support real-time train data.",
            cause=cause,
            path=path,
            timeout_seconds=timeout,
        )

    def get_station_arrivals(self, station_id: str) -> List[Dict[str, Any]]:
        """
        Fetch Unified API arrival predictions at a station.

        Raises:
            UpstreamTimeoutError: If the API does not answer in time.
            MissingCredentialsError: On HTTP 401 or 403.
            UpstreamUnavailableError: On any other failure.
        """
        path = f"/StopPoint/{station_id}/Arrivals"
        timeout = self.settings.feed_timeout_seconds

        try:
            response = self._get(path, timeout)
        except requests.Timeout as e:
            raise UpstreamTimeoutError(
                f"Timed out loading arrivals for {station_id}",
                cause=e,
                path=path,
                timeout_seconds=timeout,
            ) from e
        except requests.RequestException as e:
            raise UpstreamUnavailableError(
                f"Failed to fetch arrivals for {station_id}", cause=e, path=path
            ) from e

        if response.status_code in CREDENTIAL_STATUSES:
            raise MissingCredentialsError(
                "TfL API key rejected", path=path, status=response.status_code
            )
        if not response.ok:
            raise UpstreamUnavailableError(
                f"Failed to fetch station arrivals: {response.reason}",
                path=path,
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(
                f"Arrivals for {station_id} were not valid JSON",
                cause=e,
                path=path,
                status=response.status_code,
            ) from e

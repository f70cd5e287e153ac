"""REST access to LCP/NAP location records.

The backend answers `GET /lcp-nap-locations` with an envelope
`{"success": bool, "data": [...], "message": str}`. Transport and
envelope failures are reported as an unsuccessful `FetchResult` rather
than raised.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from loguru import logger
import requests

from core.models import FetchResult, LocationRecord, SessionCounts
from core.services.coordinate_parser import parse_coordinates
from core.services.interfaces import FetchError, ILocationRepository

KNOWN_FIELDS = {
    "id",
    "lcpnap_name",
    "lcp_name",
    "nap_name",
    "coordinates",
    "street",
    "barangay",
    "city",
    "region",
    "port_total",
    "reading_image_url",
    "image1_url",
    "image2_url",
    "modified_by",
    "modified_date",
    "active_sessions",
    "inactive_sessions",
    "offline_sessions",
    "blocked_sessions",
    "not_found_sessions",
}


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _opt_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid integer value: {}", value)
        return None


def record_from_payload(item: dict[str, Any]) -> LocationRecord:
    """Build a `LocationRecord` from one backend row.

    Raises:
        ValueError: If the row has no id.
    """
    if item.get("id") is None:
        raise ValueError("location row without id")

    raw = item.get("coordinates") or ""
    sub_groups = tuple(_opt_str(item.get(k)) or "" for k in ("lcp_name", "nap_name"))
    return LocationRecord(
        id=item["id"],
        group_name=str(item.get("lcpnap_name") or ""),
        raw_coordinates=str(raw),
        point=parse_coordinates(str(raw)),
        sub_group_names=sub_groups,
        street=_opt_str(item.get("street")),
        barangay=_opt_str(item.get("barangay")),
        city=_opt_str(item.get("city")),
        region=_opt_str(item.get("region")),
        port_total=_opt_int(item.get("port_total")),
        reading_image_url=_opt_str(item.get("reading_image_url")),
        image1_url=_opt_str(item.get("image1_url")),
        image2_url=_opt_str(item.get("image2_url")),
        modified_by=_opt_str(item.get("modified_by")),
        modified_date=_opt_str(item.get("modified_date")),
        sessions=SessionCounts(
            active=_opt_int(item.get("active_sessions")) or 0,
            offline=_opt_int(item.get("offline_sessions")) or 0,
            inactive=_opt_int(item.get("inactive_sessions")) or 0,
            blocked=_opt_int(item.get("blocked_sessions")) or 0,
            not_found=_opt_int(item.get("not_found_sessions")) or 0,
        ),
        extra={k: v for k, v in item.items() if k not in KNOWN_FIELDS},
    )


def parse_records(rows: Iterable[Any]) -> Iterator[LocationRecord]:
    """Yield records from backend rows, skipping malformed ones."""
    for row in rows:
        if not isinstance(row, dict):
            logger.error("Location row is not an object: {}", row)
            continue
        try:
            yield record_from_payload(row)
        except (ValueError, TypeError, KeyError) as ex:
            logger.error("Location row error: {} | row={}", ex, row)
            continue


class RestLocationRepository(ILocationRepository):
    """Load location records from the operations backend."""

    def __init__(
        self,
        base_url: str,
        endpoint: str = "/lcp-nap-locations",
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Create a repository.

        Args:
            base_url: API root, e.g. `http://host/api`.
            endpoint: Path of the location list endpoint.
            timeout: Request timeout in seconds; None waits indefinitely.
            session: Optional preconfigured session (auth headers etc.).
        """
        self._url = base_url.rstrip("/") + "/" + endpoint.lstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return self._url

    def fetch(self) -> FetchResult:
        """Fetch and parse all location records."""
        try:
            rows, message = self._load_rows()
        except FetchError as ex:
            logger.error("Location fetch failed: {}", ex)
            return FetchResult(success=False, message=str(ex))

        records = list(parse_records(rows))
        logger.info("Fetched {} location rows from {}", len(records), self._url)
        return FetchResult(success=True, records=records, message=message)

    def _load_rows(self) -> tuple[list, str | None]:
        """Return the envelope's data rows and message.

        Raises:
            FetchError: Transport failure, invalid JSON or an unsuccessful envelope.
        """
        try:
            response = self._session.get(
                self._url, timeout=self._timeout, headers={"Accept": "application/json"}
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as ex:
            raise FetchError(str(ex)) from ex
        except ValueError as ex:
            logger.debug("Invalid JSON from {}: {}", self._url, ex)
            raise FetchError("Invalid response from server") from ex

        if not isinstance(payload, dict) or not payload.get("success"):
            message = payload.get("message") if isinstance(payload, dict) else None
            raise FetchError(message or "Request was not successful")

        rows = payload.get("data") or []
        if not isinstance(rows, list):
            raise FetchError("Invalid response from server")
        return rows, payload.get("message")

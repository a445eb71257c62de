from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable

import httpx

from vaxbot.config import BASE_URL
from vaxbot.domain import AvailabilityResult, BookingData, FatalCheckError, UpstreamDegradedError

logger = logging.getLogger(__name__)


def build_booking_url(center_id: str, base_url: str = BASE_URL) -> str:
    return f"{base_url}/booking/{center_id}.json"


def build_availabilities_url(base_url: str = BASE_URL) -> str:
    return f"{base_url}/availabilities.json"


def _iso_now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _join_ids(ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in ids)


def fetch_booking_data(client: httpx.Client, center_id: str, *, base_url: str = BASE_URL) -> BookingData:
    url = build_booking_url(center_id, base_url)

    try:
        r = client.get(url)
        r.raise_for_status()
        return BookingData.from_json(r.json())
    except httpx.HTTPError as e:
        raise FatalCheckError(f"Failed to fetch booking data for {center_id}: {e}", center_id=center_id) from e
    except (KeyError, TypeError, ValueError) as e:
        raise FatalCheckError(
            f"Unexpected booking data for {center_id} ({type(e).__name__}: {e})", center_id=center_id
        ) from e


def build_availability_params(
    visit_motive_ids: Iterable[int],
    agenda_ids: Iterable[int],
    practice_ids: Iterable[int],
    *,
    start_date: str | None = None,
) -> dict[str, str]:
    return {
        "start_date": start_date or _iso_now(),
        "visit_motive_ids": _join_ids(visit_motive_ids),
        "agenda_ids": _join_ids(agenda_ids),
        "practice_ids": _join_ids(practice_ids),
        "insurance_sector": "public",
        "destroy_temporary": "true",
        # Page size only; "total" counts every matching slot.
        "limit": "2",
    }


def _request_availability(client: httpx.Client, url: str, params: dict[str, str]) -> AvailabilityResult:
    try:
        # Doctolib expects the parameters as a form body even on GET.
        r = client.request("GET", url, data=params)
    except httpx.HTTPError as e:
        raise FatalCheckError(
            f"Availability request failed for practice_ids={params['practice_ids']}: {e}"
        ) from e

    if not r.is_success:
        raise UpstreamDegradedError(r.status_code, r.text, params)

    try:
        return AvailabilityResult.from_json(r.json())
    except (KeyError, TypeError, ValueError) as e:
        raise FatalCheckError(
            f"Unexpected availability response for practice_ids={params['practice_ids']} ({type(e).__name__}: {e})"
        ) from e


def query_availability(
    client: httpx.Client,
    visit_motive_ids: Iterable[int],
    agenda_ids: Iterable[int],
    practice_ids: Iterable[int],
    *,
    base_url: str = BASE_URL,
    now: dt.datetime | None = None,
) -> AvailabilityResult:
    """Ask Doctolib how many slots match the motives/agendas/practices right now.

    A rejected request (non-2xx) counts as zero slots; transport failures and
    undecodable bodies raise :class:`FatalCheckError`.
    """

    params = build_availability_params(
        visit_motive_ids,
        agenda_ids,
        practice_ids,
        start_date=now.astimezone(dt.timezone.utc).isoformat() if now is not None else None,
    )

    try:
        return _request_availability(client, build_availabilities_url(base_url), params)
    except UpstreamDegradedError as e:
        logger.warning(
            "Availability request was not a success: status=%s params=%s body=%r",
            e.status_code,
            e.params,
            e.body,
        )
        return AvailabilityResult.degraded()

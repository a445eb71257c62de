from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from vaxbot.config import Settings
from vaxbot.doctolib import fetch_booking_data, query_availability
from vaxbot.domain import FatalCheckError, Place, RunReport
from vaxbot.filters import select_eligible_agendas, select_eligible_motives
from vaxbot.http_client import new_client

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


def _describe_place(place: Place) -> str:
    return f"Place={place.formal_name} Zip={place.zipcode} Address={place.address}"


def check_center(client: httpx.Client, settings: Settings, center_id: str, *, sleep: Sleep = time.sleep) -> int:
    """Check every place of one center and return the number of open slots found."""

    booking = fetch_booking_data(client, center_id, base_url=settings.base_url)

    motives = select_eligible_motives(
        booking.visit_motives,
        marker=settings.marker_substring,
        excluded=settings.excluded_substring,
    )
    logger.debug("Checking center: %s found motives: %s", center_id, [m.name for m in motives])

    if not motives:
        logger.debug("No motives found for %s", center_id)
        return 0

    visit_motive_ids = [m.id for m in motives]
    found = 0

    try:
        for place in booking.places:
            practice_id = place.primary_practice_id
            agendas = select_eligible_agendas(booking.agendas, practice_id, visit_motive_ids)

            if not agendas:
                logger.debug("No agendas found for %s (practice_id=%s)", place.formal_name, practice_id)
                continue

            availability = query_availability(
                client,
                visit_motive_ids,
                [a.id for a in agendas],
                [practice_id],
                base_url=settings.base_url,
            )
            found += availability.total

            if availability.total > 0:
                logger.warning(
                    "FOUND AVAILABLE SLOTS. Total=%d Message=%s %s",
                    availability.total,
                    availability.message,
                    _describe_place(place),
                )
            else:
                logger.debug("No available slots. Reason=%s %s", availability.message, _describe_place(place))

            sleep(settings.place_pause_ms / 1000)
    except FatalCheckError as e:
        e.center_id = e.center_id or center_id
        e.partial_total = found
        raise

    return found


def _check_all_centers(client: httpx.Client, settings: Settings, sleep: Sleep) -> RunReport:
    report = RunReport()

    for center_id in settings.centers:
        try:
            report.per_center[center_id] = check_center(client, settings, center_id, sleep=sleep)
        except FatalCheckError as e:
            if not settings.isolate_center_failures:
                raise
            logger.error(
                "Center %s failed after %d slots (%s: %s)", center_id, e.partial_total, type(e).__name__, e
            )
            report.per_center[center_id] = e.partial_total
            report.failed_centers.append(center_id)

        sleep(settings.center_pause_ms / 1000)

    return report


def run_check_once(
    settings: Settings,
    *,
    client: httpx.Client | None = None,
    sleep: Sleep = time.sleep,
) -> RunReport:
    logger.info("Checking %d centers", len(settings.centers))

    if client is not None:
        report = _check_all_centers(client, settings, sleep)
    else:
        try:
            owned = new_client(settings)
        except Exception as e:
            raise FatalCheckError(f"Failed to set up HTTP client ({type(e).__name__}: {e})") from e
        with owned:
            report = _check_all_centers(owned, settings, sleep)

    logger.info(
        "Run finished: total=%d centers=%d failed=%d",
        report.total,
        len(report.per_center),
        len(report.failed_centers),
    )
    return report

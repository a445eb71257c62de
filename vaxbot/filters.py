from __future__ import annotations

from typing import Iterable

from vaxbot.config import EXCLUDED_BRAND, FIRST_DOSE_MARKER
from vaxbot.domain import Agenda, VisitMotive


def select_eligible_motives(
    motives: Iterable[VisitMotive],
    *,
    marker: str = FIRST_DOSE_MARKER,
    excluded: str = EXCLUDED_BRAND,
) -> list[VisitMotive]:
    # Case-sensitive substring match on Doctolib's motive names; the exclusion wins.
    return [m for m in motives if marker in m.name and excluded not in m.name]


def select_eligible_agendas(
    agendas: Iterable[Agenda],
    practice_id: int,
    eligible_motive_ids: Iterable[int],
) -> list[Agenda]:
    motive_ids = set(eligible_motive_ids)
    if not motive_ids:
        return []

    return [
        a
        for a in agendas
        if a.practice_id == practice_id
        and not a.booking_disabled
        and not motive_ids.isdisjoint(a.visit_motive_ids)
    ]

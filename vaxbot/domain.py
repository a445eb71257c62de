from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class VisitMotive:
    id: int
    name: str

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> VisitMotive:
        return cls(id=int(raw["id"]), name=str(raw["name"]))


@dataclass(frozen=True)
class Place:
    id: str
    address: str
    zipcode: str
    city: str
    formal_name: str
    full_address: str
    practice_ids: tuple[int, ...]

    @property
    def primary_practice_id(self) -> int:
        # 0 never matches a real agenda, so a place without practices yields no agendas.
        return self.practice_ids[0] if self.practice_ids else 0

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> Place:
        return cls(
            id=str(raw["id"]),
            address=raw["address"] or "",
            zipcode=raw["zipcode"] or "",
            city=raw["city"] or "",
            formal_name=raw["formal_name"] or "",
            full_address=raw["full_address"] or "",
            practice_ids=tuple(int(p) for p in raw["practice_ids"]),
        )


@dataclass(frozen=True)
class Agenda:
    id: int
    booking_disabled: bool
    # Decoded but not used for filtering.
    booking_temporary_disabled: bool
    visit_motive_ids: tuple[int, ...]
    practice_id: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> Agenda:
        return cls(
            id=int(raw["id"]),
            booking_disabled=bool(raw["booking_disabled"]),
            booking_temporary_disabled=bool(raw["booking_temporary_disabled"]),
            visit_motive_ids=tuple(int(m) for m in raw["visit_motive_ids"]),
            practice_id=int(raw["practice_id"]),
        )


@dataclass(frozen=True)
class BookingData:
    """Booking configuration of one center (the ``data`` object of ``/booking/<center>.json``)."""

    visit_motives: tuple[VisitMotive, ...]
    places: tuple[Place, ...]
    agendas: tuple[Agenda, ...]

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> BookingData:
        if not isinstance(raw, Mapping):
            raise TypeError(f"Expected a JSON object, got {type(raw).__name__}")
        data = raw["data"]
        return cls(
            visit_motives=tuple(VisitMotive.from_json(m) for m in data["visit_motives"]),
            places=tuple(Place.from_json(p) for p in data["places"]),
            agendas=tuple(Agenda.from_json(a) for a in data["agendas"]),
        )


@dataclass(frozen=True)
class AvailabilityResult:
    """Answer of ``/availabilities.json``.

    Only ``total`` drives decisions; the other fields end up in log lines.
    """

    total: int
    reason: str | None = None
    message: str | None = None
    number_future_vaccinations: int | None = None

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> AvailabilityResult:
        if not isinstance(raw, Mapping):
            raise TypeError(f"Expected a JSON object, got {type(raw).__name__}")
        future = raw.get("number_future_vaccinations")
        return cls(
            total=int(raw["total"]),
            reason=raw.get("reason"),
            message=raw.get("message"),
            number_future_vaccinations=int(future) if future is not None else None,
        )

    @classmethod
    def degraded(cls) -> AvailabilityResult:
        return cls(
            total=0,
            reason="Error performing request",
            message="Error performing request",
            number_future_vaccinations=0,
        )


@dataclass
class RunReport:
    # center id -> slots found, in visit order
    per_center: dict[str, int] = field(default_factory=dict)
    failed_centers: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.per_center.values())

    @property
    def found(self) -> bool:
        return self.total > 0


class FatalCheckError(RuntimeError):
    """The run can't go on: host unreachable, booking data rejected or undecodable."""

    def __init__(self, message: str, *, center_id: str | None = None):
        super().__init__(message)
        self.center_id = center_id
        # slots already counted at this center before the failure
        self.partial_total = 0


class UpstreamDegradedError(RuntimeError):
    """Doctolib rejected an availability query (429, 5xx, ...).

    Штатная ситуация: такой ответ считается "слотов нет" и не прерывает проверку.
    """

    def __init__(self, status_code: int, body: str, params: Mapping[str, str]):
        super().__init__(f"Availability request failed with HTTP {status_code}")
        self.status_code = status_code
        self.body = body
        self.params = dict(params)
